"""School endpoints: submit a record and list every stored record.

The POST ``/api/schools`` handler runs these steps in order, leaving early
once validation fails:

1. Ensure the ``schools`` table exists.
2. Parse the multipart body into text fields plus an optional image part.
3. Re-validate the fields with the shared schema.
4. Persist the image (best effort; failure means ``image = null``).
5. Insert the record and answer with its id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile
from starlette.formparsers import MultiPartException

from school_directory.controllers.dependencies import GatewayDep, ImageStoreDep
from school_directory.services.image_store import UploadedImage
from school_directory.services.school_gateway import StorageError
from school_directory.telemetry import record_submission
from school_directory.views import (
    SCHOOL_FIELDS,
    FailureResponse,
    SchoolCreatedResponse,
    SchoolListResponse,
    SchoolValidationError,
    validate_school,
)

router = APIRouter(prefix="/api/schools", tags=["schools"])

logger = logging.getLogger(__name__)


class SubmissionParseError(ValueError):
    """Raised when the request body cannot be read as form data."""


@dataclass(slots=True)
class ParsedSubmission:
    """Text fields and optional file part read from a submission body."""

    fields: dict[str, Optional[str]]
    image: Optional[UploadedImage]


async def _read_image(part: object) -> Optional[UploadedImage]:
    if not isinstance(part, UploadFile):
        return None

    data = await part.read()
    await part.close()
    if not data and not part.filename:
        return None
    return UploadedImage(data=data, filename=part.filename, content_type=part.content_type)


async def parse_submission(request: Request) -> ParsedSubmission:
    """Pull the known text fields and the ``image`` file part out of the body.

    Text fields that arrive as file parts are treated as missing rather than
    coerced, so validation reports them.
    """

    try:
        form = await request.form()
    except (MultiPartException, HTTPException) as exc:
        raise SubmissionParseError("Request body is not valid form data") from exc

    fields: dict[str, Optional[str]] = {}
    for name in SCHOOL_FIELDS:
        value = form.get(name)
        fields[name] = value if isinstance(value, str) else None

    return ParsedSubmission(fields=fields, image=await _read_image(form.get("image")))


def _failure(status_code: int, message: str, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=FailureResponse(message=message, errors=errors).to_content(),
    )


@router.post(
    "",
    response_model=SchoolCreatedResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": FailureResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": FailureResponse},
    },
)
async def create_school(
    request: Request,
    gateway: GatewayDep,
    images: ImageStoreDep,
) -> SchoolCreatedResponse | JSONResponse:
    try:
        await gateway.ensure_table()
    except StorageError:
        record_submission("failed")
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to add school")

    try:
        parsed = await parse_submission(request)
    except SubmissionParseError as exc:
        record_submission("invalid")
        return _failure(status.HTTP_400_BAD_REQUEST, str(exc))

    try:
        submission = validate_school(parsed.fields)
    except SchoolValidationError as exc:
        logger.info("Rejected school submission: %s", exc)
        record_submission("invalid")
        return _failure(status.HTTP_400_BAD_REQUEST, "Validation failed", exc.errors)

    if parsed.image is None:
        logger.info("No valid image file received")
    image_path = await images.persist(parsed.image)

    try:
        school_id = await gateway.insert(submission, image_path)
    except StorageError:
        await images.discard(image_path)
        record_submission("failed")
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to add school")
    except Exception:
        await images.discard(image_path)
        record_submission("failed")
        raise

    record_submission("created")
    return SchoolCreatedResponse(id=school_id)


@router.get(
    "",
    response_model=SchoolListResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": FailureResponse}},
)
async def list_schools(gateway: GatewayDep) -> SchoolListResponse | JSONResponse:
    try:
        await gateway.ensure_table()
        schools = await gateway.list_all()
    except StorageError:
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch schools")

    return SchoolListResponse(schools=schools)
