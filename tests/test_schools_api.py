"""Integration-style tests for the /api/schools endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from sqlalchemy.exc import InvalidRequestError

from school_directory.config.settings import UploadConfig
from school_directory.services.image_store import ImageStore, get_image_store
from school_directory.services.school_gateway import (
    ConstraintViolation,
    SchoolGateway,
    StorageUnavailable,
    get_school_gateway,
)
from school_directory.main import app

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


def _list(client) -> list[dict]:
    response = client.get("/api/schools")
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    return payload["schools"]


def test_listing_empty_table_returns_empty_list(client):
    assert _list(client) == []


def test_create_without_image_round_trips(client, school_fields):
    response = client.post("/api/schools", data=school_fields)

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert isinstance(payload["id"], int)

    [school] = _list(client)
    assert school["id"] == payload["id"]
    assert school["image"] is None
    assert school["contact"] == 5551234567
    for field in ("name", "address", "city", "state", "email_id"):
        assert school[field] == school_fields[field]


def test_create_with_image_stores_file_and_serves_it(client, school_fields, image_dir):
    response = client.post(
        "/api/schools",
        data=school_fields,
        files={"image": ("front gate.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 200

    [school] = _list(client)
    image_path = school["image"]
    assert image_path.startswith("/schoolImages/")
    assert image_path.endswith(".png")
    assert "front_gate" in image_path

    stored = list(image_dir.iterdir())
    assert [p.name for p in stored] == [image_path.rsplit("/", 1)[1]]

    served = client.get(image_path)
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_non_image_upload_is_dropped_but_record_saved(client, school_fields, image_dir):
    response = client.post(
        "/api/schools",
        data=school_fields,
        files={"image": ("notes.txt", b"plain text", "text/plain")},
    )

    assert response.status_code == 200
    [school] = _list(client)
    assert school["image"] is None
    assert list(image_dir.iterdir()) == []


def test_empty_image_upload_is_dropped(client, school_fields):
    response = client.post(
        "/api/schools",
        data=school_fields,
        files={"image": ("empty.png", b"", "image/png")},
    )

    assert response.status_code == 200
    assert _list(client)[0]["image"] is None


def test_image_write_failure_does_not_block_insert(client, school_fields, tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("occupied")
    app.dependency_overrides[get_image_store] = lambda: ImageStore(
        UploadConfig(directory=str(blocker))
    )

    response = client.post(
        "/api/schools",
        data=school_fields,
        files={"image": ("logo.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 200
    assert _list(client)[0]["image"] is None


@pytest.mark.parametrize("field", ["name", "address", "city", "state", "contact", "email_id"])
def test_empty_required_field_is_rejected_without_insert(client, school_fields, field):
    school_fields[field] = ""

    response = client.post("/api/schools", data=school_fields)

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "Validation failed"
    assert field in {error["field"] for error in payload["errors"]}
    assert _list(client) == []


def test_oversized_name_is_rejected_without_insert(client, school_fields):
    school_fields["name"] = "x" * 201

    response = client.post("/api/schools", data=school_fields)

    assert response.status_code == 400
    assert _list(client) == []


def test_missing_fields_are_reported_together(client):
    response = client.post("/api/schools", data={"name": "Only a name"})

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"address", "city", "state", "contact", "email_id"}


def test_listing_is_newest_first(client, school_fields):
    ids = []
    for name in ("First", "Second", "Third"):
        school_fields["name"] = name
        ids.append(client.post("/api/schools", data=school_fields).json()["id"])

    assert ids == sorted(ids)
    assert [school["name"] for school in _list(client)] == ["Third", "Second", "First"]


class _BrokenGateway(SchoolGateway):
    def __init__(self, error: Exception, *, fail_ensure: bool = False) -> None:
        super().__init__()
        self.error = error
        self.fail_ensure = fail_ensure

    async def ensure_table(self) -> None:
        if self.fail_ensure:
            raise self.error

    async def insert(self, submission, image=None) -> int:
        raise self.error

    async def list_all(self):
        raise self.error


def test_storage_failure_on_insert_returns_generic_error(client, school_fields, image_dir):
    app.dependency_overrides[get_school_gateway] = lambda: _BrokenGateway(
        ConstraintViolation("too big")
    )

    response = client.post(
        "/api/schools",
        data=school_fields,
        files={"image": ("logo.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to add school"}
    # The image written before the failed insert is cleaned up.
    assert list(image_dir.iterdir()) == []


def test_unreachable_store_fails_submission(client, school_fields):
    app.dependency_overrides[get_school_gateway] = lambda: _BrokenGateway(
        StorageUnavailable("down"), fail_ensure=True
    )

    response = client.post("/api/schools", data=school_fields)

    assert response.status_code == 500
    assert response.json()["success"] is False


def test_unreachable_store_fails_listing(client):
    app.dependency_overrides[get_school_gateway] = lambda: _BrokenGateway(
        StorageUnavailable("down")
    )

    response = client.get("/api/schools")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to fetch schools"}


def test_health_and_metrics(client, school_fields):
    client.post("/api/schools", data=school_fields)

    assert client.get("/health").json()["status"] == "healthy"
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "school_submissions_total" in metrics.text


def _request_routes() -> set[str]:
    return {
        sample.labels["route"]
        for metric in REGISTRY.collect()
        for sample in metric.samples
        if sample.name == "http_requests_total"
    }


def test_request_metrics_keep_route_labels_bounded(client):
    for index in range(3):
        client.get(f"/schoolImages/missing{index}.png")
        client.get(f"/nope/{index}")
    client.get("/api/schools")

    routes = _request_routes()

    assert "/schoolImages" in routes
    assert "unmatched" in routes
    assert "/api/schools" in routes
    assert not any("missing" in route or route.startswith("/nope") for route in routes)


def test_unexpected_insert_error_still_removes_image(school_fields, image_dir):
    app.dependency_overrides[get_school_gateway] = lambda: _BrokenGateway(
        InvalidRequestError("session misuse")
    )

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.post(
            "/api/schools",
            data=school_fields,
            files={"image": ("logo.png", PNG_BYTES, "image/png")},
        )

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}
    assert list(image_dir.iterdir()) == []
