"""Relational storage for school records."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
)
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from school_directory import database
from school_directory.models.school import School as SchoolModel
from school_directory.views.schools import SchoolRecord, SchoolSubmission

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the relational store cannot complete an operation."""


class StorageUnavailable(StorageError):
    """The store could not be reached or the connection dropped."""


class ConstraintViolation(StorageError):
    """The store rejected a value (overflow, truncation, constraint)."""


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (IntegrityError, DataError) as exc:
        logger.error("Store rejected %s: %s", operation, exc.orig)
        raise ConstraintViolation(f"Store rejected {operation}") from exc
    except (OperationalError, InterfaceError, OSError) as exc:
        logger.exception("Store unavailable during %s", operation)
        raise StorageUnavailable(f"Store unavailable during {operation}") from exc
    except DBAPIError as exc:
        logger.exception("Store error during %s", operation)
        raise StorageError(f"Store error during {operation}") from exc


class SchoolGateway:
    """Connect, ensure the table, insert and select school records.

    Every call opens its own session and closes it on exit, including when
    the statement fails, so no connection outlives an operation.
    """

    def __init__(self, engine: Optional[AsyncEngine] = None) -> None:
        self._engine = engine or database.engine
        if engine is None:
            self._sessions = database.SessionFactory
        else:
            self._sessions = async_sessionmaker(
                engine,
                expire_on_commit=False,
                class_=AsyncSession,
            )

    async def ensure_table(self) -> None:
        """Create the schools table if it is missing; a no-op otherwise."""

        with _translate_errors("table creation"):
            await database.init_models(self._engine)

    async def insert(
        self,
        submission: SchoolSubmission,
        image: Optional[str] = None,
    ) -> int:
        """Insert one record and return its assigned id."""

        school = SchoolModel(
            name=submission.name,
            address=submission.address,
            city=submission.city,
            state=submission.state,
            contact=submission.contact_number,
            image=image,
            email_id=submission.email_id,
        )
        with _translate_errors("insert"):
            async with self._sessions() as session:
                session.add(school)
                await session.commit()
                school_id = school.id

        logger.info("School inserted successfully with ID: %s", school_id)
        return school_id

    async def list_all(self) -> list[SchoolRecord]:
        """Return every record, most recently created first."""

        query = select(SchoolModel).order_by(
            SchoolModel.created_at.desc(),
            SchoolModel.id.desc(),
        )
        with _translate_errors("select"):
            async with self._sessions() as session:
                result = await session.execute(query)
                schools = result.scalars().all()

        return [SchoolRecord.model_validate(school) for school in schools]


def get_school_gateway() -> SchoolGateway:
    """Return the default gateway bound to the configured engine."""

    return _DEFAULT_GATEWAY


_DEFAULT_GATEWAY = SchoolGateway()


__all__ = [
    "SchoolGateway",
    "get_school_gateway",
    "StorageError",
    "StorageUnavailable",
    "ConstraintViolation",
]
