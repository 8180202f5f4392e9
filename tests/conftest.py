"""Shared fixtures: a throwaway SQLite database and upload directory."""

from __future__ import annotations

import asyncio
import os
import shutil
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

_TMP_DIR = Path(tempfile.mkdtemp(prefix="school-directory-tests-"))
UPLOAD_DIR = _TMP_DIR / "schoolImages"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'schools.db'}"
os.environ["UPLOAD_DIRECTORY"] = str(UPLOAD_DIR)
os.environ["LOG_FILE"] = str(_TMP_DIR / "logs" / "app.log")

from fastapi.testclient import TestClient  # noqa: E402

from school_directory.database import engine  # noqa: E402
from school_directory.main import app  # noqa: E402
from school_directory.models import Base  # noqa: E402


async def _drop_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def clean_storage():
    """Start every test with no schools table and an empty image directory."""

    asyncio.run(_drop_tables())
    if UPLOAD_DIR.exists():
        shutil.rmtree(UPLOAD_DIR)
    UPLOAD_DIR.mkdir(parents=True)

    yield

    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def school_fields() -> dict[str, str]:
    return {
        "name": "Springfield Elementary",
        "address": "19 Plympton Street",
        "city": "Springfield",
        "state": "Oregon",
        "contact": "5551234567",
        "email_id": "office@springfield.edu",
    }


@pytest.fixture
def image_dir() -> Path:
    return UPLOAD_DIR
