"""Filename derivation and best-effort writes for uploaded images."""

from __future__ import annotations

import asyncio
import re

import pytest

from school_directory.config.settings import UploadConfig
from school_directory.services.image_store import ImageStore, UploadedImage, sanitize_stem


@pytest.fixture
def store(tmp_path) -> ImageStore:
    return ImageStore(UploadConfig(directory=str(tmp_path / "images")))


@pytest.mark.parametrize(
    ("content_type", "extension"),
    [
        ("image/png", "png"),
        ("image/jpeg", "jpeg"),
        ("image/jpg", "jpeg"),
        ("image/svg+xml", "svg"),
        ("image/x-unheard-of", "jpeg"),
        ("image/webp; charset=binary", "webp"),
    ],
)
def test_extension_for_media_type(store, content_type, extension):
    assert store.extension_for(content_type) == extension


def test_extension_aliases_are_configurable(tmp_path):
    store = ImageStore(
        UploadConfig(directory=str(tmp_path), extension_aliases={}, default_extension="png")
    )

    assert store.extension_for("image/jpg") == "png"


def test_sanitize_stem():
    assert sanitize_stem("my school (front).JPG") == "my_school__front_"
    assert sanitize_stem(None) == "image"
    assert sanitize_stem("../../etc/passwd") == "passwd"


def test_build_filename_shape(store):
    filename = store.build_filename("gate photo.png", "image/png")

    assert re.fullmatch(r"\d{13}_gate_photo_school_\d{6}\.png", filename)


def test_persist_writes_under_directory(store):
    image = UploadedImage(data=b"\x89PNG data", filename="logo.png", content_type="image/png")

    public_path = asyncio.run(store.persist(image))

    assert public_path.startswith("/schoolImages/")
    written = store.directory / public_path.rsplit("/", 1)[1]
    assert written.read_bytes() == b"\x89PNG data"


@pytest.mark.parametrize(
    "image",
    [
        None,
        UploadedImage(data=b"hello", filename="notes.txt", content_type="text/plain"),
        UploadedImage(data=b"", filename="logo.png", content_type="image/png"),
        UploadedImage(data=b"data", filename="logo.png", content_type=None),
    ],
)
def test_persist_rejects_without_raising(store, image):
    assert asyncio.run(store.persist(image)) is None
    assert not store.directory.exists()


def test_write_error_returns_none(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    store = ImageStore(UploadConfig(directory=str(blocker)))
    image = UploadedImage(data=b"data", filename="logo.png", content_type="image/png")

    assert asyncio.run(store.persist(image)) is None


def test_oversize_is_advisory(tmp_path):
    store = ImageStore(UploadConfig(directory=str(tmp_path), max_bytes=4))
    image = UploadedImage(data=b"123456789", filename="big.gif", content_type="image/gif")

    assert asyncio.run(store.persist(image)).endswith(".gif")
