"""Tests for plant photo storage."""

import io
from pathlib import Path

import pytest
from PIL import Image

from app.shared.core.exceptions import FileTooLargeError, InvalidFileTypeError
from app.shared.infrastructure.storage.file_manager import PhotoFileManager


def image_bytes(fmt: str, size=(16, 16)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (10, 120, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


def test_capture_reserves_named_file(photos):
    path = photos.capture()

    assert path.parent == photos.storage_dir
    assert path.name.startswith("PLANT_20260310_080000_")
    assert path.suffix == ".jpg"
    assert path.exists()


def test_capture_names_are_unique(photos):
    assert photos.capture() != photos.capture()


def test_persist_png_converts_to_jpeg(photos):
    stored = photos.persist(image_bytes("PNG"))

    assert stored.parent == photos.storage_dir
    with Image.open(stored) as img:
        assert img.format == "JPEG"
        assert img.size == (16, 16)


def test_persist_jpeg_written_unchanged(photos):
    data = image_bytes("JPEG")

    stored = photos.persist(data)

    assert stored.read_bytes() == data


def test_persist_from_file_object(photos):
    stored = photos.persist(io.BytesIO(image_bytes("PNG")))
    assert photos.exists(stored)


def test_persist_captured_path_in_place(photos):
    pending = photos.capture()
    pending.write_bytes(image_bytes("JPEG"))

    stored = photos.persist(pending)

    assert stored == pending
    assert list(photos.storage_dir.iterdir()) == [pending]


def test_persist_external_path_is_copied(photos, tmp_path):
    outside = tmp_path / "camera.png"
    outside.write_bytes(image_bytes("PNG"))

    stored = photos.persist(outside)

    assert stored.parent == photos.storage_dir
    assert outside.exists()


def test_persist_rejects_empty(photos):
    with pytest.raises(InvalidFileTypeError):
        photos.persist(b"")


def test_persist_rejects_garbage(photos):
    with pytest.raises(InvalidFileTypeError) as exc_info:
        photos.persist(b"definitely not an image")
    assert exc_info.value.status_code == 415
    assert not photos.storage_dir.exists() or list(photos.storage_dir.iterdir()) == []


def test_persist_rejects_missing_path(photos, tmp_path):
    with pytest.raises(InvalidFileTypeError):
        photos.persist(tmp_path / "missing.jpg")


def test_persist_rejects_oversized(tmp_path):
    manager = PhotoFileManager(tmp_path / "photos", max_size_mb=1)
    data = b"\xff" * (1024 * 1024 + 1)

    with pytest.raises(FileTooLargeError) as exc_info:
        manager.persist(data)
    assert exc_info.value.status_code == 413


def test_delete_and_exists(photos):
    stored = photos.persist(image_bytes("PNG"))

    assert photos.exists(stored) is True
    assert photos.delete(stored) is True
    assert photos.exists(stored) is False
    assert photos.delete(stored) is False


@pytest.mark.parametrize("value", [None, ""])
def test_empty_references(photos, value):
    assert photos.exists(value) is False
    assert photos.delete(value) is False


def test_copy_to(photos, tmp_path):
    stored = photos.persist(image_bytes("JPEG"))
    destination = tmp_path / "export.jpg"

    with open(destination, "wb") as handle:
        photos.copy_to(stored, handle)

    assert destination.read_bytes() == Path(stored).read_bytes()
