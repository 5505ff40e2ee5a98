# 📄 File: app/shared/infrastructure/storage/file_manager.py

# 🧭 Purpose (Layman Explanation):
# This file looks after plant photos on disk: it prepares an empty photo file for the camera,
# copies picked pictures into the app's photo folder, checks they really are pictures,
# and removes them when a plant is deleted.

# 🧪 Purpose (Technical Summary):
# Local photo store with timestamp-based naming (PLANT_yyyyMMdd_HHmmss_<rand>.jpg),
# Pillow-based image validation and JPEG normalisation, size limits, best-effort deletion
# and readability checks. All methods are blocking and meant to run via asyncio.to_thread.

# 🔗 Dependencies:
# - PIL: Image validation and re-encoding
# - tempfile: Collision-free file creation
# - app.shared.core.exceptions: File error types

# 🔄 Connected Modules / Calls From:
# Called by: Care coordinator (photo cleanup on delete), plants API (photo upload, capture)

import io
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional, Union

from PIL import Image, UnidentifiedImageError

from app.shared.core.exceptions import (
    FileStorageError,
    FileTooLargeError,
    InvalidFileTypeError,
)
from app.shared.utils.helpers import Clock, ensure_directory, utc_now
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

PhotoSource = Union[str, Path, bytes, BinaryIO]


class PhotoFileManager:
    """
    Photo storage rooted at a single directory.

    Files are named ``PLANT_<yyyyMMdd_HHmmss>_<rand>.jpg``; the random part
    comes from ``tempfile`` so two photos taken in the same second never clash.
    """

    FILE_PREFIX = "PLANT_"
    FILE_SUFFIX = ".jpg"
    TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
    SUPPORTED_FORMATS = ("JPEG", "PNG", "WEBP", "GIF", "BMP")

    def __init__(
        self,
        storage_dir: Union[str, Path],
        max_size_mb: int = 10,
        clock: Clock = utc_now,
    ):
        self.storage_dir = Path(storage_dir)
        self.max_size_bytes = max_size_mb * 1024 * 1024
        self._clock = clock

    def _new_file(self) -> Path:
        """Create an empty, uniquely named photo file and return its path."""
        try:
            ensure_directory(self.storage_dir)
            timestamp = self._clock().strftime(self.TIMESTAMP_FORMAT)
            fd, path = tempfile.mkstemp(
                prefix=f"{self.FILE_PREFIX}{timestamp}_",
                suffix=self.FILE_SUFFIX,
                dir=self.storage_dir,
            )
            os.close(fd)
            return Path(path)
        except OSError as e:
            raise FileStorageError(
                f"Could not create photo file: {e}",
                operation="create",
                storage_path=str(self.storage_dir),
            ) from e

    def capture(self) -> Path:
        """
        Reserve a pending photo file for a camera to write into.

        The returned path is later passed to ``persist`` which validates it in place.
        """
        path = self._new_file()
        logger.debug("Pending photo file created", path=str(path))
        return path

    def persist(self, source: PhotoSource) -> Path:
        """
        Store a photo and return its path inside the storage directory.

        Args:
            source: Raw bytes, a readable binary file, or a path. A path already
                inside the storage directory (e.g. from ``capture``) is validated
                and kept where it is.

        Raises:
            InvalidFileTypeError: Empty payload or not a supported image
            FileTooLargeError: Payload exceeds the configured limit
            FileStorageError: Writing to disk failed
        """
        in_place: Optional[Path] = None
        if isinstance(source, (str, Path)):
            source_path = Path(source)
            if self._is_inside_storage(source_path):
                in_place = source_path
            data = self._read_path(source_path)
        elif isinstance(source, bytes):
            data = source
        else:
            data = source.read()

        image_format = self._validate(data)
        target = in_place or self._new_file()

        try:
            if image_format == "JPEG":
                if in_place is None:
                    target.write_bytes(data)
            else:
                with Image.open(io.BytesIO(data)) as img:
                    img.convert("RGB").save(target, format="JPEG", quality=90)
        except OSError as e:
            if in_place is None:
                target.unlink(missing_ok=True)
            raise FileStorageError(
                f"Could not write photo: {e}",
                operation="persist",
                storage_path=str(target),
            ) from e

        logger.info("Photo stored", path=str(target), source_format=image_format, size_bytes=len(data))
        return target

    def delete(self, path: Optional[Union[str, Path]]) -> bool:
        """
        Best-effort removal. Returns True only when a file was actually deleted.
        """
        if not path:
            return False
        try:
            Path(path).unlink()
            logger.info("Photo deleted", path=str(path))
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Failed to delete photo: {e}", path=str(path))
            return False

    def exists(self, path: Optional[Union[str, Path]]) -> bool:
        """True when the file exists and is readable."""
        if not path:
            return False
        candidate = Path(path)
        return candidate.is_file() and os.access(candidate, os.R_OK)

    def copy_to(self, path: Union[str, Path], destination: BinaryIO) -> None:
        """Stream a stored photo into an open binary file."""
        with open(path, "rb") as handle:
            shutil.copyfileobj(handle, destination)

    def _is_inside_storage(self, path: Path) -> bool:
        try:
            path.resolve().relative_to(self.storage_dir.resolve())
            return True
        except ValueError:
            return False

    def _read_path(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise InvalidFileTypeError(f"Photo file not found: {path}") from e
        except OSError as e:
            raise FileStorageError(
                f"Could not read photo: {e}",
                operation="read",
                storage_path=str(path),
            ) from e

    def _validate(self, data: bytes) -> str:
        """Check size and image integrity; return the detected Pillow format."""
        if len(data) == 0:
            raise InvalidFileTypeError("Photo is empty")

        if len(data) > self.max_size_bytes:
            raise FileTooLargeError(
                f"Photo too large: {len(data)} bytes",
                file_size=len(data),
                max_size=self.max_size_bytes,
            )

        try:
            with Image.open(io.BytesIO(data)) as img:
                image_format = img.format
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise InvalidFileTypeError(f"Invalid image file: {e}") from e

        if image_format not in self.SUPPORTED_FORMATS:
            raise InvalidFileTypeError(
                f"Unsupported image format: {image_format}",
                file_type=image_format,
                allowed_types=list(self.SUPPORTED_FORMATS),
            )
        return image_format
