"""Storage utilities for Image Uploader.

Handles content hash calculation, variant naming and no-overwrite writes.
"""

import hashlib
import logging
from pathlib import Path

from .errors import ImageIOError
from .models import ImageFormat

logger = logging.getLogger(__name__)


def calculate_hash(data: bytes) -> str:
    """Calculate SHA-256 hash of encoded variant bytes.

    Args:
        data: File content as bytes

    Returns:
        Lowercase hex-encoded SHA-256 digest (64 characters)
    """
    return hashlib.sha256(data).hexdigest()


def build_variant_name(
    local_main_name: str,
    name_suffix: str,
    image_format: ImageFormat,
) -> str:
    """Build the file name of a variant.

    photo_123 + _thumb + jpg -> photo_123_thumb.jpg
    """
    return f"{local_main_name}{name_suffix}.{image_format.extension}"


def build_variant_path(upload_dir: Path, name: str) -> Path:
    return Path(upload_dir) / name


def write_variant(path: Path, data: bytes) -> None:
    """Write variant bytes to path, refusing to overwrite.

    Args:
        path: Target file path
        data: Encoded image bytes

    Raises:
        ImageIOError: If the path already exists or the write fails
    """
    if path.exists():
        raise ImageIOError("File already exist")

    try:
        with open(path, 'xb') as f:
            f.write(data)
    except FileExistsError:
        raise ImageIOError("File already exist")
    except OSError:
        raise ImageIOError("Write file failed")

    logger.debug("Wrote %d bytes to %s", len(data), path)
