"""Header inspection for Image Uploader.

Sniffs the encoded format from magic bytes and reads the intrinsic pixel
size from each format's header without decoding the image. Also enforces
the pixel budget before the codec is ever invoked.
"""

import logging
import struct
from pathlib import Path
from typing import BinaryIO, Callable

from .errors import ImageIOError, ImageSizeError, ImageTypeError, ImageValidationError
from .models import ImageFormat, RawImageDescriptor

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
JPEG_SIGNATURE = b'\xff\xd8\xff'
GIF_SIGNATURE = b'GIF'

SIGNATURES = (
    (JPEG_SIGNATURE, ImageFormat.JPEG),
    (GIF_SIGNATURE, ImageFormat.GIF),
    (PNG_SIGNATURE, ImageFormat.PNG),
)

# Bytes needed to tell every supported format apart
SNIFF_LENGTH = 8

JPEG_MARKER_PREFIX = 0xFF
JPEG_SOF0 = 0xC0


def sniff_format(buffer: bytes) -> ImageFormat:
    """Detect the encoded format from the leading bytes of a file.

    Args:
        buffer: At least the first 8 bytes of the file

    Returns:
        The matching ImageFormat

    Raises:
        ImageTypeError: If no supported signature matches
    """
    for signature, image_format in SIGNATURES:
        if buffer[:len(signature)] == signature:
            return image_format
    raise ImageTypeError(f"Unsupported image type (leading bytes {buffer[:SNIFF_LENGTH].hex()})")


def _seek(stream: BinaryIO, offset: int, whence: int = 0) -> None:
    try:
        stream.seek(offset, whence)
    except (OSError, ValueError):
        raise ImageIOError("Seek file error")


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    """Read exactly count bytes or raise ImageIOError."""
    try:
        data = stream.read(count)
    except OSError:
        raise ImageIOError("Read file error")
    if data is None or len(data) != count:
        raise ImageIOError("Read file error")
    return data


def read_png_size(stream: BinaryIO) -> tuple[int, int]:
    """Read width and height from the IHDR chunk of a PNG.

    Width and height are big-endian uint32 values at offsets 16 and 20.
    """
    _seek(stream, 16)
    width, height = struct.unpack('>II', _read_exact(stream, 8))
    return width, height


def read_jpeg_size(stream: BinaryIO) -> tuple[int, int]:
    """Walk JPEG segments until the baseline start-of-frame.

    Each segment starts with a two byte marker (FF xx) followed by a
    big-endian length that counts itself but not the marker. SOF0 carries
    precision (1 byte), height (2 bytes) and width (2 bytes).

    Raises:
        ImageValidationError: On a non-marker byte or a bad segment length
        ImageIOError: If the stream ends before a start-of-frame segment
    """
    _seek(stream, 2)
    while True:
        prefix, code, length = struct.unpack('>BBH', _read_exact(stream, 4))
        if prefix != JPEG_MARKER_PREFIX:
            raise ImageValidationError(f"Expected JPEG marker, found 0x{prefix:02x}")

        if code == JPEG_SOF0:
            if length < 8:
                raise ImageValidationError(f"Start-of-frame segment too short ({length})")
            _precision, height, width = struct.unpack('>BHH', _read_exact(stream, 5))
            return width, height

        if length < 2:
            raise ImageValidationError(f"Invalid JPEG segment length ({length})")
        _seek(stream, length - 2, 1)


def read_gif_size(stream: BinaryIO) -> tuple[int, int]:
    """Read the canvas size from the GIF logical screen descriptor.

    The descriptor follows the 6 byte signature; width and height are
    little-endian uint16 values.
    """
    _seek(stream, 6)
    width, height = struct.unpack('<HH', _read_exact(stream, 4))
    return width, height


SIZE_READERS: dict[ImageFormat, Callable[[BinaryIO], tuple[int, int]]] = {
    ImageFormat.PNG: read_png_size,
    ImageFormat.JPEG: read_jpeg_size,
    ImageFormat.GIF: read_gif_size,
}


def read_dimensions(stream: BinaryIO, image_format: ImageFormat) -> tuple[int, int]:
    """Dispatch to the header reader registered for image_format.

    Args:
        stream: Seekable binary stream positioned anywhere
        image_format: Format previously returned by sniff_format

    Returns:
        Tuple of (width, height)
    """
    reader = SIZE_READERS.get(image_format)
    if reader is None:
        raise ImageTypeError(f"No header reader for {image_format}")

    width, height = reader(stream)
    if width <= 0 or height <= 0:
        raise ImageValidationError(f"Invalid image dimensions {width}x{height}")
    return width, height


def read_image_info(path: Path) -> RawImageDescriptor:
    """Sniff the format and read the dimensions of an image file.

    Only the header bytes are read; the file is closed on every exit path.

    Args:
        path: Path to image file

    Returns:
        RawImageDescriptor with format, width and height

    Raises:
        ImageIOError: If the file cannot be opened or read
        ImageTypeError: If the format is not supported
        ImageValidationError: If the header is malformed
    """
    try:
        stream = open(path, 'rb')
    except OSError:
        raise ImageIOError("Open file error")

    with stream:
        image_format = sniff_format(_read_exact(stream, SNIFF_LENGTH))
        width, height = read_dimensions(stream, image_format)

    logger.debug("Read header of %s: %s %dx%d", path, image_format.name, width, height)
    return RawImageDescriptor(format=image_format, width=width, height=height)


def check_pixel_budget(descriptor: RawImageDescriptor, max_dimensions: int) -> None:
    """Reject images whose pixel area exceeds max_dimensions.

    Raises:
        ImageSizeError: If width * height > max_dimensions
    """
    if descriptor.area > max_dimensions:
        raise ImageSizeError(
            f"Image area {descriptor.width}x{descriptor.height} "
            f"({descriptor.area} px) exceeds maximum ({max_dimensions} px)"
        )
