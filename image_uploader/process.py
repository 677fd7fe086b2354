"""Image codec operations for Image Uploader.

Wraps Pillow for decoding, resizing, cropping and encoding, and applies
TransformPlans produced by the planner.
"""

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import ImageOperationError, ImageValidationError
from .models import (
    CropOnly,
    CropRect,
    Identity,
    ImageFormat,
    ResizeOnly,
    ResizeThenCrop,
    TransformPlan,
)
from .planner import scale_length

logger = logging.getLogger(__name__)

PIL_FORMATS = {
    ImageFormat.PNG: 'PNG',
    ImageFormat.JPEG: 'JPEG',
    ImageFormat.GIF: 'GIF',
}


def load_image(path: Path, max_pixels: int | None = None) -> Image.Image:
    """Fully decode an image file.

    Args:
        path: Path to input image
        max_pixels: Pixel budget already enforced on the header; replaces
            Pillow's decompression bomb limit while decoding

    Returns:
        Decoded PIL Image

    Raises:
        ImageValidationError: If Pillow cannot decode the file
    """
    previous_limit = Image.MAX_IMAGE_PIXELS
    if max_pixels is not None:
        Image.MAX_IMAGE_PIXELS = max_pixels
    try:
        with Image.open(path) as image:
            image.load()
            # Detach from the file handle so it can be closed
            return image.copy()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageValidationError(f"Cannot decode image {path}: {e}")
    finally:
        Image.MAX_IMAGE_PIXELS = previous_limit


def image_size(image: Image.Image) -> tuple[int, int]:
    """Return (width, height) of a decoded image."""
    return image.size


def resize_to(
    image: Image.Image,
    width: int | None = None,
    height: int | None = None,
    smoothing: bool = True,
) -> Image.Image:
    """Resize to a target width or height, preserving aspect ratio.

    When only one of width/height is given the other is derived with
    planner.scale_length.

    Raises:
        ImageOperationError: If no target is given or Pillow fails
    """
    src_width, src_height = image.size
    if width is None and height is None:
        raise ImageOperationError("Adjust image failed: no resize target")
    if width is None:
        width = scale_length(src_width, height, src_height)
    elif height is None:
        height = scale_length(src_height, width, src_width)

    resample = Image.Resampling.LANCZOS if smoothing else Image.Resampling.NEAREST
    try:
        return image.resize((width, height), resample)
    except (OSError, ValueError, MemoryError) as e:
        raise ImageOperationError(f"Adjust image failed: {e}")


def crop(image: Image.Image, x: int, y: int, width: int, height: int) -> Image.Image:
    """Cut a width x height rectangle with its top-left corner at (x, y).

    Raises:
        ImageOperationError: If the rectangle does not lie inside the image
    """
    src_width, src_height = image.size
    if x < 0 or y < 0 or width <= 0 or height <= 0 or x + width > src_width or y + height > src_height:
        raise ImageOperationError(
            f"Adjust image failed: crop {width}x{height}+{x}+{y} outside {src_width}x{src_height}"
        )
    try:
        return image.crop((x, y, x + width, y + height))
    except (OSError, ValueError, MemoryError) as e:
        raise ImageOperationError(f"Adjust image failed: {e}")


def _crop_rect(image: Image.Image, rect: CropRect) -> Image.Image:
    return crop(image, rect.x, rect.y, rect.width, rect.height)


def apply_plan(image: Image.Image, plan: TransformPlan) -> Image.Image:
    """Apply a TransformPlan to a decoded image.

    Returns:
        Transformed image (the input itself for Identity)
    """
    if isinstance(plan, Identity):
        return image
    if isinstance(plan, ResizeOnly):
        return resize_to(image, width=plan.width, height=plan.height)
    if isinstance(plan, CropOnly):
        return _crop_rect(image, plan.rect)
    if isinstance(plan, ResizeThenCrop):
        resized = resize_to(image, width=plan.resize.width, height=plan.resize.height)
        return _crop_rect(resized, plan.rect)
    raise ImageOperationError(f"Unknown transform plan: {plan!r}")


def _flatten_for_jpeg(image: Image.Image) -> Image.Image:
    """JPEG has no alpha; composite transparent images onto white."""
    if image.mode == 'P':
        image = image.convert('RGBA')
    if image.mode in ('RGBA', 'LA'):
        background = Image.new('RGB', image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])
        return background
    if image.mode not in ('RGB', 'L', 'CMYK'):
        return image.convert('RGB')
    return image


def encode(image: Image.Image, image_format: ImageFormat, quality: int = 75) -> bytes:
    """Encode an image into the given format.

    Args:
        image: PIL Image
        image_format: Output format (same as the original upload)
        quality: JPEG quality 0-100, ignored for PNG and GIF

    Returns:
        Encoded bytes

    Raises:
        ImageOperationError: If encoding fails
    """
    output_buffer = io.BytesIO()
    try:
        if image_format == ImageFormat.JPEG:
            _flatten_for_jpeg(image).save(
                output_buffer,
                format='JPEG',
                quality=quality,
            )
        else:
            image.save(output_buffer, format=PIL_FORMATS[image_format])
    except (OSError, ValueError, KeyError) as e:
        raise ImageOperationError(f"Generate image failed: {e}")

    data = output_buffer.getvalue()
    if not data:
        raise ImageOperationError("Generate image failed")
    return data
