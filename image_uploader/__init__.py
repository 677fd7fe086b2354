"""Image Uploader - Produce configured renditions of uploaded images.

Sniffs PNG, JPEG and GIF uploads from their magic bytes, reads their size
from the header, enforces a pixel budget and writes resized or cropped
variants under collision-safe names.
"""

__version__ = "0.1.0"

from .errors import (
    ImageUploadError,
    ImageIOError,
    ImageTypeError,
    ImageSizeError,
    ImageValidationError,
    ImageOperationError,
)
from .models import ImageFormat, RawImageDescriptor, VariantSpec, UploaderConfig, VariantResult
from .planner import plan_variant
from .uploader import ImageUploader

__all__ = [
    "__version__",
    "ImageUploader",
    "ImageFormat",
    "RawImageDescriptor",
    "VariantSpec",
    "UploaderConfig",
    "VariantResult",
    "plan_variant",
    "ImageUploadError",
    "ImageIOError",
    "ImageTypeError",
    "ImageSizeError",
    "ImageValidationError",
    "ImageOperationError",
]
