"""Data models for Image Uploader.

Contains data classes for image descriptors, variant specifications,
transform plans and variant results.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class ImageFormat(str, Enum):
    """Supported encoded image formats.

    The value doubles as the file extension used for written variants.
    """
    PNG = "png"
    JPEG = "jpg"
    GIF = "gif"

    @property
    def extension(self) -> str:
        return self.value


@dataclass(frozen=True)
class RawImageDescriptor:
    """Format and intrinsic size read from an image header.

    Attributes:
        format: Sniffed image format
        width: Pixel width declared by the header
        height: Pixel height declared by the header
    """
    format: ImageFormat
    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class VariantSpec:
    """Configuration for a single rendition.

    Attributes:
        upload_dir: Directory the variant is written into
        name_suffix: Appended to the main name (e.g. "_thumb")
        max_width: Maximum output width in pixels
        max_height: Maximum output height in pixels
        quality: Encoder quality 0-100 (used for JPEG)
        rotate_by_exif: Reserved, currently has no effect
        crop: Crop to fill the box instead of fitting inside it
    """
    upload_dir: Path
    name_suffix: str
    max_width: int
    max_height: int
    quality: int = 75
    rotate_by_exif: bool = False
    crop: bool = False


@dataclass(frozen=True)
class UploaderConfig:
    """Construction-time configuration of an ImageUploader.

    Attributes:
        max_dimensions: Maximum accepted width * height of an original
        image_versions: Ordered variant specs produced per upload
    """
    max_dimensions: int
    image_versions: tuple[VariantSpec, ...]


@dataclass(frozen=True)
class CropRect:
    """Crop rectangle in source pixel coordinates."""
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Identity:
    """Image already fits the box; encode as is."""
    size: tuple[int, int]


@dataclass(frozen=True)
class ResizeOnly:
    """Scale along one constraining axis, preserving aspect ratio.

    Exactly one of width/height is set; size is the resulting output size.
    """
    size: tuple[int, int]
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class CropOnly:
    """Cut a rectangle out of the source without scaling."""
    size: tuple[int, int]
    rect: CropRect


@dataclass(frozen=True)
class ResizeThenCrop:
    """Scale along one axis, then cut the overflowing axis down to the box."""
    size: tuple[int, int]
    resize: ResizeOnly
    rect: CropRect


TransformPlan = Union[Identity, ResizeOnly, CropOnly, ResizeThenCrop]


@dataclass(frozen=True)
class VariantResult:
    """Result of a successfully written variant.

    Attributes:
        path: Full path of the written file
        name: File name of the variant
        size_bytes: Encoded size in bytes
        content_hash: Hex-encoded SHA-256 of the encoded bytes
        width: Output width in pixels
        height: Output height in pixels
    """
    path: Path
    name: str
    size_bytes: int
    content_hash: str
    width: int
    height: int
