"""Variant production for Image Uploader.

ImageUploader sequences header inspection, pixel budget validation,
decoding and, per configured variant, planning, transforming, encoding,
hashing and writing.
"""

import logging
from pathlib import Path

from . import process
from .header import check_pixel_budget, read_image_info
from .models import RawImageDescriptor, TransformPlan, UploaderConfig, VariantResult, VariantSpec
from .planner import plan_variant
from .storage import build_variant_name, build_variant_path, calculate_hash, write_variant

logger = logging.getLogger(__name__)


class ImageUploader:
    """Produces the configured renditions of uploaded images.

    Attributes:
        config: Pixel budget and ordered variant specs
    """

    def __init__(self, config: UploaderConfig):
        self.config = config

    @property
    def max_dimensions(self) -> int:
        return self.config.max_dimensions

    @property
    def image_versions(self) -> tuple[VariantSpec, ...]:
        return self.config.image_versions

    def plan_variants(self, path: Path) -> list[tuple[VariantSpec, TransformPlan]]:
        """Inspect the header and plan every variant without decoding.

        Raises:
            ImageIOError, ImageTypeError, ImageValidationError, ImageSizeError
        """
        return self.plan_descriptor(read_image_info(Path(path)))

    def plan_descriptor(self, descriptor: RawImageDescriptor) -> list[tuple[VariantSpec, TransformPlan]]:
        """Plan every variant for an already inspected header.

        Raises:
            ImageSizeError: If the image exceeds the pixel budget
        """
        check_pixel_budget(descriptor, self.max_dimensions)
        return [
            (spec, plan_variant(descriptor.size, spec.max_width, spec.max_height, spec.crop))
            for spec in self.image_versions
        ]

    def produce_variants(self, path: Path, local_main_name: str) -> list[VariantResult]:
        """Produce and write every configured variant of an image.

        Variants are produced in configuration order. The first failure
        aborts the rest; files already written stay on disk.

        Args:
            path: Path to the uploaded original
            local_main_name: Base name shared by all variants

        Returns:
            One VariantResult per configured variant

        Raises:
            ImageIOError: On read/write failure or an existing target file
            ImageTypeError: If the file is not PNG, JPEG or GIF
            ImageSizeError: If the original exceeds the pixel budget
            ImageValidationError: If the header or image data is malformed
            ImageOperationError: If the codec fails to transform or encode
        """
        path = Path(path)
        descriptor = read_image_info(path)
        check_pixel_budget(descriptor, self.max_dimensions)

        image = process.load_image(path, max_pixels=self.max_dimensions)
        logger.info(
            "Producing %d variants of %s (%s %dx%d)",
            len(self.image_versions), path.name, descriptor.format.name,
            descriptor.width, descriptor.height,
        )

        results = []
        for spec in self.image_versions:
            results.append(self._produce_variant(image, descriptor.format, spec, local_main_name))
        return results

    def _produce_variant(self, image, image_format, spec: VariantSpec, local_main_name: str) -> VariantResult:
        if spec.rotate_by_exif:
            logger.debug("rotate_by_exif is reserved and has no effect")

        plan = plan_variant(process.image_size(image), spec.max_width, spec.max_height, spec.crop)
        logger.debug("Variant %r: %s", spec.name_suffix, plan)

        adjusted = process.apply_plan(image, plan)
        width, height = process.image_size(adjusted)
        data = process.encode(adjusted, image_format, spec.quality)
        content_hash = calculate_hash(data)

        name = build_variant_name(local_main_name, spec.name_suffix, image_format)
        target = build_variant_path(spec.upload_dir, name)
        write_variant(target, data)

        logger.info("Wrote %s (%dx%d, %d bytes)", target, width, height, len(data))
        return VariantResult(
            path=target,
            name=name,
            size_bytes=len(data),
            content_hash=content_hash,
            width=width,
            height=height,
        )
