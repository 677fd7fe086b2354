"""Resize and crop geometry for Image Uploader.

Maps a source size and a variant's target box to an exact TransformPlan.
Nothing here touches the codec or the filesystem.
"""

from .models import CropOnly, CropRect, Identity, ResizeOnly, ResizeThenCrop, TransformPlan

# An image at least this many times longer than it is wide (or the reverse)
# after resizing is treated as a strip: crop from the leading edge.
PANORAMIC_RATIO = 3


def scale_length(length: int, target: int, reference: int) -> int:
    """Scale length by target / reference, truncating, never below 1 px.

    Used for the free axis of a proportional resize. The codec calls the
    same function so planned and produced sizes always agree.
    """
    return max(1, length * target // reference)


def resize_to_width(source_size: tuple[int, int], width: int) -> ResizeOnly:
    src_width, src_height = source_size
    height = scale_length(src_height, width, src_width)
    return ResizeOnly(size=(width, height), width=width)


def resize_to_height(source_size: tuple[int, int], height: int) -> ResizeOnly:
    src_width, src_height = source_size
    width = scale_length(src_width, height, src_height)
    return ResizeOnly(size=(width, height), height=height)


def crop_offset(length: int, target: int, other: int) -> int:
    """Offset along an axis being cut from length down to target.

    Centered, unless the axis is PANORAMIC_RATIO times the other axis or
    more, in which case the leading edge is kept.
    """
    if length >= other * PANORAMIC_RATIO:
        return 0
    return (length - target) // 2


def plan_variant(
    source_size: tuple[int, int],
    max_width: int,
    max_height: int,
    crop: bool = False,
) -> TransformPlan:
    """Decide how to fit an image of source_size into a max_width x max_height box.

    Without crop the image is scaled along the axis that overflows the most,
    so the result fits inside the box. With crop the image is scaled along
    the axis that overflows the least and the other axis is cut down, so the
    result fills the box. Images are never scaled up.

    Overflow ratios are compared exactly (width * max_height against
    height * max_width); ties scale by height when fitting and by width
    when cropping.

    Args:
        source_size: Original (width, height)
        max_width: Box width
        max_height: Box height
        crop: Fill the box by cropping instead of fitting inside it

    Returns:
        Identity, ResizeOnly, CropOnly or ResizeThenCrop
    """
    width, height = source_size
    if max_width <= 0 or max_height <= 0:
        raise ValueError(f"Invalid target box {max_width}x{max_height}")

    if width <= max_width and height <= max_height:
        return Identity(size=source_size)

    # width / max_width > height / max_height, without division
    width_constrains = width * max_height > height * max_width

    if not crop:
        if width_constrains:
            return resize_to_width(source_size, max_width)
        return resize_to_height(source_size, max_height)

    if height < max_height:
        rect = CropRect((width - max_width) // 2, 0, max_width, height)
        return CropOnly(size=(max_width, height), rect=rect)

    if width < max_width:
        rect = CropRect(0, (height - max_height) // 2, width, max_height)
        return CropOnly(size=(width, max_height), rect=rect)

    # Both axes reach the box: scale the less overflowing axis onto it,
    # then cut the other one.
    if width_constrains:
        resize = resize_to_height(source_size, max_height)
        resized_width, resized_height = resize.size
        x = crop_offset(resized_width, max_width, resized_height)
        rect = CropRect(x, 0, max_width, resized_height)
    else:
        resize = resize_to_width(source_size, max_width)
        resized_width, resized_height = resize.size
        y = crop_offset(resized_height, max_height, resized_width)
        rect = CropRect(0, y, resized_width, max_height)

    size = (rect.width, rect.height)
    if resize.size == source_size:
        return CropOnly(size=size, rect=rect)
    return ResizeThenCrop(size=size, resize=resize, rect=rect)
