"""Error types raised while producing image variants.

Every error derives from ImageUploadError and from the builtin exception
that best matches its meaning, so callers may catch either.
"""


class ImageUploadError(Exception):
    """Base class for all upload pipeline errors."""
    pass


class ImageIOError(ImageUploadError, OSError):
    """Raised when opening, seeking, reading or writing a file fails."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def __str__(self) -> str:
        return self.reason


class ImageTypeError(ImageUploadError, TypeError):
    """Raised when the leading bytes match no supported format."""
    pass


class ImageSizeError(ImageUploadError, ValueError):
    """Raised when width * height exceeds the configured pixel budget."""
    pass


class ImageValidationError(ImageUploadError, ValueError):
    """Raised when a header is malformed or the image cannot be decoded."""
    pass


class ImageOperationError(ImageUploadError, RuntimeError):
    """Raised when the codec fails to resize, crop or encode."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
