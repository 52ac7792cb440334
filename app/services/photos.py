"""Photo attachments: MIME/size checks and conversion to a base64 data URI."""

import base64

ALLOWED_PHOTO_MIME_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/bmp",
    }
)


def _format_size(num_bytes: int) -> str:
    if num_bytes >= 1024 * 1024:
        return f"{num_bytes // (1024 * 1024)} MB"
    return f"{num_bytes} bytes"


class PhotoValidationError(Exception):
    """Uploaded photo is empty, too large, or not an accepted image type."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def photo_to_data_uri(content: bytes, content_type: str | None, max_bytes: int) -> str:
    """
    Validate raw image bytes and return data:<mime>;base64,<payload>.

    Size is checked on the raw bytes, before encoding.
    """
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in ALLOWED_PHOTO_MIME_TYPES:
        raise PhotoValidationError(
            "Unsupported file format. Accepted formats: JPEG, PNG, GIF, WEBP, BMP"
        )
    if not content:
        raise PhotoValidationError("Uploaded photo is empty")
    if len(content) > max_bytes:
        raise PhotoValidationError(
            f"Photo must not exceed {_format_size(max_bytes)}.",
            status_code=413,
        )
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime};base64,{encoded}"
