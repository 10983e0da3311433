"""
Error hierarchy for the contact card service.

ConfigValidationError is fatal at startup. RenderError and EncodeError are
per-request and map to a 500; only EncodeError's message reaches the client.
"""


class ContactShareError(Exception):
    """Base exception for all contact card errors."""

    def __init__(self, message: str, code: str, http_status: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status

    def to_response(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class ConfigValidationError(ContactShareError):
    """A required identity field is missing or empty."""

    def __init__(self, field: str):
        super().__init__(
            f"{field} is required", "CONFIG_VALIDATION_ERROR", 500,
        )
        self.field = field


class RenderError(ContactShareError):
    """The HTML template failed to render."""

    def __init__(self, message: str):
        super().__init__(message, "RENDER_ERROR", 500)


class EncodeError(ContactShareError):
    """The QR codec could not encode the payload."""

    def __init__(self, message: str):
        super().__init__(message, "ENCODE_ERROR", 500)
