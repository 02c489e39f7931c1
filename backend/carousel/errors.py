"""Error taxonomy for carousel generation."""

from typing import Optional


class CarouselError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    code = "CAROUSEL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self, request_id: str = "unknown") -> dict:
        return {
            "error": self.message,
            "code": self.code,
            "requestId": request_id,
            "details": self.details,
        }


class InvalidInput(CarouselError):
    """Malformed or missing text, bad settings, or markup the tokenizer rejects."""

    code = "INVALID_INPUT"
    status_code = 400

    def __init__(self, message: str, errors: Optional[list] = None, details: Optional[dict] = None):
        details = dict(details or {})
        if errors:
            details["errors"] = list(errors)
        super().__init__(message, details or None)
        self.errors = list(errors or [])


class TextTooLong(CarouselError):
    code = "TEXT_TOO_LONG"
    status_code = 400


class ResourceUnavailable(CarouselError):
    """An external resource (the avatar) could not be fetched or decoded."""

    code = "AVATAR_LOAD_FAILED"
    status_code = 502


class RenderFailed(CarouselError):
    """Layout or drawing failed for one slide; aborts the whole carousel."""

    code = "RENDER_FAILED"
    status_code = 500

    def __init__(self, message: str, slide_type: Optional[str] = None, slide_index: Optional[int] = None,
                 details: Optional[dict] = None):
        self.slide_type = slide_type
        self.slide_index = slide_index
        merged = {"slideType": slide_type}
        if slide_index is not None:
            merged["slideNumber"] = slide_index
        merged.update(details or {})
        super().__init__(message, merged)


class RequestTimeout(CarouselError):
    code = "TIMEOUT_ERROR"
    status_code = 408
