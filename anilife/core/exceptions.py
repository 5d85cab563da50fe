from typing import Any


class CatalogError(Exception):
    """Base class for errors raised by the catalog core."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Missing or malformed input. Never retried."""

    status_code = 400

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(CatalogError):
    """Reference to a title or episode that does not exist."""

    status_code = 404


class InternalError(CatalogError):
    """Unexpected store failure. The message shown to callers stays generic."""

    status_code = 500


def validation_error_from_pydantic(exc: Any, message: str) -> ValidationError:
    """Wrap a pydantic ValidationError into the catalog's own ValidationError."""
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    return ValidationError(message, errors=[dict(err) for err in errors])
