"""Domain error taxonomy shared by the REST and GraphQL surfaces.

Every error carries the HTTP status the REST layer answers with and a
``message`` that is safe to show to clients. Internal detail (upstream
responses, driver errors) stays on the exception for logging only.
"""

from __future__ import annotations

GENERIC_ERROR_MESSAGE = "Something went wrong."


class ChatAppError(RuntimeError):
    """Base class for errors that are surfaced to clients unchanged."""

    status_code: int = 500
    default_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailure(ChatAppError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Failed in type validation."

    def __init__(
        self,
        message: str | None = None,
        field_errors: dict[str, list[str]] | None = None,
        form_errors: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.field_errors: dict[str, list[str]] = field_errors or {}
        self.form_errors: list[str] = form_errors or []

    def as_payload(self) -> dict[str, object]:
        """Return the flattened error detail for response bodies."""
        return {"form_errors": self.form_errors, "field_errors": self.field_errors}

    @property
    def extensions(self) -> dict[str, object] | None:
        """Error detail GraphQL copies onto the error's ``extensions``."""
        if not (self.field_errors or self.form_errors):
            return None
        return self.as_payload()


class InvalidRequestError(ValidationFailure):
    """A referenced id inside an otherwise well-formed request does not resolve."""

    default_message = "Invalid request."


class ConflictError(ChatAppError):
    """A unique field (email, username) is already taken."""

    status_code = 409
    default_message = "User with this email or username already exists."


class UnauthorizedError(ChatAppError):
    """Missing, invalid or expired credential, or wrong password."""

    status_code = 401
    default_message = "Unauthorized."


class NotFoundError(ChatAppError):
    """A referenced id does not resolve."""

    status_code = 404
    default_message = "Not found."


class UpstreamFailure(ChatAppError):
    """The media host failed; clients only ever see a generic message."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(GENERIC_ERROR_MESSAGE)
        self.detail = detail


class InternalError(ChatAppError):
    """Unexpected failure at an operation boundary."""

    status_code = 500
