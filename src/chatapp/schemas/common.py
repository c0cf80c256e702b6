"""Shared Pydantic schemas and the validation pass used by every surface."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, TypeVar

from pydantic import AfterValidator, BaseModel, Field, ValidationError

from chatapp.core.errors import ValidationFailure
from chatapp.db.ids import OBJECT_ID_LENGTH

ALLOWED_IMAGE_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})
MAX_UPLOAD_BYTES = 5 * 1024 * 1024

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class UploadedFile:
    """A file received from a client, fully read into memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def check_image(file: UploadedFile | None) -> UploadedFile | None:
    """Accept only PNG/JPEG/WebP images up to 5 MB."""
    if file is None:
        return file
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValueError("Invalid file type")
    if file.size > MAX_UPLOAD_BYTES:
        raise ValueError("File must be under 5 MB")
    return file


def check_object_id(value: str) -> str:
    if len(value) != OBJECT_ID_LENGTH:
        raise ValueError(f"Invalid id, must be {OBJECT_ID_LENGTH} characters long.")
    return value


ObjectId = Annotated[str, AfterValidator(check_object_id)]
ImageFile = Annotated[UploadedFile | None, AfterValidator(check_image)]


class PageRequest(BaseModel):
    """Offset pagination arguments for list queries."""

    skip: int = Field(0, ge=0)
    limit: int = Field(20, ge=20, le=100)


def _issue_message(error: Mapping[str, Any]) -> str:
    ctx = error.get("ctx") or {}
    if error.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])
    return str(error.get("msg", "Invalid value"))


def flatten_errors(
    errors: Iterable[Mapping[str, Any]],
    *,
    skip_prefixes: tuple[str, ...] = ("body",),
) -> tuple[list[str], dict[str, list[str]]]:
    """Split pydantic issues into form-level and per-field messages."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        while loc and loc[0] in skip_prefixes:
            loc = loc[1:]
        message = _issue_message(error)
        if loc:
            field_errors.setdefault(loc[0], []).append(message)
        else:
            form_errors.append(message)
    return form_errors, field_errors


def failure_from_errors(errors: list[Mapping[str, Any]]) -> ValidationFailure:
    """Build a ``ValidationFailure`` whose message is the first issue."""
    form_errors, field_errors = flatten_errors(errors)
    first = _issue_message(errors[0]) if errors else None
    return ValidationFailure(first, field_errors=field_errors, form_errors=form_errors)


def validate(model: type[ModelT], **data: Any) -> ModelT:
    """Validate keyword arguments against ``model`` or raise ``ValidationFailure``."""
    try:
        return model(**data)
    except ValidationError as err:
        raise failure_from_errors(err.errors()) from err
