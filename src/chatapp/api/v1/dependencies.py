"""Shared API dependencies for authentication, sessions and uploads."""

from typing import Annotated

from fastapi import Depends, Request, UploadFile
from sqlalchemy.orm import Session

from chatapp.core.errors import UnauthorizedError
from chatapp.db.session import get_db
from chatapp.schemas.common import MAX_UPLOAD_BYTES, UploadedFile
from chatapp.services.media import MediaHost, get_media_host

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

MediaHostDep = Annotated[MediaHost, Depends(get_media_host)]


def get_current_user_id(request: Request) -> str:
    """Return the user id the auth middleware attached to the request.

    Raises:
        UnauthorizedError: If the request reached a protected handler without
            passing through the middleware.
    """
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise UnauthorizedError()
    return user_id


# Type alias for current user dependency
CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]


async def read_upload(upload: UploadFile | None) -> UploadedFile | None:
    """Read an incoming upload into memory.

    Empty file parts (a form submitted without choosing a file) count as no
    upload. At most one byte past the size limit is read, which is enough for
    validation to reject oversized files.
    """
    if upload is None or not upload.filename:
        return None
    data = await upload.read(MAX_UPLOAD_BYTES + 1)
    return UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )
