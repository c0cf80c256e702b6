"""Account operations: registration, login, profile reads and updates."""
from __future__ import annotations

import asyncio
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chatapp.core import security
from chatapp.core.errors import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailure,
)
from chatapp.models.user import User
from chatapp.repositories.user_repo import UserRepository
from chatapp.schemas.common import UploadedFile
from chatapp.schemas.user import LoginRequest, RegisterRequest, UpdateUserRequest
from chatapp.services.media import MediaHost

__all__ = [
    "INVALID_CREDENTIALS",
    "authenticate_user",
    "get_user",
    "register_user",
    "update_user",
]

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."


async def _upload_picture(media_host: MediaHost, file: UploadedFile) -> str:
    return await media_host.upload(
        file.data, filename=file.filename, content_type=file.content_type
    )


async def register_user(db: Session, media_host: MediaHost, payload: RegisterRequest) -> User:
    """Create an account; no session token is issued here."""
    users = UserRepository(db)
    if users.find_conflicting(email=payload.email, username=payload.username):
        raise ConflictError()

    user = User(
        name=payload.name,
        username=payload.username,
        email=payload.email,
        hashed_password=await asyncio.to_thread(security.hash_password, payload.password),
    )
    if payload.profile_picture is not None:
        user.profile_picture = await _upload_picture(media_host, payload.profile_picture)

    try:
        users.add(user)
        db.commit()
    except IntegrityError as err:
        # Lost a race with a concurrent registration of the same email/username.
        db.rollback()
        raise ConflictError() from err

    logger.info("Registered user %s (@%s)", user.id, user.username)
    return user


async def authenticate_user(db: Session, payload: LoginRequest) -> User:
    """Return the user matching the credentials.

    Looks the account up by username when one is given, otherwise by email.
    Unknown accounts and wrong passwords fail identically. Hash checks run in
    a worker thread.
    """
    users = UserRepository(db)
    if payload.username:
        user = users.find_by_username(payload.username)
    elif payload.email:
        user = users.find_by_email(payload.email)
    else:
        user = None

    if user is None:
        await asyncio.to_thread(security.dummy_verify)
        logger.warning("Failed login attempt for unknown account")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    if not await asyncio.to_thread(
        security.verify_password, payload.password, user.hashed_password
    ):
        logger.warning("Failed login attempt for user %s", user.id)
        raise UnauthorizedError(INVALID_CREDENTIALS)

    logger.info("User logged in: %s", user.id)
    return user


def get_user(db: Session, user_id: str) -> User:
    """Return a user by id or raise ``NotFoundError``."""
    user = UserRepository(db).get(user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


async def update_user(
    db: Session,
    media_host: MediaHost,
    user_id: str,
    payload: UpdateUserRequest,
) -> User:
    """Apply a partial profile update for ``user_id``."""
    users = UserRepository(db)
    if users.find_conflicting(
        email=payload.email, username=payload.username, exclude_id=user_id
    ):
        raise ConflictError()

    user = get_user(db, user_id)
    updates = payload.changes()
    if payload.profile_picture is not None:
        updates["profile_picture"] = await _upload_picture(media_host, payload.profile_picture)

    if not any(getattr(user, key) != value for key, value in updates.items()):
        raise ValidationFailure("No changes found.")

    for key, value in updates.items():
        setattr(user, key, value)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError() from err

    db.refresh(user)
    logger.info("Updated profile of user %s: %s", user.id, sorted(updates))
    return user
