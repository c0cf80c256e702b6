# src/chatapp/services/identity.py
"""Issuing and verifying the signed session token carried in the auth cookie."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from chatapp.core.errors import UnauthorizedError
from chatapp.core.settings import settings

logger = logging.getLogger(__name__)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT whose ``sub`` claim is the user id."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode: dict[str, object] = {"sub": user_id, "exp": expire}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def verify_access_token(token: str | None) -> str:
    """Return the user id carried by ``token``.

    Raises:
        UnauthorizedError: If the token is missing, malformed, expired, signed
            with another key, or has no usable ``sub`` claim.
    """
    if not token:
        raise UnauthorizedError()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        logger.info("Rejected session token: %s", err)
        raise UnauthorizedError() from err

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise UnauthorizedError()
    return subject
