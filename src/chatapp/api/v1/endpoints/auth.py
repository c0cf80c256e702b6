# src/chatapp/api/v1/endpoints/auth.py
"""Authentication endpoints: register, login, logout."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from chatapp.core.errors import ChatAppError, InternalError
from chatapp.core.settings import settings
from chatapp.schemas.common import validate
from chatapp.schemas.user import (
    LoginRequest,
    LoginResponse,
    RegisterData,
    RegisterRequest,
    RegisterResponse,
)
from chatapp.services import user_service
from chatapp.services.identity import create_access_token

from ..dependencies import MediaHostDep, SessionDep, read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

INTERNAL_ERROR = "Internal server error."

OptionalForm = Annotated[str | None, Form()]


@router.post(
    "/register",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
)
async def register_user(
    db: SessionDep,
    media_host: MediaHostDep,
    name: OptionalForm = None,
    username: OptionalForm = None,
    email: OptionalForm = None,
    password: OptionalForm = None,
    profile_picture: Annotated[UploadFile | None, File(alias="profilePicture")] = None,
) -> RegisterResponse:
    """Create an account from a multipart form.

    Returns only the new id; a session is obtained separately via login.
    """
    fields: dict[str, Any] = {
        "name": name,
        "username": username,
        "email": email,
        "password": password,
        "profile_picture": await read_upload(profile_picture),
    }
    payload = validate(
        RegisterRequest, **{key: value for key, value in fields.items() if value is not None}
    )

    try:
        user = await user_service.register_user(db, media_host, payload)
    except ChatAppError as err:
        logger.warning("Registration failed: %s", err.message)
        raise
    except Exception as err:
        logger.exception("Unexpected error during registration")
        raise InternalError(INTERNAL_ERROR) from err

    return RegisterResponse(data=RegisterData(id=user.id))


@router.post(
    "/login",
    summary="Authenticate with username or email and password",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
)
async def login_user(
    payload: LoginRequest,
    db: SessionDep,
    response: Response,
) -> LoginResponse:
    """Verify credentials and set the HTTP-only session cookie."""
    try:
        user = await user_service.authenticate_user(db, payload)
        token = create_access_token(user.id)
    except ChatAppError:
        raise
    except Exception as err:
        logger.exception("Unexpected error during login")
        raise InternalError(INTERNAL_ERROR) from err

    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.access_token_max_age,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        path="/",
    )
    return LoginResponse()


@router.post("/logout", summary="Clear the session cookie")
async def logout_user(response: Response) -> dict[str, Any]:
    """Always succeeds, whether or not a session existed."""
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
    )
    return {"status": True, "message": "User logged-out"}
