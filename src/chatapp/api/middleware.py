"""Cookie authentication middleware.

Every request must carry a valid session cookie unless its path is in
``PUBLIC_PATHS``. Public paths skip the credential requirement entirely and
continue down the chain exactly once.
"""

from __future__ import annotations

import logging
from typing import Final

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from chatapp.core.errors import UnauthorizedError
from chatapp.core.settings import settings
from chatapp.services.identity import verify_access_token

logger = logging.getLogger(__name__)

PUBLIC_PATHS: Final[frozenset[str]] = frozenset(
    {
        "/",
        "/health",
        "/auth/register",
        "/auth/login",
        "/auth/logout",
        "/docs",
        "/docs/oauth2-redirect",
        "/redoc",
        "/openapi.json",
    }
)


def is_public_path(path: str) -> bool:
    """Exact-match membership test against the allow-list."""
    return path in PUBLIC_PATHS


class AuthCookieMiddleware(BaseHTTPMiddleware):
    """Resolve the session cookie into ``request.state.user_id``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS" or is_public_path(request.url.path):
            return await call_next(request)

        token = request.cookies.get(settings.auth_cookie_name)
        try:
            request.state.user_id = verify_access_token(token)
        except UnauthorizedError as err:
            logger.debug("Rejected unauthenticated request to %s", request.url.path)
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"success": False, "message": err.message},
            )
        return await call_next(request)
