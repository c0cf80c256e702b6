# src/chatapp/main.py
"""Main entry point for the chat application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from chatapp.api.middleware import AuthCookieMiddleware
from chatapp.api.v1 import auth_router, graphql_router
from chatapp.core.errors import ChatAppError, ValidationFailure
from chatapp.core.logging_config import setup_logging
from chatapp.core.settings import settings
from chatapp.db.session import create_tables, dispose_engine
from chatapp.schemas.common import failure_from_errors

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)
    try:
        yield
    finally:
        dispose_engine()
        logger.info("%s stopped", settings.app_name)


# Initialize FastAPI app
app = FastAPI(
    title="Chat App API",
    description="Chat backend: cookie-session auth over REST, chats and messages over GraphQL",
    version=settings.app_version,
    lifespan=lifespan,
)

# Registered first so it runs innermost, after CORS has answered preflights
app.add_middleware(AuthCookieMiddleware)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)


def _error_body(error: ChatAppError) -> dict[str, Any]:
    if isinstance(error, ValidationFailure) and (error.field_errors or error.form_errors):
        return {
            "success": False,
            "message": ValidationFailure.default_message,
            "errors": error.as_payload(),
        }
    return {"success": False, "message": error.message}


@app.exception_handler(ChatAppError)
async def chat_app_error_handler(request: Request, exc: ChatAppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request to %s failed: %s", request.url.path, getattr(exc, "detail", exc))
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    failure = failure_from_errors(list(exc.errors()))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(failure))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": INTERNAL_ERROR},
    )


# Include API routers
app.include_router(auth_router)
app.include_router(graphql_router, prefix="/graphql")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "graphql": "/graphql",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chatapp.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
