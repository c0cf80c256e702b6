"""Media host client for uploading user files to Cloudinary.

Uploads go through the Cloudinary SDK. The SDK is blocking, so each upload
runs in a worker thread and is bounded by the configured timeout; there is
no chunked or resumable upload.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from chatapp.core.errors import UpstreamFailure
from chatapp.core.settings import settings

logger = logging.getLogger(__name__)


class MediaHost(Protocol):
    """Anything that can store a blob and hand back a durable URL."""

    async def upload(self, data: bytes, *, filename: str, content_type: str) -> str: ...


@dataclass(frozen=True)
class MediaConfig:
    """Immutable configuration for the Cloudinary client."""

    cloud_name: str
    api_key: str
    api_secret: str
    folder: str
    timeout_seconds: float


def load_media_config() -> MediaConfig:
    """Build configuration object from global settings."""
    return MediaConfig(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        folder=settings.media_folder,
        timeout_seconds=float(settings.media_upload_timeout_seconds),
    )


class CloudinaryClient:
    """Cloudinary uploads through the SDK's uploader."""

    def __init__(self, config: MediaConfig | None = None) -> None:
        self.config = config or load_media_config()
        cloudinary.config(
            cloud_name=self.config.cloud_name,
            api_key=self.config.api_key,
            api_secret=self.config.api_secret,
            secure=True,
        )

    def _upload_blocking(self, data: bytes) -> dict[str, Any]:
        return cloudinary.uploader.upload(
            data,
            folder=self.config.folder,
            resource_type="auto",
            timeout=self.config.timeout_seconds,
        )

    async def upload(self, data: bytes, *, filename: str, content_type: str) -> str:
        """Upload ``data`` and return its ``secure_url``.

        Raises:
            UpstreamFailure: On SDK or transport errors, or a response
                without ``secure_url``.
        """
        try:
            result = await asyncio.to_thread(self._upload_blocking, data)
        except cloudinary.exceptions.Error as exc:
            logger.error("Media host rejected upload of %s: %s", filename, exc)
            raise UpstreamFailure(f"Media host error: {exc}") from exc
        except OSError as exc:
            logger.error("Media upload of %s failed: %s", filename, exc)
            raise UpstreamFailure(f"Media upload failed: {exc}") from exc

        secure_url = result.get("secure_url") if isinstance(result, dict) else None
        if not secure_url:
            raise UpstreamFailure("Media host response missing secure_url")

        logger.info("Uploaded %s (%s, %d bytes) to media host", filename, content_type, len(data))
        return str(secure_url)


class _MediaClientSingleton:
    """Singleton wrapper for CloudinaryClient."""

    _instance: CloudinaryClient | None = None

    @classmethod
    def get_instance(cls) -> CloudinaryClient:
        if cls._instance is None:
            cls._instance = CloudinaryClient()
        return cls._instance


def get_media_host() -> MediaHost:
    """Return the process-wide media host client."""
    return _MediaClientSingleton.get_instance()
