# src/chatapp/services/__init__.py
"""Business logic services for the chat application."""

from .chat_service import ChatService
from .media import CloudinaryClient, MediaHost, get_media_host

__all__ = [
    "ChatService",
    "CloudinaryClient",
    "MediaHost",
    "get_media_host",
]
