# src/chatapp/models/__init__.py
"""SQLAlchemy models for the chat application."""

from .chat import Chat, chat_participants, direct_chat_key
from .message import CONTENT_TYPE_MEDIA, CONTENT_TYPE_TEXT, Message
from .user import User

__all__ = [
    "Chat", "chat_participants", "direct_chat_key",
    "Message", "CONTENT_TYPE_MEDIA", "CONTENT_TYPE_TEXT",
    "User",
]
