# src/chatapp/schemas/__init__.py
"""
Pydantic schemas for request validation and REST responses.

GraphQL output types live with the GraphQL surface in ``chatapp.api.v1.graph``.
"""

from .chat import (
    ChatMessagesRequest,
    CreateGroupChatRequest,
    CreateOneToOneChatRequest,
    MediaContent,
    MessageContent,
    SendMessageRequest,
    TextContent,
)
from .common import PageRequest, UploadedFile, validate
from .user import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UpdateUserRequest,
)

__all__ = [
    "ChatMessagesRequest", "CreateGroupChatRequest", "CreateOneToOneChatRequest",
    "MediaContent", "MessageContent", "SendMessageRequest", "TextContent",
    "PageRequest", "UploadedFile", "validate",
    "LoginRequest", "LoginResponse",
    "RegisterRequest", "RegisterResponse",
    "UpdateUserRequest",
]
