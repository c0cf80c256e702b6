# src/chatapp/schemas/chat.py
"""Chat and message request schemas."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import ImageFile, ObjectId, PageRequest, UploadedFile

MAX_MESSAGE_LENGTH = 500


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class MediaContent:
    file: UploadedFile


MessageContent = TextContent | MediaContent


class CreateOneToOneChatRequest(BaseModel):
    user_id: ObjectId


class CreateGroupChatRequest(BaseModel):
    """A named group; the caller is added as participant and admin."""

    chat_name: str
    participants: list[ObjectId] = Field(default_factory=list)

    @field_validator("chat_name")
    @classmethod
    def validate_chat_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Chat name is too short.")
        if len(value) > 15:
            raise ValueError("Chat name is too long.")
        return value

    @field_validator("participants")
    @classmethod
    def validate_participants(cls, value: list[str]) -> list[str]:
        unique = list(dict.fromkeys(value))
        if len(unique) < 2:
            raise ValueError("At least 2 participants are required.")
        return unique


class SendMessageRequest(BaseModel):
    """Exactly one of ``message`` or ``file`` must be supplied."""

    chat_id: ObjectId
    message: str | None = Field(None, min_length=1, max_length=MAX_MESSAGE_LENGTH)
    file: ImageFile = None

    @model_validator(mode="after")
    def require_exactly_one(self) -> "SendMessageRequest":
        if (self.message is not None) == (self.file is not None):
            raise ValueError("Either send text or file.")
        return self

    @property
    def content(self) -> MessageContent:
        if self.file is not None:
            return MediaContent(self.file)
        return TextContent(self.message or "")


class ChatMessagesRequest(PageRequest):
    chat_id: ObjectId
