# src/chatapp/services/chat_service.py
"""Chat resolution: direct and group chat creation, message posting.

Every public method returns entities with their user references resolved,
ready for the response mapper.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chatapp.core.errors import (
    InternalError,
    InvalidRequestError,
    NotFoundError,
    ValidationFailure,
)
from chatapp.db.time import as_utc, utcnow
from chatapp.models import (
    CONTENT_TYPE_MEDIA,
    CONTENT_TYPE_TEXT,
    Chat,
    Message,
    direct_chat_key,
)
from chatapp.repositories.chat_repo import ChatRepository
from chatapp.repositories.message_repo import MessageRepository
from chatapp.repositories.user_repo import UserRepository
from chatapp.schemas.chat import MediaContent, MessageContent, TextContent
from chatapp.services.media import MediaHost

logger = logging.getLogger(__name__)

CHAT_NOT_FOUND = "No chat found with provided chat id."
USER_NOT_FOUND = "No user found with provided user id."


class ChatService:
    """Chat and message operations for one request's session."""

    def __init__(self, db: Session, media_host: MediaHost) -> None:
        self.db = db
        self.media_host = media_host
        self.users = UserRepository(db)
        self.chats = ChatRepository(db)
        self.messages = MessageRepository(db)

    def _resolved_chat(self, chat_id: str) -> Chat:
        chat = self.chats.get_with_participants(chat_id)
        if chat is None:
            raise InternalError("Failed to load chat.")
        return chat

    def get_or_create_direct_chat(self, self_id: str, other_id: str) -> Chat:
        """Return the direct chat between two users, creating it on first use.

        At most one direct chat exists per unordered pair: the normalized pair
        key is unique, so a concurrent creator that loses the insert race
        re-reads the winner's row.
        """
        if other_id == self_id:
            raise ValidationFailure("Cannot start a chat with yourself.")
        if self.users.get(other_id) is None:
            raise NotFoundError(USER_NOT_FOUND)

        chat = self.chats.find_direct(self_id, other_id)
        if chat is None:
            chat = self._create_direct_chat(self_id, other_id)
        return self._resolved_chat(chat.id)

    def _create_direct_chat(self, self_id: str, other_id: str) -> Chat:
        chat = Chat(is_group_chat=False, direct_key=direct_chat_key(self_id, other_id))
        try:
            with self.db.begin_nested():
                self.chats.add(chat, [self_id, other_id])
        except IntegrityError:
            existing = self.chats.find_direct(self_id, other_id)
            if existing is None:
                raise
            logger.info("Direct chat %s created concurrently; reusing it", existing.id)
            return existing
        self.db.commit()
        logger.info("Created direct chat %s", chat.id)
        return chat

    def create_group_chat(self, self_id: str, name: str, participant_ids: list[str]) -> Chat:
        """Create a group chat administered by the caller.

        The caller is always a participant, appended after the requested
        users unless already listed.
        """
        requested = list(dict.fromkeys(participant_ids))
        known = self.users.get_many(requested)
        for user_id in requested:
            if user_id not in known:
                raise InvalidRequestError()

        participants = requested if self_id in requested else [*requested, self_id]
        chat = Chat(
            chat_name=name,
            is_group_chat=True,
            group_admin_id=self_id,
        )
        self.chats.add(chat, participants)
        self.db.commit()
        logger.info("Created group chat %s with %d participants", chat.id, len(participants))
        return self._resolved_chat(chat.id)

    async def send_message(self, self_id: str, chat_id: str, content: MessageContent) -> Message:
        """Post ``content`` into a chat the caller belongs to."""
        chat = self.chats.get(chat_id)
        if chat is None or not self.chats.is_participant(chat_id, self_id):
            raise NotFoundError(CHAT_NOT_FOUND)

        if isinstance(content, MediaContent):
            body = await self.media_host.upload(
                content.file.data,
                filename=content.file.filename,
                content_type=content.file.content_type,
            )
            content_type = CONTENT_TYPE_MEDIA
        elif isinstance(content, TextContent):
            body = content.text
            content_type = CONTENT_TYPE_TEXT
        else:  # pragma: no cover - exhaustive union
            raise TypeError(f"Unsupported message content: {content!r}")

        message = self.messages.add(
            Message(
                chat_id=chat.id,
                sender_id=self_id,
                content=body,
                content_type=content_type,
            )
        )
        chat.last_message_at = max(utcnow(), as_utc(chat.last_message_at))
        self.db.commit()

        resolved = self.messages.get_resolved(message.id)
        if resolved is None:
            raise InternalError("Failed to load message.")
        return resolved

    def list_chats(self, self_id: str, *, skip: int, limit: int) -> list[Chat]:
        return self.chats.list_for_user(self_id, skip=skip, limit=limit)

    def list_messages(
        self, self_id: str, chat_id: str, *, skip: int, limit: int
    ) -> list[Message]:
        if not self.chats.is_participant(chat_id, self_id):
            raise NotFoundError(CHAT_NOT_FOUND)
        return self.messages.list_for_chat(chat_id, skip=skip, limit=limit)
