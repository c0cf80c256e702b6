"""Data access helpers for messages."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from chatapp.models.chat import Chat
from chatapp.models.message import Message

__all__ = ["MessageRepository"]

_RESOLVED_MESSAGE = (
    selectinload(Message.sender),
    selectinload(Message.chat).selectinload(Chat.participants),
    selectinload(Message.chat).selectinload(Chat.group_admin),
)


class MessageRepository:
    """Thin wrapper around database access for message entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, message: Message) -> Message:
        self.session.add(message)
        self.session.flush()
        return message

    def get_resolved(self, message_id: str) -> Message | None:
        """Return a message with its sender and chat (participants, admin) loaded."""
        stmt = (
            select(Message)
            .where(Message.id == message_id)
            .options(*_RESOLVED_MESSAGE)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def list_for_chat(self, chat_id: str, *, skip: int, limit: int) -> list[Message]:
        """Return a page of a chat's messages, oldest first."""
        stmt = (
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at, Message.id)
            .offset(skip)
            .limit(limit)
            .options(*_RESOLVED_MESSAGE)
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars())
