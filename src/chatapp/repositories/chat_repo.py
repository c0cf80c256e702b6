"""Data access helpers for chats and their participants."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import exists, insert, select
from sqlalchemy.orm import Session, selectinload

from chatapp.models.chat import Chat, chat_participants, direct_chat_key

__all__ = ["ChatRepository", "CHAT_WITH_PARTICIPANTS"]

# Loader options that resolve every user reference held by a chat.
CHAT_WITH_PARTICIPANTS = (
    selectinload(Chat.participants),
    selectinload(Chat.group_admin),
)


class ChatRepository:
    """Chat persistence. Plain getters return reference-free rows; the
    ``*_with_participants`` style methods return fully resolved ones."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, chat_id: str) -> Chat | None:
        return self.session.get(Chat, chat_id)

    def get_with_participants(self, chat_id: str) -> Chat | None:
        """Return a chat with participants and admin loaded."""
        stmt = (
            select(Chat)
            .where(Chat.id == chat_id)
            .options(*CHAT_WITH_PARTICIPANTS)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def find_direct(self, first_user_id: str, second_user_id: str) -> Chat | None:
        """Return the direct chat between two users, in either order."""
        key = direct_chat_key(first_user_id, second_user_id)
        stmt = select(Chat).where(Chat.is_group_chat.is_(False), Chat.direct_key == key)
        return self.session.execute(stmt).scalars().first()

    def is_participant(self, chat_id: str, user_id: str) -> bool:
        stmt = select(
            exists().where(
                chat_participants.c.chat_id == chat_id,
                chat_participants.c.user_id == user_id,
            )
        )
        return bool(self.session.execute(stmt).scalar())

    def add(self, chat: Chat, participant_ids: Sequence[str]) -> Chat:
        """Insert ``chat`` and its participants, keeping their order."""
        self.session.add(chat)
        self.session.flush()
        self.session.execute(
            insert(chat_participants),
            [
                {"chat_id": chat.id, "user_id": user_id, "position": position}
                for position, user_id in enumerate(participant_ids)
            ],
        )
        return chat

    def list_for_user(self, user_id: str, *, skip: int, limit: int) -> list[Chat]:
        """Return the user's chats, most recently active first."""
        stmt = (
            select(Chat)
            .join(chat_participants, chat_participants.c.chat_id == Chat.id)
            .where(chat_participants.c.user_id == user_id)
            .order_by(Chat.last_message_at.desc(), Chat.id)
            .offset(skip)
            .limit(limit)
            .options(*CHAT_WITH_PARTICIPANTS)
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars())
