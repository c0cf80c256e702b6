# src/chatapp/models/chat.py
"""Models describing direct and group conversations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatapp.db.ids import OBJECT_ID_LENGTH, new_object_id
from chatapp.db.session import Base
from chatapp.db.time import utcnow

from .user import User

chat_participants = Table(
    "chat_participants",
    Base.metadata,
    Column(
        "chat_id",
        String(OBJECT_ID_LENGTH),
        ForeignKey("chats.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        String(OBJECT_ID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("position", Integer, nullable=False, default=0),
)


def direct_chat_key(first_user_id: str, second_user_id: str) -> str:
    """Return the order-independent key identifying a direct chat pair."""
    low, high = sorted((first_user_id, second_user_id))
    return f"{low}:{high}"


class Chat(Base):
    """A conversation between two users (direct) or several (group).

    References to users are never loaded implicitly (``lazy="raise"``);
    callers go through ``ChatRepository.get_with_participants`` when they
    need hydrated participants.
    """

    __tablename__ = "chats"

    id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH), primary_key=True, default=new_object_id
    )
    chat_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_group_chat: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    group_admin_id: Mapped[str | None] = mapped_column(
        String(OBJECT_ID_LENGTH), ForeignKey("users.id"), nullable=True
    )
    # Sorted participant pair for direct chats, NULL for groups. The unique
    # constraint keeps at most one direct chat per pair.
    direct_key: Mapped[str | None] = mapped_column(
        String(2 * OBJECT_ID_LENGTH + 1), unique=True, nullable=True
    )
    last_message_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    participants: Mapped[list[User]] = relationship(
        User,
        secondary=chat_participants,
        order_by=chat_participants.c.position,
        lazy="raise",
        viewonly=True,
    )
    group_admin: Mapped[User | None] = relationship(
        User,
        foreign_keys=[group_admin_id],
        lazy="raise",
    )
