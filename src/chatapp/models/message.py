"""Models describing messages posted into chats."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatapp.db.ids import OBJECT_ID_LENGTH, new_object_id
from chatapp.db.session import Base
from chatapp.db.time import utcnow

from .chat import Chat
from .user import User

CONTENT_TYPE_TEXT = "text"
CONTENT_TYPE_MEDIA = "media"


class Message(Base):
    """Immutable message; ``content`` is the text or the hosted media URL."""

    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH), primary_key=True, default=new_object_id
    )
    chat_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH), ForeignKey("users.id"), nullable=False
    )
    content_type: Mapped[str] = mapped_column(
        String(8), nullable=False, default=CONTENT_TYPE_TEXT
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    chat: Mapped[Chat] = relationship(Chat, lazy="raise")
    sender: Mapped[User] = relationship(User, lazy="raise")
