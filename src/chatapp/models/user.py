# src/chatapp/models/user.py
"""SQLAlchemy model for registered users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chatapp.core.settings import settings
from chatapp.db.ids import OBJECT_ID_LENGTH, new_object_id
from chatapp.db.session import Base
from chatapp.db.time import utcnow


class User(Base):
    """A registered account. The password hash never leaves this model."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH), primary_key=True, default=new_object_id
    )
    name: Mapped[str] = mapped_column(String(30), nullable=False)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(500), nullable=False)
    profile_picture: Mapped[str] = mapped_column(
        Text, nullable=False, default=lambda: settings.default_profile_picture
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<User {self.id} @{self.username}>"
