"""Data access helpers for working with users."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from chatapp.models.user import User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        """Return a user by identifier."""
        return self.session.get(User, user_id)

    def get_many(self, user_ids: Iterable[str]) -> dict[str, User]:
        """Return the users that exist among ``user_ids``, keyed by id."""
        ids = list(user_ids)
        if not ids:
            return {}
        result = self.session.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars()}

    def find_by_username(self, username: str) -> User | None:
        result = self.session.execute(select(User).where(User.username == username))
        return result.scalars().first()

    def find_by_email(self, email: str) -> User | None:
        result = self.session.execute(select(User).where(User.email == email))
        return result.scalars().first()

    def find_conflicting(
        self,
        *,
        email: str | None = None,
        username: str | None = None,
        exclude_id: str | None = None,
    ) -> User | None:
        """Return another user already holding ``email`` or ``username``."""
        conditions = []
        if email:
            conditions.append(User.email == email)
        if username:
            conditions.append(User.username == username)
        if not conditions:
            return None
        stmt = select(User).where(or_(*conditions))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt).scalars().first()

    def add(self, user: User) -> User:
        """Stage a new user and flush so database constraints are checked."""
        self.session.add(user)
        self.session.flush()
        return user
