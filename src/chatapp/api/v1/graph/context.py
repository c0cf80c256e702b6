# src/chatapp/api/v1/graph/context.py
"""Per-request GraphQL context built from FastAPI dependencies."""

from sqlalchemy.orm import Session
from strawberry.fastapi import BaseContext

from chatapp.services.media import MediaHost

from ..dependencies import CurrentUserIdDep, MediaHostDep, SessionDep


class ChatContext(BaseContext):
    """Authenticated caller plus the resources resolvers need."""

    def __init__(self, user_id: str, db: Session, media_host: MediaHost) -> None:
        super().__init__()
        self.user_id = user_id
        self.db = db
        self.media_host = media_host


async def get_context(
    user_id: CurrentUserIdDep,
    db: SessionDep,
    media_host: MediaHostDep,
) -> ChatContext:
    return ChatContext(user_id=user_id, db=db, media_host=media_host)
