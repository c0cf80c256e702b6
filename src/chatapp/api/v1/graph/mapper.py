# src/chatapp/api/v1/graph/mapper.py
"""Projection of ORM rows into GraphQL output types.

Rows handed to these functions must have their user references resolved by
the repositories. A reference that was never loaded is a programming error
and fails loudly instead of producing a partial response.
"""

from __future__ import annotations

from typing import Any

import strawberry
from sqlalchemy import inspect as sa_inspect

from chatapp.db.time import as_utc
from chatapp.models import Chat, Message, User

from .types import ChatType, MessageType, UserType


class UnresolvedReferenceError(RuntimeError):
    """A relationship needed for the response was not loaded."""


def _loaded(entity: Any, attribute: str) -> Any:
    if attribute in sa_inspect(entity).unloaded:
        raise UnresolvedReferenceError(
            f"{type(entity).__name__}.{attribute} was not resolved before mapping"
        )
    return getattr(entity, attribute)


def map_user(user: User) -> UserType:
    return UserType(
        id=strawberry.ID(user.id),
        name=user.name,
        username=user.username,
        email=user.email,
        profile_picture=user.profile_picture,
        created_at=as_utc(user.created_at),
        updated_at=as_utc(user.updated_at),
    )


def map_chat(chat: Chat) -> ChatType:
    participants = _loaded(chat, "participants")
    if chat.group_admin_id is None:
        group_admin = None
    else:
        admin = _loaded(chat, "group_admin")
        group_admin = map_user(admin) if admin is not None else None

    return ChatType(
        id=strawberry.ID(chat.id),
        chat_name=chat.chat_name,
        is_group_chat=chat.is_group_chat,
        participants=[map_user(user) for user in participants],
        group_admin=group_admin,
        last_message_at=as_utc(chat.last_message_at),
        created_at=as_utc(chat.created_at),
        updated_at=as_utc(chat.updated_at),
    )


def map_message(message: Message) -> MessageType:
    return MessageType(
        id=strawberry.ID(message.id),
        chat=map_chat(_loaded(message, "chat")),
        sender=map_user(_loaded(message, "sender")),
        content=message.content,
        content_type=message.content_type,
        created_at=as_utc(message.created_at),
        updated_at=as_utc(message.updated_at),
    )
