# tests/services/test_chat_service.py
"""Tests for direct/group chat resolution and message posting."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from chatapp.core.errors import (
    InvalidRequestError,
    NotFoundError,
    UpstreamFailure,
    ValidationFailure,
)
from chatapp.db.time import as_utc, utcnow
from chatapp.models import CONTENT_TYPE_MEDIA, CONTENT_TYPE_TEXT, Chat, Message
from chatapp.repositories.chat_repo import ChatRepository
from chatapp.schemas.chat import MediaContent, TextContent
from chatapp.schemas.common import UploadedFile
from chatapp.services.chat_service import CHAT_NOT_FOUND, USER_NOT_FOUND, ChatService

MISSING_ID = "0" * 24


@pytest.fixture()
def service(db_session, media_host) -> ChatService:
    return ChatService(db_session, media_host)


def _count(db_session, model) -> int:
    return db_session.execute(select(func.count()).select_from(model)).scalar_one()


def test_direct_chat_is_symmetric_and_idempotent(service, db_session, test_user, other_user):
    first = service.get_or_create_direct_chat(test_user.id, other_user.id)
    again = service.get_or_create_direct_chat(test_user.id, other_user.id)
    reverse = service.get_or_create_direct_chat(other_user.id, test_user.id)

    assert first.id == again.id == reverse.id
    assert first.is_group_chat is False
    assert [user.id for user in first.participants] == [test_user.id, other_user.id]
    assert _count(db_session, Chat) == 1


def test_direct_chat_with_unknown_user(service, test_user):
    with pytest.raises(NotFoundError) as exc_info:
        service.get_or_create_direct_chat(test_user.id, MISSING_ID)
    assert exc_info.value.message == USER_NOT_FOUND


def test_direct_chat_with_self_is_rejected(service, test_user):
    with pytest.raises(ValidationFailure):
        service.get_or_create_direct_chat(test_user.id, test_user.id)


def test_direct_chat_race_reuses_the_winner(
    service, db_session, monkeypatch, test_user, other_user
):
    """A creator that loses the insert race returns the existing chat."""
    winner = service.get_or_create_direct_chat(other_user.id, test_user.id)

    original_find = ChatRepository.find_direct
    calls = {"count": 0}

    def stale_find(self, first_user_id, second_user_id):
        calls["count"] += 1
        if calls["count"] == 1:
            return None
        return original_find(self, first_user_id, second_user_id)

    monkeypatch.setattr(ChatRepository, "find_direct", stale_find)

    chat = service.get_or_create_direct_chat(test_user.id, other_user.id)

    assert chat.id == winner.id
    assert calls["count"] == 2
    assert _count(db_session, Chat) == 1


def test_group_chat_appends_caller_and_sets_admin(
    service, test_user, other_user, third_user
):
    chat = service.create_group_chat(test_user.id, "Team", [other_user.id, third_user.id])

    assert chat.is_group_chat is True
    assert chat.chat_name == "Team"
    assert [user.id for user in chat.participants] == [
        other_user.id,
        third_user.id,
        test_user.id,
    ]
    assert chat.group_admin is not None
    assert chat.group_admin.id == test_user.id


def test_group_chat_does_not_duplicate_listed_caller(service, test_user, other_user):
    chat = service.create_group_chat(test_user.id, "Pair", [test_user.id, other_user.id])
    assert [user.id for user in chat.participants] == [test_user.id, other_user.id]


def test_group_chat_with_unknown_participant(service, db_session, test_user, other_user):
    with pytest.raises(InvalidRequestError) as exc_info:
        service.create_group_chat(test_user.id, "Team", [other_user.id, MISSING_ID])
    assert exc_info.value.message == "Invalid request."
    assert _count(db_session, Chat) == 0


@pytest.mark.asyncio
async def test_send_text_message(service, test_user, other_user):
    chat = service.get_or_create_direct_chat(test_user.id, other_user.id)

    message = await service.send_message(test_user.id, chat.id, TextContent("hello bob"))

    assert message.content == "hello bob"
    assert message.content_type == CONTENT_TYPE_TEXT
    assert message.sender.id == test_user.id
    assert message.chat.id == chat.id
    assert {user.id for user in message.chat.participants} == {test_user.id, other_user.id}


@pytest.mark.asyncio
async def test_send_media_message_stores_hosted_url(service, media_host, test_user, other_user):
    chat = service.get_or_create_direct_chat(test_user.id, other_user.id)
    upload = UploadedFile(filename="cat.jpg", content_type="image/jpeg", data=b"jpeg-bytes")

    message = await service.send_message(test_user.id, chat.id, MediaContent(upload))

    assert message.content_type == CONTENT_TYPE_MEDIA
    assert message.content == "https://media.test/1/cat.jpg"
    assert media_host.uploads[0]["data"] == b"jpeg-bytes"


@pytest.mark.asyncio
async def test_send_message_advances_last_activity(service, db_session, test_user, other_user):
    chat = service.get_or_create_direct_chat(test_user.id, other_user.id)
    before = as_utc(chat.last_message_at)

    message = await service.send_message(test_user.id, chat.id, TextContent("ping"))

    after = as_utc(message.chat.last_message_at)
    assert after >= before


@pytest.mark.asyncio
async def test_last_activity_never_moves_backwards(service, db_session, test_user, other_user):
    chat = service.get_or_create_direct_chat(test_user.id, other_user.id)
    future = utcnow() + timedelta(hours=1)
    stored = db_session.get(Chat, chat.id)
    stored.last_message_at = future
    db_session.commit()

    message = await service.send_message(test_user.id, chat.id, TextContent("ping"))

    assert as_utc(message.chat.last_message_at) == future


@pytest.mark.asyncio
async def test_send_message_to_unknown_chat(service, test_user):
    with pytest.raises(NotFoundError) as exc_info:
        await service.send_message(test_user.id, MISSING_ID, TextContent("hi"))
    assert exc_info.value.message == CHAT_NOT_FOUND


@pytest.mark.asyncio
async def test_non_participant_cannot_post(service, db_session, test_user, other_user, third_user):
    chat = service.get_or_create_direct_chat(test_user.id, other_user.id)

    with pytest.raises(NotFoundError):
        await service.send_message(third_user.id, chat.id, TextContent("intruder"))
    assert _count(db_session, Message) == 0


@pytest.mark.asyncio
async def test_upstream_failure_creates_no_message(
    service, db_session, media_host, test_user, other_user
):
    chat = service.get_or_create_direct_chat(test_user.id, other_user.id)
    media_host.fail_with = "cloudinary down"
    upload = UploadedFile(filename="cat.png", content_type="image/png", data=b"png")

    with pytest.raises(UpstreamFailure) as exc_info:
        await service.send_message(test_user.id, chat.id, MediaContent(upload))

    assert exc_info.value.detail == "cloudinary down"
    assert exc_info.value.message == "Something went wrong."
    assert _count(db_session, Message) == 0


@pytest.mark.asyncio
async def test_list_chats_orders_by_recent_activity(
    service, test_user, other_user, third_user
):
    direct = service.get_or_create_direct_chat(test_user.id, other_user.id)
    group = service.create_group_chat(test_user.id, "Team", [other_user.id, third_user.id])
    await service.send_message(test_user.id, direct.id, TextContent("bump"))

    chats = service.list_chats(test_user.id, skip=0, limit=20)
    assert [chat.id for chat in chats] == [direct.id, group.id]

    assert [chat.id for chat in service.list_chats(third_user.id, skip=0, limit=20)] == [group.id]


@pytest.mark.asyncio
async def test_list_messages_oldest_first(service, test_user, other_user, third_user):
    chat = service.get_or_create_direct_chat(test_user.id, other_user.id)
    await service.send_message(test_user.id, chat.id, TextContent("one"))
    await service.send_message(other_user.id, chat.id, TextContent("two"))

    messages = service.list_messages(other_user.id, chat.id, skip=0, limit=20)
    assert [message.content for message in messages] == ["one", "two"]

    with pytest.raises(NotFoundError):
        service.list_messages(third_user.id, chat.id, skip=0, limit=20)
