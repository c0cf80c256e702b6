# src/chatapp/api/v1/graph/resolvers.py
"""Query and mutation resolvers.

Resolvers validate their arguments with the shared pydantic schemas, call
the services, and project the results through the mapper. Domain errors
propagate to the client unchanged.
"""

import logging
from typing import Any

import strawberry
from strawberry.file_uploads import Upload
from strawberry.types import Info

from chatapp.schemas import (
    ChatMessagesRequest,
    CreateGroupChatRequest,
    CreateOneToOneChatRequest,
    PageRequest,
    SendMessageRequest,
    UpdateUserRequest,
    validate,
)
from chatapp.services import user_service
from chatapp.services.chat_service import ChatService

from ..dependencies import read_upload
from .context import ChatContext
from .mapper import map_chat, map_message, map_user
from .types import ChatType, MessageType, UserType

logger = logging.getLogger(__name__)

ChatInfo = Info[ChatContext, None]


def _present(**values: Any) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _chat_service(info: ChatInfo) -> ChatService:
    return ChatService(info.context.db, info.context.media_host)


@strawberry.type
class Query:
    @strawberry.field
    def hello(self) -> str:
        return "Hello from the chat API!"

    @strawberry.field(description="The authenticated user.")
    def me(self, info: ChatInfo) -> UserType:
        user = user_service.get_user(info.context.db, info.context.user_id)
        return map_user(user)

    @strawberry.field(description="Chats the caller takes part in, most recent activity first.")
    def my_chats(self, info: ChatInfo, skip: int = 0, limit: int = 20) -> list[ChatType]:
        page = validate(PageRequest, skip=skip, limit=limit)
        chats = _chat_service(info).list_chats(
            info.context.user_id, skip=page.skip, limit=page.limit
        )
        return [map_chat(chat) for chat in chats]

    @strawberry.field(description="Messages of a chat the caller belongs to, oldest first.")
    def chat_messages(
        self, info: ChatInfo, chat_id: str, skip: int = 0, limit: int = 20
    ) -> list[MessageType]:
        request = validate(ChatMessagesRequest, chat_id=chat_id, skip=skip, limit=limit)
        messages = _chat_service(info).list_messages(
            info.context.user_id, request.chat_id, skip=request.skip, limit=request.limit
        )
        return [map_message(message) for message in messages]


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def update_user(
        self,
        info: ChatInfo,
        name: str | None = None,
        username: str | None = None,
        profile_picture: Upload | None = None,
        email: str | None = None,
    ) -> UserType:
        payload = validate(
            UpdateUserRequest,
            **_present(
                name=name,
                username=username,
                email=email,
                profile_picture=await read_upload(profile_picture),
            ),
        )
        user = await user_service.update_user(
            info.context.db, info.context.media_host, info.context.user_id, payload
        )
        return map_user(user)

    @strawberry.mutation
    def create_one_to_one_chat(self, info: ChatInfo, user_id: strawberry.ID) -> ChatType:
        request = validate(CreateOneToOneChatRequest, user_id=user_id)
        chat = _chat_service(info).get_or_create_direct_chat(
            info.context.user_id, request.user_id
        )
        return map_chat(chat)

    @strawberry.mutation
    def create_group_chat(
        self, info: ChatInfo, chat_name: str, participants: list[strawberry.ID]
    ) -> ChatType:
        request = validate(
            CreateGroupChatRequest, chat_name=chat_name, participants=list(participants)
        )
        chat = _chat_service(info).create_group_chat(
            info.context.user_id, request.chat_name, request.participants
        )
        return map_chat(chat)

    @strawberry.mutation
    async def send_message_in_chat(
        self,
        info: ChatInfo,
        chat_id: str,
        message: str | None = None,
        file: Upload | None = None,
    ) -> MessageType:
        request = validate(
            SendMessageRequest,
            **_present(chat_id=chat_id, message=message, file=await read_upload(file)),
        )
        sent = await _chat_service(info).send_message(
            info.context.user_id, request.chat_id, request.content
        )
        logger.info(
            "User %s sent a %s message in chat %s",
            info.context.user_id,
            sent.content_type,
            request.chat_id,
        )
        return map_message(sent)
