# src/chatapp/api/v1/graph/types.py
"""GraphQL output types. Field names are camel-cased by strawberry."""

from datetime import datetime

import strawberry


@strawberry.type(name="User", description="A registered account.")
class UserType:
    id: strawberry.ID
    name: str
    username: str
    email: str
    profile_picture: str
    created_at: datetime
    updated_at: datetime


@strawberry.type(name="Chat", description="A direct or group conversation.")
class ChatType:
    id: strawberry.ID
    chat_name: str | None
    is_group_chat: bool
    participants: list[UserType]
    group_admin: UserType | None
    last_message_at: datetime
    created_at: datetime
    updated_at: datetime


@strawberry.type(name="Message", description="A text or media message posted in a chat.")
class MessageType:
    id: strawberry.ID
    chat: ChatType
    sender: UserType
    content: str
    created_at: datetime
    updated_at: datetime
    content_type: str = strawberry.field(
        description='"text", or "media" when content is a hosted media URL.'
    )
