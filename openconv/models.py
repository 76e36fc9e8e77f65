from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChannelType(str, Enum):
    TEXT = "text"
    VOICE = "voice"


class PresenceStatus(str, Enum):
    ONLINE = "online"
    IDLE = "idle"
    DND = "dnd"
    OFFLINE = "offline"

    @property
    def is_online(self) -> bool:
        return self is not PresenceStatus.OFFLINE


class User(CamelModel):
    id: str
    display_name: str = Field(alias="displayName")
    avatar_url: Optional[str] = Field(default=None, alias="avatarUrl")
    email: str = ""


class Guild(CamelModel):
    id: str
    name: str
    owner_id: str = Field(alias="ownerId")
    icon_url: Optional[str] = Field(default=None, alias="iconUrl")


class Channel(CamelModel):
    id: str
    guild_id: str = Field(alias="guildId")
    name: str
    channel_type: ChannelType = Field(default=ChannelType.TEXT, alias="channelType")
    position: int = 0
    category: Optional[str] = None


class FileAttachment(CamelModel):
    id: str
    file_name: str = Field(alias="fileName")
    file_size: int = Field(alias="fileSize")
    mime_type: str = Field(alias="mimeType")
    url: str
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")


class Message(CamelModel):
    id: str
    channel_id: str = Field(alias="channelId")
    sender_id: str = Field(alias="senderId")
    content: str
    encrypted_content: str = Field(alias="encryptedContent")
    nonce: str
    created_at: datetime = Field(alias="createdAt")
    edited_at: Optional[datetime] = Field(default=None, alias="editedAt")
    attachments: List[FileAttachment] = Field(default_factory=list)

    @field_validator("created_at", "edited_at")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None


class Member(CamelModel):
    user_id: str = Field(alias="userId")
    guild_id: str = Field(alias="guildId")
    nickname: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    joined_at: datetime = Field(alias="joinedAt")

    @property
    def key(self) -> str:
        return member_key(self.guild_id, self.user_id)


def member_key(guild_id: str, user_id: str) -> str:
    return f"{guild_id}-{user_id}"


class Role(CamelModel):
    id: str
    guild_id: str = Field(alias="guildId")
    name: str
    color: str
    position: int


class NotificationType(str, Enum):
    ERROR = "error"
    SUCCESS = "success"
    INFO = "info"


class Notification(CamelModel):
    id: str
    type: NotificationType
    message: str
    dismiss_after_ms: Optional[int] = Field(default=None, alias="dismissAfterMs")
