from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from ..models import CamelModel, ChannelType, FileAttachment, PresenceStatus


class CreateGuildBody(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    icon_url: Optional[str] = Field(default=None, alias="iconUrl")


class UpdateGuildBody(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    icon_url: Optional[str] = Field(default=None, alias="iconUrl")


class CreateChannelBody(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    channel_type: ChannelType = Field(default=ChannelType.TEXT, alias="channelType")
    category: Optional[str] = None


class SendBody(CamelModel):
    content: str = Field(min_length=1, max_length=4000)
    attachments: List[FileAttachment] = Field(default_factory=list)


class EditBody(CamelModel):
    content: str = Field(min_length=1, max_length=4000)


class ReadBody(CamelModel):
    message_id: Optional[str] = Field(default=None, alias="messageId")


class PresenceBody(CamelModel):
    status: PresenceStatus


class PreferencesPatch(CamelModel):
    theme: Optional[str] = None
    channel_sidebar_visible: Optional[bool] = Field(default=None, alias="channelSidebarVisible")
    member_list_visible: Optional[bool] = Field(default=None, alias="memberListVisible")


class ResizeBody(CamelModel):
    width: int = Field(ge=0)
