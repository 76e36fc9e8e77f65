from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..models import (
    Channel,
    Guild,
    Member,
    Message,
    Notification,
    PresenceStatus,
    Role,
    User,
)


@dataclass
class Modal:
    type: str
    props: Dict[str, Any] | None = None


@dataclass
class StoreState:
    """Every field the client keeps in memory for one session.

    Maps are keyed by id; the ``*_ids_by_*`` lists are the display order of a
    parent's children. Only the fields in :data:`PREFERENCE_FIELDS` outlive the
    session.
    """

    # session
    current_user: User | None = None
    token: str | None = None

    # entities
    users_by_id: Dict[str, User] = field(default_factory=dict)
    guilds_by_id: Dict[str, Guild] = field(default_factory=dict)
    guild_ids: List[str] = field(default_factory=list)
    channels_by_id: Dict[str, Channel] = field(default_factory=dict)
    channel_ids_by_guild: Dict[str, List[str]] = field(default_factory=dict)
    messages_by_id: Dict[str, Message] = field(default_factory=dict)
    message_ids_by_channel: Dict[str, List[str]] = field(default_factory=dict)
    members_by_id: Dict[str, Member] = field(default_factory=dict)
    member_ids_by_guild: Dict[str, List[str]] = field(default_factory=dict)
    roles_by_id: Dict[str, Role] = field(default_factory=dict)
    role_ids_by_guild: Dict[str, List[str]] = field(default_factory=dict)
    presence_by_user_id: Dict[str, PresenceStatus] = field(default_factory=dict)

    # pagination
    has_more: Dict[str, bool] = field(default_factory=dict)
    loading_messages: Dict[str, bool] = field(default_factory=dict)

    # unread
    last_read_by_channel: Dict[str, str] = field(default_factory=dict)
    unread_count_by_channel: Dict[str, int] = field(default_factory=dict)
    mention_count_by_guild: Dict[str, int] = field(default_factory=dict)

    # navigation
    last_visited_guild_id: str | None = None
    last_visited_channel_by_guild: Dict[str, str] = field(default_factory=dict)

    # ui
    theme: str = "dark"
    channel_sidebar_visible: bool = True
    member_list_visible: bool = True
    active_modal: Modal | None = None
    typing_users: Dict[str, List[str]] = field(default_factory=dict)
    notifications: List[Notification] = field(default_factory=list)
    scroll_position_by_channel: Dict[str, float] = field(default_factory=dict)


PREFERENCE_FIELDS = (
    "last_visited_guild_id",
    "last_visited_channel_by_guild",
    "theme",
    "channel_sidebar_visible",
    "member_list_visible",
)
