from __future__ import annotations

import re

import structlog

from .models import Message
from .store import AppStore

logger = structlog.get_logger(__name__)


def mentions_user(content: str, display_name: str) -> bool:
    """Return ``True`` when ``content`` contains ``@display_name``."""
    if not display_name:
        return False
    pattern = r"(?<!\w)@" + re.escape(display_name) + r"(?!\w)"
    return re.search(pattern, content, re.IGNORECASE) is not None


class Inbox:
    """Applies messages arriving from other users to the store.

    The message is indexed, the channel's unread counter goes up unless the
    channel is the one on screen, and the guild's mention counter goes up when
    the current user is mentioned by name.

    ``receive`` is the entry point for a live feed of other users' messages.
    The mock message source has no such feed, so in the demo service the
    counters only move when a feed is attached to ``AppContext.inbox``.
    """

    def __init__(self, store: AppStore) -> None:
        self.store = store
        self.active_channel_id: str | None = None

    def open_channel(self, channel_id: str) -> None:
        """Focus ``channel_id`` and mark it read up to its newest message."""
        self.active_channel_id = channel_id
        channel = self.store.get_channel(channel_id)
        if channel is not None:
            self.store.set_last_visited_guild(channel.guild_id)
            self.store.set_last_visited_channel(channel.guild_id, channel_id)
        self.store.mark_channel_read_latest(channel_id)

    def receive(self, message: Message) -> None:
        store = self.store
        is_new = store.get_message(message.id) is None
        store.add_message(message.channel_id, message)
        if not is_new or message.sender_id == store.current_user_id:
            return

        if message.channel_id == self.active_channel_id:
            store.mark_channel_read_latest(message.channel_id)
        else:
            store.increment_unread(message.channel_id)

        user = store.current_user
        channel = store.get_channel(message.channel_id)
        if user is not None and channel is not None and mentions_user(
            message.content, user.display_name
        ):
            store.increment_mention(channel.guild_id)
            logger.debug(
                "inbox.mention",
                guild_id=channel.guild_id,
                channel_id=message.channel_id,
                message_id=message.id,
            )
