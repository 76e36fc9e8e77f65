from __future__ import annotations

from .base import StoreBase


class UnreadActions(StoreBase):
    """Local read markers and badge counters.

    Nothing here is reconciled with a server; the counters only move through
    the actions below and therefore never drop below zero.
    """

    def unread_count(self, channel_id: str) -> int:
        return self.state.unread_count_by_channel.get(channel_id, 0)

    def mention_count(self, guild_id: str) -> int:
        return self.state.mention_count_by_guild.get(guild_id, 0)

    def guild_has_unread(self, guild_id: str) -> bool:
        counts = self.state.unread_count_by_channel
        return any(
            counts.get(cid, 0) > 0
            for cid in self.state.channel_ids_by_guild.get(guild_id, [])
        )

    def increment_unread(self, channel_id: str) -> None:
        counts = self.state.unread_count_by_channel
        counts[channel_id] = counts.get(channel_id, 0) + 1
        self._commit("increment_unread")

    def mark_channel_read(self, channel_id: str, message_id: str) -> None:
        self.state.last_read_by_channel[channel_id] = message_id
        self.state.unread_count_by_channel[channel_id] = 0
        self._commit("mark_channel_read")

    def mark_channel_read_latest(self, channel_id: str) -> None:
        """Mark ``channel_id`` read up to its newest loaded message."""
        ids = self.state.message_ids_by_channel.get(channel_id)
        if not ids:
            return
        self.mark_channel_read(channel_id, ids[-1])

    def increment_mention(self, guild_id: str) -> None:
        counts = self.state.mention_count_by_guild
        counts[guild_id] = counts.get(guild_id, 0) + 1
        self._commit("increment_mention")

    def reset_guild_mentions(self, guild_id: str) -> None:
        self.state.mention_count_by_guild[guild_id] = 0
        self._commit("reset_guild_mentions")
