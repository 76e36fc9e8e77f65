from __future__ import annotations

import uuid

from ..models import Channel, ChannelType
from .base import StoreBase


class ChannelActions(StoreBase):
    def get_channel(self, channel_id: str) -> Channel | None:
        return self.state.channels_by_id.get(channel_id)

    def channels_for_guild(self, guild_id: str) -> list[Channel]:
        ids = self.state.channel_ids_by_guild.get(guild_id, [])
        return [self.state.channels_by_id[cid] for cid in ids if cid in self.state.channels_by_id]

    def add_channel(self, channel: Channel) -> None:
        self.state.channels_by_id[channel.id] = channel
        ids = self.state.channel_ids_by_guild.setdefault(channel.guild_id, [])
        if channel.id not in ids:
            ids.append(channel.id)
        self._commit("add_channel")

    def create_channel(
        self,
        guild_id: str,
        name: str,
        channel_type: ChannelType | str = ChannelType.TEXT,
        category: str | None = None,
    ) -> Channel:
        ids = self.state.channel_ids_by_guild.setdefault(guild_id, [])
        channel = Channel(
            id=str(uuid.uuid4()),
            guild_id=guild_id,
            name=name,
            channel_type=ChannelType(channel_type),
            position=len(ids),
            category=category,
        )
        self.state.channels_by_id[channel.id] = channel
        ids.append(channel.id)
        self._commit("create_channel")
        return channel

    def delete_channel(self, channel_id: str) -> None:
        channel = self.state.channels_by_id.pop(channel_id, None)
        if channel is None:
            return
        guild_id = channel.guild_id
        if guild_id in self.state.channel_ids_by_guild:
            self.state.channel_ids_by_guild[guild_id] = [
                cid for cid in self.state.channel_ids_by_guild[guild_id] if cid != channel_id
            ]
        if self.state.last_visited_channel_by_guild.get(guild_id) == channel_id:
            del self.state.last_visited_channel_by_guild[guild_id]
        self._commit("delete_channel")

    def set_last_visited_channel(self, guild_id: str, channel_id: str) -> None:
        self.state.last_visited_channel_by_guild[guild_id] = channel_id
        self._commit("set_last_visited_channel")
