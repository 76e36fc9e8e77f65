from __future__ import annotations

import uuid

from ..models import Guild
from .base import StoreBase


class GuildActions(StoreBase):
    def get_guild(self, guild_id: str) -> Guild | None:
        return self.state.guilds_by_id.get(guild_id)

    def guilds(self) -> list[Guild]:
        return [self.state.guilds_by_id[gid] for gid in self.state.guild_ids]

    def add_guild(self, guild: Guild) -> None:
        """Insert a guild built elsewhere (e.g. returned by the message source)."""
        self.state.guilds_by_id[guild.id] = guild
        if guild.id not in self.state.guild_ids:
            self.state.guild_ids.append(guild.id)
        self._commit("add_guild")

    def create_guild(self, name: str, icon_url: str | None = None) -> Guild:
        owner = self.state.current_user
        guild = Guild(
            id=str(uuid.uuid4()),
            name=name,
            owner_id=owner.id if owner else "",
            icon_url=icon_url,
        )
        self.state.guilds_by_id[guild.id] = guild
        self.state.guild_ids.append(guild.id)
        self._commit("create_guild")
        return guild

    def update_guild(
        self, guild_id: str, name: str | None = None, icon_url: str | None = None
    ) -> None:
        guild = self.state.guilds_by_id.get(guild_id)
        if guild is None:
            return
        updates: dict[str, object] = {}
        if name is not None:
            updates["name"] = name
        if icon_url is not None:
            updates["icon_url"] = icon_url
        self.state.guilds_by_id[guild_id] = guild.model_copy(update=updates)
        self._commit("update_guild")

    def leave_guild(self, guild_id: str) -> None:
        if guild_id not in self.state.guilds_by_id:
            return
        del self.state.guilds_by_id[guild_id]
        self.state.guild_ids = [gid for gid in self.state.guild_ids if gid != guild_id]
        if self.state.last_visited_guild_id == guild_id:
            self.state.last_visited_guild_id = None
        self._commit("leave_guild")

    def set_last_visited_guild(self, guild_id: str) -> None:
        self.state.last_visited_guild_id = guild_id
        self._commit("set_last_visited_guild")
