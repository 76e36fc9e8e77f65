from __future__ import annotations

from typing import Iterable

from ..models import Member, Role, User, member_key
from .base import StoreBase


class MemberActions(StoreBase):
    def get_member(self, guild_id: str, user_id: str) -> Member | None:
        return self.state.members_by_id.get(member_key(guild_id, user_id))

    def get_role(self, role_id: str) -> Role | None:
        return self.state.roles_by_id.get(role_id)

    def get_user(self, user_id: str) -> User | None:
        return self.state.users_by_id.get(user_id)

    def member_keys(self, guild_id: str) -> list[str]:
        return list(self.state.member_ids_by_guild.get(guild_id, []))

    def roles_for_guild(self, guild_id: str) -> list[Role]:
        ids = self.state.role_ids_by_guild.get(guild_id, [])
        return [self.state.roles_by_id[rid] for rid in ids if rid in self.state.roles_by_id]

    def fetch_members(self, guild_id: str, members: Iterable[Member]) -> None:
        """Replace the member list of ``guild_id``."""
        keys: list[str] = []
        for member in members:
            key = member_key(guild_id, member.user_id)
            self.state.members_by_id[key] = member
            keys.append(key)
        self.state.member_ids_by_guild[guild_id] = keys
        self._commit("fetch_members")

    def update_member_role(self, key: str, role_id: str) -> None:
        member = self.state.members_by_id.get(key)
        if member is None or role_id in member.roles:
            return
        self.state.members_by_id[key] = member.model_copy(
            update={"roles": [*member.roles, role_id]}
        )
        self._commit("update_member_role")

    def set_roles(self, guild_id: str, roles: Iterable[Role]) -> None:
        ids: list[str] = []
        for role in roles:
            self.state.roles_by_id[role.id] = role
            ids.append(role.id)
        self.state.role_ids_by_guild[guild_id] = ids
        self._commit("set_roles")

    def set_users(self, users: Iterable[User]) -> None:
        for user in users:
            self.state.users_by_id[user.id] = user
        self._commit("set_users")
