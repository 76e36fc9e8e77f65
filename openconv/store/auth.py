from __future__ import annotations

from ..models import User
from .base import StoreBase


class AuthActions(StoreBase):
    """The session identity: the user whose id signs outgoing messages."""

    @property
    def current_user(self) -> User | None:
        return self.state.current_user

    @property
    def current_user_id(self) -> str:
        user = self.state.current_user
        return user.id if user else ""

    def login(self, user: User, token: str | None = None) -> None:
        self.state.current_user = user
        self.state.token = token or f"mock-token-{user.id}"
        self.state.users_by_id.setdefault(user.id, user)
        self._commit("login")

    def logout(self) -> None:
        self.state.current_user = None
        self.state.token = None
        self._commit("logout")

    def update_profile(
        self, display_name: str | None = None, avatar_url: str | None = None
    ) -> None:
        user = self.state.current_user
        if user is None:
            return
        updates: dict[str, object] = {}
        if display_name is not None:
            updates["display_name"] = display_name
        if avatar_url is not None:
            updates["avatar_url"] = avatar_url
        if not updates:
            return
        user = user.model_copy(update=updates)
        self.state.current_user = user
        if user.id in self.state.users_by_id:
            self.state.users_by_id[user.id] = user
        self._commit("update_profile")
