from __future__ import annotations

from typing import Any, Dict, Iterable

from ..models import Notification
from .base import StoreBase
from .state import Modal

THEMES = ("dark", "light")


class UIActions(StoreBase):
    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"unknown theme {theme!r}")
        self.state.theme = theme
        self._commit("set_theme")

    def toggle_theme(self) -> None:
        self.state.theme = "light" if self.state.theme == "dark" else "dark"
        self._commit("toggle_theme")

    def toggle_channel_sidebar(self) -> None:
        self.state.channel_sidebar_visible = not self.state.channel_sidebar_visible
        self._commit("toggle_channel_sidebar")

    def toggle_member_list(self) -> None:
        self.state.member_list_visible = not self.state.member_list_visible
        self._commit("toggle_member_list")

    def set_member_list_visible(self, visible: bool) -> None:
        self.state.member_list_visible = visible
        self._commit("set_member_list_visible")

    def open_modal(self, modal_type: str, props: Dict[str, Any] | None = None) -> None:
        self.state.active_modal = Modal(type=modal_type, props=props)
        self._commit("open_modal")

    def close_modal(self) -> None:
        self.state.active_modal = None
        self._commit("close_modal")

    def set_typing_users(self, channel_id: str, user_ids: Iterable[str]) -> None:
        self.state.typing_users[channel_id] = list(user_ids)
        self._commit("set_typing_users")

    def add_notification(self, notification: Notification) -> None:
        self.state.notifications.append(notification)
        self._commit("add_notification")

    def dismiss_notification(self, notification_id: str) -> None:
        self.state.notifications = [
            n for n in self.state.notifications if n.id != notification_id
        ]
        self._commit("dismiss_notification")

    def save_scroll_position(self, channel_id: str, position: float) -> None:
        self.state.scroll_position_by_channel[channel_id] = position
        self._commit("save_scroll_position")

    def get_scroll_position(self, channel_id: str) -> float:
        return self.state.scroll_position_by_channel.get(channel_id, 0)
