from __future__ import annotations

from typing import Mapping

from ..models import PresenceStatus
from .base import StoreBase


def normalize_status(value: PresenceStatus | str | None) -> PresenceStatus:
    if value is None:
        return PresenceStatus.OFFLINE
    if isinstance(value, PresenceStatus):
        return value
    lowered = value.lower()
    if lowered in {"offline", "invisible"}:
        return PresenceStatus.OFFLINE
    if lowered == "idle":
        return PresenceStatus.IDLE
    if lowered in {"dnd", "do_not_disturb"}:
        return PresenceStatus.DND
    return PresenceStatus.ONLINE


class PresenceActions(StoreBase):
    def presence_of(self, user_id: str) -> PresenceStatus:
        return self.state.presence_by_user_id.get(user_id, PresenceStatus.OFFLINE)

    def update_presence(self, user_id: str, status: PresenceStatus | str) -> None:
        self.state.presence_by_user_id[user_id] = normalize_status(status)
        self._commit("update_presence")

    def bulk_update_presence(self, updates: Mapping[str, PresenceStatus | str]) -> None:
        for user_id, status in updates.items():
            self.state.presence_by_user_id[user_id] = normalize_status(status)
        self._commit("bulk_update_presence")
