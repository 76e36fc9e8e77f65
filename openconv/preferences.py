from __future__ import annotations

"""Durable UI preferences.

Only five fields of the store outlive a session: the last visited guild, the
last visited channel of each guild, the theme and the two panel visibility
flags. They are kept as one JSON document per profile in SQLite.
"""

import asyncio
import json
from typing import Dict, Literal, Optional, Set

import structlog
from pydantic import Field, ValidationError

from .db.models import PreferenceRow
from .db.session import get_session
from .models import CamelModel
from .store import AppStore, StoreState

logger = structlog.get_logger(__name__)


class Preferences(CamelModel):
    last_visited_guild_id: Optional[str] = Field(default=None, alias="lastVisitedGuildId")
    last_visited_channel_by_guild: Dict[str, str] = Field(
        default_factory=dict, alias="lastVisitedChannelByGuild"
    )
    theme: Literal["dark", "light"] = "dark"
    channel_sidebar_visible: bool = Field(default=True, alias="channelSidebarVisible")
    member_list_visible: bool = Field(default=True, alias="memberListVisible")

    @classmethod
    def from_state(cls, state: StoreState) -> "Preferences":
        return cls(
            last_visited_guild_id=state.last_visited_guild_id,
            last_visited_channel_by_guild=dict(state.last_visited_channel_by_guild),
            theme=state.theme,
            channel_sidebar_visible=state.channel_sidebar_visible,
            member_list_visible=state.member_list_visible,
        )

    def apply(self, store: AppStore) -> None:
        store.hydrate(
            last_visited_guild_id=self.last_visited_guild_id,
            last_visited_channel_by_guild=dict(self.last_visited_channel_by_guild),
            theme=self.theme,
            channel_sidebar_visible=self.channel_sidebar_visible,
            member_list_visible=self.member_list_visible,
        )


class PreferenceStore:
    """Reads and writes :class:`Preferences` rows through the shared session."""

    async def load(self, profile: str) -> Preferences:
        async with get_session() as db:
            row = await db.get(PreferenceRow, profile)
        if row is None:
            return Preferences()
        try:
            return Preferences.model_validate(json.loads(row.data_json))
        except (json.JSONDecodeError, ValidationError):
            logger.warning("preferences.invalid", profile=profile)
            return Preferences()

    async def save(self, profile: str, prefs: Preferences) -> None:
        data = json.dumps(prefs.to_wire())
        async with get_session() as db:
            row = await db.get(PreferenceRow, profile)
            if row is None:
                db.add(PreferenceRow(profile=profile, data_json=data))
            else:
                row.data_json = data
            await db.commit()


class PreferenceSync:
    """Writes preferences back whenever a store action changes them."""

    def __init__(self, store: AppStore, backend: PreferenceStore, profile: str) -> None:
        self.store = store
        self.backend = backend
        self.profile = profile
        self._last = Preferences.from_state(store.state)
        self._tasks: Set[asyncio.Task] = set()
        self._lock: asyncio.Lock | None = None
        self._unsubscribe = store.subscribe(self._on_change)

    def _on_change(self, action: str, state: StoreState) -> None:
        current = Preferences.from_state(state)
        if current == self._last:
            return
        self._last = current
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("preferences.no_loop", action=action)
            return
        task = loop.create_task(self._save(current))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def _save(self, prefs: Preferences) -> None:
        try:
            async with self._get_lock():
                await self.backend.save(self.profile, prefs)
        except Exception:
            logger.exception("preferences.save_failed", profile=self.profile)

    async def flush(self) -> None:
        if self._tasks:
            await asyncio.gather(*list(self._tasks))
        async with self._get_lock():
            await self.backend.save(self.profile, self._last)

    def close(self) -> None:
        self._unsubscribe()
