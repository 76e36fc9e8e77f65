from __future__ import annotations

"""Ephemeral timer-driven behaviour around the store.

Both classes own their pending timers and cancel them in ``close()``; neither
survives the view that created it.
"""

import asyncio
import random
from typing import List, Sequence

import structlog

from .store import AppStore

logger = structlog.get_logger(__name__)

MEMBER_LIST_BREAKPOINT = 800
RESIZE_DEBOUNCE = 0.15


class ResizeDebouncer:
    """Collapses the member list when the window gets too narrow.

    Resize events are coalesced: only the last width seen before
    ``delay`` seconds of quiet is applied, as one store transition.
    """

    def __init__(
        self,
        store: AppStore,
        breakpoint: int = MEMBER_LIST_BREAKPOINT,
        delay: float = RESIZE_DEBOUNCE,
    ) -> None:
        self.store = store
        self.breakpoint = breakpoint
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._width: int | None = None

    def start(self, width: int) -> None:
        self._width = width
        if width < self.breakpoint:
            self.store.set_member_list_visible(False)

    def on_resize(self, width: int) -> None:
        self._width = width
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._apply)

    def _apply(self) -> None:
        self._handle = None
        if self._width is not None and self._width < self.breakpoint:
            logger.debug("ui.member_list_collapsed", width=self._width)
            self.store.set_member_list_visible(False)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class TypingSimulator:
    """Pretends other members of a guild are typing in a channel.

    Every 5-10 seconds one to three of them start typing for 2-4 seconds.
    """

    def __init__(
        self,
        store: AppStore,
        channel_id: str,
        user_ids: Sequence[str],
        *,
        idle: tuple[float, float] = (5.0, 10.0),
        typing: tuple[float, float] = (2.0, 4.0),
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.channel_id = channel_id
        self.user_ids: List[str] = list(user_ids)
        self.idle = idle
        self.typing = typing
        self.rng = rng or random.Random()
        self._task: asyncio.Task | None = None

    @classmethod
    def for_channel(
        cls, store: AppStore, guild_id: str, channel_id: str, **kwargs
    ) -> "TypingSimulator":
        me = store.current_user_id
        user_ids: List[str] = []
        for key in store.member_keys(guild_id):
            member = store.state.members_by_id.get(key)
            if member is not None and member.user_id != me:
                user_ids.append(member.user_id)
        return cls(store, channel_id, user_ids, **kwargs)

    def start(self) -> None:
        if self._task is None and self.user_ids:
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.rng.uniform(*self.idle))
            count = self.rng.randint(1, min(3, len(self.user_ids)))
            self.store.set_typing_users(self.channel_id, self.rng.sample(self.user_ids, count))
            await asyncio.sleep(self.rng.uniform(*self.typing))
            self.store.set_typing_users(self.channel_id, [])

    async def close(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self.store.set_typing_users(self.channel_id, [])
