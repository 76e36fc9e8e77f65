from __future__ import annotations

"""Application context.

The context owns the one :class:`AppStore` of a session together with the
collaborators that write to it. Consumers receive the context (or the parts
they need) explicitly; there is no module-level store.
"""

import random
from dataclasses import dataclass, field
from typing import Optional

import structlog

from .config import AppConfig
from .db.session import close_db, init_db
from .inbox import Inbox
from .models import ChannelType
from .pagination import PaginationController
from .preferences import PreferenceStore, PreferenceSync
from .seed import SeedDataset, build_demo_dataset, seed_store
from .sending import SendPipeline
from .source import MockMessageSource
from .store import AppStore
from .timers import ResizeDebouncer, TypingSimulator

logger = structlog.get_logger(__name__)


@dataclass
class AppContext:
    config: AppConfig
    store: AppStore
    source: MockMessageSource
    pagination: PaginationController
    sender: SendPipeline
    inbox: Inbox
    resize: ResizeDebouncer
    dataset: SeedDataset
    preferences: Optional[PreferenceSync] = field(default=None)
    typing: Optional[TypingSimulator] = field(default=None)
    _db_open: bool = field(default=False, repr=False)

    async def start(self, persist: bool = True) -> None:
        """Restore preferences, seed the store and log in the first user."""
        if persist:
            await init_db(self.config.database.url)
            self._db_open = True
            backend = PreferenceStore()
            prefs = await backend.load(self.config.profile)
            prefs.apply(self.store)
        seed_store(self.store, self.dataset)
        if self.store.current_user is None and self.dataset.users:
            self.store.login(self.dataset.users[0])
        if persist:
            self.preferences = PreferenceSync(self.store, backend, self.config.profile)
        logger.info(
            "context.started",
            profile=self.config.profile,
            user_id=self.store.current_user_id,
        )

    async def open_channel(self, channel_id: str) -> None:
        """Focus ``channel_id`` and let other members of its guild type in it.

        The simulator of the previously focused channel is stopped first.
        """
        self.inbox.open_channel(channel_id)
        await self._stop_typing()
        channel = self.store.get_channel(channel_id)
        if channel is None or channel.channel_type is not ChannelType.TEXT:
            return
        src_cfg = self.config.source
        self.typing = TypingSimulator.for_channel(
            self.store,
            channel.guild_id,
            channel_id,
            idle=(src_cfg.typing_idle_min, src_cfg.typing_idle_max),
            typing=(src_cfg.typing_min, src_cfg.typing_max),
            rng=self.source.rng,
        )
        self.typing.start()

    async def _stop_typing(self) -> None:
        if self.typing is not None:
            typing, self.typing = self.typing, None
            await typing.close()

    async def close(self) -> None:
        try:
            self.resize.close()
            await self._stop_typing()
            await self.sender.drain()
            if self.preferences is not None:
                await self.preferences.flush()
        finally:
            if self.preferences is not None:
                self.preferences.close()
                self.preferences = None
            if self._db_open:
                self._db_open = False
                await close_db()


def create_context(
    config: AppConfig | None = None,
    dataset: SeedDataset | None = None,
    rng: random.Random | None = None,
) -> AppContext:
    config = config or AppConfig()
    src_cfg = config.source
    src_cfg.validate()
    if rng is None and src_cfg.seed is not None:
        rng = random.Random(src_cfg.seed)
    dataset = dataset or build_demo_dataset()
    store = AppStore()
    source = MockMessageSource(
        dataset,
        fetch_delay=(src_cfg.fetch_delay_min, src_cfg.fetch_delay_max),
        send_delay=(src_cfg.send_delay_min, src_cfg.send_delay_max),
        failure_rate=src_cfg.failure_rate,
        rng=rng,
    )
    return AppContext(
        config=config,
        store=store,
        source=source,
        pagination=PaginationController(store, source),
        sender=SendPipeline(store, source),
        inbox=Inbox(store),
        resize=ResizeDebouncer(store),
        dataset=dataset,
    )
