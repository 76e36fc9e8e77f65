from __future__ import annotations

"""Message source collaborators.

:class:`MessageSource` is what the pagination controller and the send
pipeline talk to. :class:`MockMessageSource` stands in for a backend: it
answers from an in-memory dataset after a random delay and rejects a share of
sends.
"""

import asyncio
import random
import uuid
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Protocol, Sequence

import structlog

from .errors import SendRejected
from .models import (
    Channel,
    ChannelType,
    FileAttachment,
    Guild,
    Member,
    Message,
    User,
    as_utc,
    utcnow,
)

if TYPE_CHECKING:
    from .seed import SeedDataset

DEFAULT_PAGE_SIZE = 20

logger = structlog.get_logger(__name__)


class MessageSource(Protocol):
    async def fetch_messages(
        self,
        channel_id: str,
        before: datetime | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> List[Message]:
        """Return up to ``limit`` messages older than ``before``, newest first."""
        ...

    async def send_message(
        self,
        channel_id: str,
        content: str,
        attachments: Sequence[FileAttachment] = (),
        *,
        sender_id: str = "",
        nonce: str | None = None,
    ) -> Message:
        ...


@dataclass
class LoginResult:
    user: User
    public_key: str
    private_key: str
    token: str


class MockMessageSource:
    def __init__(
        self,
        dataset: "SeedDataset",
        *,
        fetch_delay: tuple[float, float] = (0.2, 0.5),
        send_delay: tuple[float, float] = (0.1, 0.3),
        failure_rate: float = 0.05,
        rng: random.Random | None = None,
    ) -> None:
        self.dataset = dataset
        self.fetch_delay = fetch_delay
        self.send_delay = send_delay
        self.failure_rate = failure_rate
        self.rng = rng or random.Random()
        self._history: Dict[str, List[Message]] = defaultdict(list)
        for msg in dataset.messages:
            self._history[msg.channel_id].append(msg)
        for msgs in self._history.values():
            msgs.sort(key=lambda m: m.created_at)

    async def _delay(self, bounds: tuple[float, float]) -> None:
        lo, hi = bounds
        await asyncio.sleep(lo + self.rng.random() * (hi - lo))

    async def fetch_messages(
        self,
        channel_id: str,
        before: datetime | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> List[Message]:
        await self._delay(self.fetch_delay)
        history = self._history.get(channel_id, [])
        if before is not None:
            cutoff = as_utc(before)
            history = [m for m in history if m.created_at < cutoff]
        page = history[-limit:] if limit > 0 else []
        logger.debug(
            "source.fetch_messages",
            channel_id=channel_id,
            before=before.isoformat() if before else None,
            returned=len(page),
        )
        return list(reversed(page))

    async def send_message(
        self,
        channel_id: str,
        content: str,
        attachments: Sequence[FileAttachment] = (),
        *,
        sender_id: str = "",
        nonce: str | None = None,
    ) -> Message:
        if self.rng.random() < self.failure_rate:
            await self._delay(self.send_delay)
            raise SendRejected(channel_id, "Failed to send message")

        msg_id = str(uuid.uuid4())
        message = Message(
            id=msg_id,
            channel_id=channel_id,
            sender_id=sender_id,
            content=content,
            encrypted_content=content,
            nonce=nonce or f"mock-nonce-{msg_id}",
            created_at=utcnow(),
            attachments=list(attachments),
        )
        await self._delay(self.send_delay)
        return message

    async def fetch_guilds(self) -> List[Guild]:
        await self._delay(self.fetch_delay)
        return list(self.dataset.guilds)

    async def fetch_members(self, guild_id: str) -> List[Member]:
        await self._delay(self.fetch_delay)
        return [m for m in self.dataset.members if m.guild_id == guild_id]

    async def create_guild(self, name: str, owner_id: str = "") -> Guild:
        await self._delay(self.send_delay)
        return Guild(
            id=str(uuid.uuid4()),
            name=name,
            owner_id=owner_id or self.dataset.users[0].id,
        )

    async def create_channel(
        self,
        guild_id: str,
        name: str,
        channel_type: ChannelType | str = ChannelType.TEXT,
        category: str | None = None,
    ) -> Channel:
        await self._delay(self.send_delay)
        existing = [c for c in self.dataset.channels if c.guild_id == guild_id]
        return Channel(
            id=str(uuid.uuid4()),
            guild_id=guild_id,
            name=name,
            channel_type=ChannelType(channel_type),
            position=len(existing),
            category=category,
        )

    async def login(self, email: str) -> LoginResult:
        await self._delay(self.send_delay)
        user = next(
            (u for u in self.dataset.users if u.email.lower() == email.lower()),
            self.dataset.users[0],
        )
        return _issue_keys(user.model_copy())

    async def register(self, email: str, display_name: str) -> LoginResult:
        await self._delay(self.send_delay)
        user = User(id=str(uuid.uuid4()), display_name=display_name, email=email)
        return _issue_keys(user)


def _issue_keys(user: User) -> LoginResult:
    key_id = uuid.uuid4()
    return LoginResult(
        user=user,
        public_key=f"mock-public-key-{key_id}",
        private_key=f"mock-private-key-{key_id}",
        token=f"mock-token-{key_id}",
    )

