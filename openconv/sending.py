from __future__ import annotations

"""Optimistic message sending.

:meth:`SendPipeline.send_message` puts the message in the store before the
message source has seen it, then confirms in the background. A rejected
confirmation is reported as :class:`SendFailed` and nothing else happens: the
message stays in the timeline as if it had been delivered. There is no retry
and no rollback.
"""

import asyncio
import uuid
from dataclasses import dataclass
from typing import Sequence, Set, Union

import structlog

from .errors import MessageSourceError
from .models import FileAttachment, Message, utcnow
from .source import MessageSource
from .store import AppStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SendConfirmed:
    message: Message
    echo: Message
    ok: bool = True


@dataclass(frozen=True)
class SendFailed:
    message: Message
    reason: str
    ok: bool = False


SendResult = Union[SendConfirmed, SendFailed]


@dataclass
class OutgoingMessage:
    message: Message
    confirmation: "asyncio.Task[SendResult]"


class SendPipeline:
    def __init__(self, store: AppStore, source: MessageSource) -> None:
        self.store = store
        self.source = source
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def build_message(
        self,
        channel_id: str,
        content: str,
        attachments: Sequence[FileAttachment] = (),
    ) -> Message:
        msg_id = str(uuid.uuid4())
        return Message(
            id=msg_id,
            channel_id=channel_id,
            sender_id=self.store.current_user_id,
            content=content,
            encrypted_content=content,
            nonce=f"mock-nonce-{uuid.uuid4()}",
            created_at=utcnow(),
            edited_at=None,
            attachments=list(attachments),
        )

    def send_message(
        self,
        channel_id: str,
        content: str,
        attachments: Sequence[FileAttachment] = (),
    ) -> OutgoingMessage:
        """Insert the message now and confirm it on the running event loop."""
        message = self.build_message(channel_id, content, attachments)
        self.store.add_message(channel_id, message)
        task = asyncio.get_running_loop().create_task(self._confirm(message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return OutgoingMessage(message=message, confirmation=task)

    async def _confirm(self, message: Message) -> SendResult:
        try:
            echo = await self.source.send_message(
                message.channel_id,
                message.content,
                message.attachments,
                sender_id=message.sender_id,
                nonce=message.nonce,
            )
        except MessageSourceError as exc:
            logger.warning(
                "send.failed",
                channel_id=message.channel_id,
                message_id=message.id,
                reason=exc.reason,
            )
            return SendFailed(message, exc.reason)
        logger.debug(
            "send.confirmed",
            channel_id=message.channel_id,
            message_id=message.id,
            echo_id=echo.id,
        )
        return SendConfirmed(message, echo)

    async def drain(self) -> list[SendResult]:
        """Wait for every confirmation still in flight."""
        if not self._pending:
            return []
        return list(await asyncio.gather(*list(self._pending)))
