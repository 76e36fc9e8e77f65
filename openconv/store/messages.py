from __future__ import annotations

from bisect import bisect_right
from typing import Iterable

import structlog

from ..models import Message, utcnow
from .base import StoreBase

logger = structlog.get_logger(__name__)


class MessageActions(StoreBase):
    """Messages keyed by id plus an ascending ``created_at`` index per channel."""

    def get_message(self, message_id: str) -> Message | None:
        return self.state.messages_by_id.get(message_id)

    def messages_for_channel(self, channel_id: str) -> list[Message]:
        by_id = self.state.messages_by_id
        ids = self.state.message_ids_by_channel.get(channel_id, [])
        return [by_id[mid] for mid in ids if mid in by_id]

    def oldest_message(self, channel_id: str) -> Message | None:
        ids = self.state.message_ids_by_channel.get(channel_id)
        if not ids:
            return None
        return self.state.messages_by_id.get(ids[0])

    def newest_message(self, channel_id: str) -> Message | None:
        ids = self.state.message_ids_by_channel.get(channel_id)
        if not ids:
            return None
        return self.state.messages_by_id.get(ids[-1])

    def add_message(self, channel_id: str, message: Message) -> None:
        """Upsert ``message`` and index it at its chronological position.

        A message whose ``channel_id`` differs from ``channel_id`` is ignored.
        """
        if message.channel_id != channel_id:
            logger.warning(
                "store.channel_mismatch",
                channel_id=channel_id,
                message_id=message.id,
                message_channel_id=message.channel_id,
            )
            return
        by_id = self.state.messages_by_id
        ids = [
            mid
            for mid in self.state.message_ids_by_channel.get(channel_id, [])
            if mid in by_id
        ]
        previous = by_id.get(message.id)
        by_id[message.id] = message
        if message.id in ids:
            if previous is not None and previous.created_at == message.created_at:
                self.state.message_ids_by_channel[channel_id] = ids
                self._commit("add_message")
                return
            ids.remove(message.id)
        if not ids or by_id[ids[-1]].created_at <= message.created_at:
            ids.append(message.id)
        else:
            pos = bisect_right(
                ids,
                message.created_at,
                key=lambda mid: by_id[mid].created_at,
            )
            ids.insert(pos, message.id)
        self.state.message_ids_by_channel[channel_id] = ids
        self._commit("add_message")

    def prepend_messages(self, channel_id: str, messages: Iterable[Message]) -> int:
        """Put an ascending page of older messages in front of the index.

        Every message of the channel is upserted; ids already indexed are not
        indexed twice and messages of other channels are skipped. Returns how
        many ids were added to the index.
        """
        ids = self.state.message_ids_by_channel.setdefault(channel_id, [])
        seen = set(ids)
        new_ids: list[str] = []
        for msg in messages:
            if msg.channel_id != channel_id:
                continue
            self.state.messages_by_id[msg.id] = msg
            if msg.id not in seen:
                seen.add(msg.id)
                new_ids.append(msg.id)
        self.state.message_ids_by_channel[channel_id] = new_ids + ids
        self._commit("prepend_messages")
        return len(new_ids)

    def edit_message(self, message_id: str, content: str) -> None:
        msg = self.state.messages_by_id.get(message_id)
        if msg is None:
            return
        self.state.messages_by_id[message_id] = msg.model_copy(
            update={
                "content": content,
                "encrypted_content": content,
                "edited_at": utcnow(),
            }
        )
        self._commit("edit_message")

    def delete_message(self, message_id: str) -> None:
        msg = self.state.messages_by_id.pop(message_id, None)
        if msg is None:
            return
        ids = self.state.message_ids_by_channel.get(msg.channel_id)
        if ids is not None:
            self.state.message_ids_by_channel[msg.channel_id] = [
                mid for mid in ids if mid != message_id
            ]
        self._commit("delete_message")

    def set_loading_messages(self, channel_id: str, loading: bool) -> None:
        self.state.loading_messages[channel_id] = loading
        self._commit("set_loading_messages")

    def set_has_more(self, channel_id: str, has_more: bool) -> None:
        self.state.has_more[channel_id] = has_more
        self._commit("set_has_more")
