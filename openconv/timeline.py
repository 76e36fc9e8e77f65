from __future__ import annotations

"""Turn a channel's ascending message list into renderable display items.

The output alternates date separators and per-author message groups. It is a
pure, content-preserving transform: concatenating the messages of every
:class:`MessageGroup` yields the input list unchanged.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Sequence, Union

from .models import Message, as_utc

GROUP_GAP = timedelta(minutes=5)


@dataclass(frozen=True)
class DateSeparator:
    date: str

    def to_wire(self) -> dict:
        return {"type": "date-separator", "date": self.date}


@dataclass
class MessageGroup:
    sender_id: str
    messages: List[Message] = field(default_factory=list)

    def to_wire(self) -> dict:
        return {
            "type": "message-group",
            "senderId": self.sender_id,
            "messages": [m.to_wire() for m in self.messages],
        }


DisplayItem = Union[DateSeparator, MessageGroup]


def message_date(message: Message) -> str:
    """Calendar date (UTC) of ``message`` as ``YYYY-MM-DD``."""
    return as_utc(message.created_at).date().isoformat()


def group_messages(messages: Sequence[Message]) -> list[DisplayItem]:
    items: list[DisplayItem] = []
    group: MessageGroup | None = None
    current_date: str | None = None

    for msg in messages:
        msg_date = message_date(msg)
        if msg_date != current_date:
            if group is not None:
                items.append(group)
                group = None
            items.append(DateSeparator(msg_date))
            current_date = msg_date

        if group is None:
            group = MessageGroup(msg.sender_id, [msg])
            continue

        gap = as_utc(msg.created_at) - as_utc(group.messages[-1].created_at)
        if msg.sender_id != group.sender_id or gap >= GROUP_GAP:
            items.append(group)
            group = MessageGroup(msg.sender_id, [msg])
        else:
            group.messages.append(msg)

    if group is not None:
        items.append(group)
    return items
