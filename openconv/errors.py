from __future__ import annotations


class OpenConvError(Exception):
    """Base class for errors raised by the state engine."""


class ConfigError(OpenConvError):
    pass


class MessageSourceError(OpenConvError):
    """A fetch or send against the message source failed."""

    def __init__(self, channel_id: str, reason: str) -> None:
        super().__init__(f"{reason} (channel {channel_id})")
        self.channel_id = channel_id
        self.reason = reason


class SendRejected(MessageSourceError):
    """The message source refused to confirm an optimistic send."""
