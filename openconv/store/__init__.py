from __future__ import annotations

"""The normalized client store.

:class:`AppStore` is assembled from one action mixin per concern. Consumers
receive the instance from :class:`openconv.context.AppContext` and change it
only through these named actions.
"""

from .auth import AuthActions
from .base import Listener, StoreBase
from .channels import ChannelActions
from .guilds import GuildActions
from .members import MemberActions
from .messages import MessageActions
from .presence import PresenceActions, normalize_status
from .state import PREFERENCE_FIELDS, Modal, StoreState
from .ui import UIActions
from .unread import UnreadActions


class AppStore(
    AuthActions,
    GuildActions,
    ChannelActions,
    MessageActions,
    MemberActions,
    PresenceActions,
    UnreadActions,
    UIActions,
):
    pass


__all__ = [
    "AppStore",
    "Listener",
    "Modal",
    "PREFERENCE_FIELDS",
    "StoreBase",
    "StoreState",
    "normalize_status",
]
