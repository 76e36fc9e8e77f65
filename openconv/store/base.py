from __future__ import annotations

from dataclasses import fields
from typing import Any, Callable, List

import structlog

from .state import StoreState

Listener = Callable[[str, StoreState], None]

logger = structlog.get_logger(__name__)

_STATE_FIELDS = {f.name for f in fields(StoreState)}


class StoreBase:
    """Owns the :class:`StoreState` and the subscriber list.

    Action methods mutate ``self.state`` synchronously and finish with
    :meth:`_commit`, so a listener always sees a fully applied transition.
    """

    def __init__(self, state: StoreState | None = None) -> None:
        self.state = state or StoreState()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, action: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(action, self.state)
            except Exception:
                logger.exception("store.listener_failed", action=action)

    def hydrate(self, **values: Any) -> None:
        """Replace whole state fields in one transition."""
        unknown = set(values) - _STATE_FIELDS
        if unknown:
            raise AttributeError(f"unknown state fields: {', '.join(sorted(unknown))}")
        for name, value in values.items():
            setattr(self.state, name, value)
        self._commit("hydrate")
