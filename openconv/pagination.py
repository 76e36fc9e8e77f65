from __future__ import annotations

import structlog

from .source import DEFAULT_PAGE_SIZE, MessageSource
from .store import AppStore

logger = structlog.get_logger(__name__)


class PaginationController:
    """Loads older history for a channel, one page at a time.

    ``loading_messages[channel]`` is the single-flight guard. Checking and
    setting it happens without an ``await`` in between, which is what makes it
    safe on one event loop; a multi-threaded caller would need a real lock.
    """

    def __init__(
        self,
        store: AppStore,
        source: MessageSource,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.store = store
        self.source = source
        self.page_size = page_size

    def can_load_older(self, channel_id: str) -> bool:
        state = self.store.state
        return state.has_more.get(channel_id, False) and not state.loading_messages.get(
            channel_id, False
        )

    async def load_older(self, channel_id: str) -> int:
        """Fetch the page before the oldest loaded message.

        Returns the number of messages added to the channel index. Errors from
        the source propagate once the loading flag has been cleared.
        """
        if not self.can_load_older(channel_id):
            return 0

        self.store.set_loading_messages(channel_id, True)
        oldest = self.store.oldest_message(channel_id)
        if oldest is None:
            self.store.set_loading_messages(channel_id, False)
            return 0

        try:
            page = await self.source.fetch_messages(
                channel_id, before=oldest.created_at, limit=self.page_size
            )
            added = 0
            if page:
                added = self.store.prepend_messages(channel_id, list(reversed(page)))
            if len(page) < self.page_size:
                self.store.set_has_more(channel_id, False)
            logger.info(
                "pagination.page_merged",
                channel_id=channel_id,
                fetched=len(page),
                added=added,
                has_more=self.store.state.has_more.get(channel_id, False),
            )
            return added
        except Exception:
            logger.warning("pagination.fetch_failed", channel_id=channel_id, exc_info=True)
            raise
        finally:
            self.store.set_loading_messages(channel_id, False)
