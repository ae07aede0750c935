"""State shared by the professor and student views."""

import enum
import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pulse.schemas import FeedbackRecord
from pulse.store import DataService
from pulse.views.feed import FeedbackFeed, InsertHandler

logger = logging.getLogger("Pulse.views")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NoticeKind(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notice:
    """A transient user-facing message."""
    kind: NoticeKind
    message: str
    created_at: datetime = field(default_factory=utcnow)


class BaseView:
    """
    Owns the notices list and at most one live feedback feed.
    
    The feed is entered through an AsyncExitStack; switching target or
    closing the view goes through ``_close_feed``, the only teardown path.
    """
    
    def __init__(self, service: DataService, clock: Callable[[], datetime] = utcnow):
        self.service = service
        self.clock = clock
        self.notices: List[Notice] = []
        self.feed: Optional[FeedbackFeed] = None
        self._feed_stack = AsyncExitStack()
    
    @property
    def feedback(self) -> List[FeedbackRecord]:
        return self.feed.items if self.feed else []
    
    def notify_success(self, message: str) -> None:
        self.notices.append(Notice(NoticeKind.SUCCESS, message))
    
    def notify_error(self, message: str) -> None:
        self.notices.append(Notice(NoticeKind.ERROR, message))
    
    async def _open_feed(self, activity_id, on_insert: Optional[InsertHandler] = None) -> FeedbackFeed:
        await self._close_feed()
        feed = FeedbackFeed(
            self.service,
            activity_id,
            on_insert=on_insert,
            on_error=self.notify_error,
        )
        self.feed = feed
        # Registered before the read so a switch or close during it tears this feed down
        self._feed_stack.push_async_callback(feed.close)
        await feed.open()
        return feed
    
    async def _close_feed(self) -> None:
        await self._feed_stack.aclose()
        self._feed_stack = AsyncExitStack()
    
    async def close(self) -> None:
        await self._close_feed()
