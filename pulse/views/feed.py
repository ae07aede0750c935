"""Fetch-then-subscribe handshake for one activity's feedback stream."""

import enum
import itertools
import logging
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from pulse.realtime import Channel, RowFilter
from pulse.schemas import FeedbackRecord
from pulse.store import FEEDBACK, DataService, StoreError

logger = logging.getLogger("Pulse.views.feed")

InsertHandler = Callable[[FeedbackRecord], None]

# Disambiguates channels opened within the same millisecond
_channel_seq = itertools.count(1)


class FeedState(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SUBSCRIBED = "subscribed"
    TORN_DOWN = "torn_down"


class FeedbackFeed:
    """
    Live, newest-first list of feedback for one activity.

    Opening performs one bulk read and then subscribes to INSERT events
    filtered on ``activity_id``, whether or not the read succeeded. Rows
    inserted between the two steps are not recovered, and nothing
    de-duplicates the fetched rows against live ones.

    Use as an async context manager so the channel is released on every exit
    path::

        async with FeedbackFeed(service, activity_id) as feed:
            ...
    """

    def __init__(
        self,
        service: DataService,
        activity_id: uuid.UUID,
        on_insert: Optional[InsertHandler] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        self.service = service
        self.activity_id = activity_id
        self.on_insert = on_insert
        self.on_error = on_error
        self.items: List[FeedbackRecord] = []
        self.state = FeedState.IDLE
        self.channel: Optional[Channel] = None

    @property
    def channel_name(self) -> Optional[str]:
        return self.channel.name if self.channel else None

    async def open(self) -> "FeedbackFeed":
        if self.state is not FeedState.IDLE:
            raise RuntimeError(f"Feed for {self.activity_id} already opened ({self.state.value})")

        self.state = FeedState.FETCHING
        try:
            rows = await self.service.select(FEEDBACK, {"activity_id": str(self.activity_id)})
            self.items = [FeedbackRecord.model_validate(row) for row in rows]
        except StoreError as e:
            logger.warning(f"Error loading feedback for activity {self.activity_id}: {e}")
            self.items = []
            if self.on_error:
                self.on_error("Error loading feedback")

        # Closed while the read was in flight
        if self.state is FeedState.TORN_DOWN:
            return self

        name = f"feedback-{self.activity_id}-{int(time.time() * 1000)}-{next(_channel_seq)}"
        channel = self.service.channel(name).on_insert(
            FEEDBACK,
            self._handle_insert,
            RowFilter.eq("activity_id", self.activity_id),
        )
        self.channel = await channel.subscribe()
        self.state = FeedState.SUBSCRIBED
        logger.info(f"Subscribed to feedback inserts for activity {self.activity_id}")
        return self

    def _handle_insert(self, payload: Dict[str, Any]) -> None:
        record = FeedbackRecord.model_validate(payload["new"])
        logger.debug(f"New feedback received: {record.emotion_type.value} for {self.activity_id}")
        self.items.insert(0, record)
        if self.on_insert:
            self.on_insert(record)

    async def close(self) -> None:
        if self.state is FeedState.TORN_DOWN:
            return
        self.state = FeedState.TORN_DOWN
        if self.channel is not None:
            logger.info(f"Unsubscribing from channel {self.channel.name}")
            await self.channel.unsubscribe()

    async def __aenter__(self) -> "FeedbackFeed":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
