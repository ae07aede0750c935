"""The narrow store/notifier interface views depend on."""

from typing import Any, Dict, List, Optional, Protocol

from pulse.realtime.notifier import Channel

ACTIVITIES = "activities"
FEEDBACK = "feedback"

Row = Dict[str, Any]


class StoreError(Exception):
    """A read, write or lookup was rejected by the store."""


class DataService(Protocol):
    """Read filtered rows, insert rows, subscribe to filtered inserts."""
    
    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        descending: bool = True,
    ) -> List[Row]:
        """Rows matching every equality filter, ordered by created_at."""
        ...
    
    async def select_single(self, table: str, filters: Dict[str, Any]) -> Row:
        """The one row matching ``filters``; StoreError on zero or several."""
        ...
    
    async def insert(self, table: str, values: Dict[str, Any]) -> Row:
        """Insert one row, publish it to realtime listeners, return it."""
        ...
    
    def channel(self, name: str) -> Channel:
        ...
