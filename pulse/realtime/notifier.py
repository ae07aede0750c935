"""Publish/subscribe for row inserts, keyed by table and row filter."""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pulse.utils.logging import debug_log

logger = logging.getLogger("Pulse.realtime")

InsertCallback = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class RowFilter:
    """Equality filter on one column, written as ``column=eq.value``."""
    column: str
    value: str
    
    @classmethod
    def parse(cls, expression: str) -> "RowFilter":
        column, sep, rest = expression.partition("=")
        if not sep or not rest.startswith("eq.") or not column:
            raise ValueError(f"Unsupported filter expression: {expression!r}")
        return cls(column=column.strip(), value=rest[3:])
    
    @classmethod
    def eq(cls, column: str, value: Any) -> "RowFilter":
        return cls(column=column, value=str(value))
    
    def matches(self, row: Dict[str, Any]) -> bool:
        return self.column in row and str(row[self.column]) == self.value
    
    def __str__(self) -> str:
        return f"{self.column}=eq.{self.value}"


@dataclass
class InsertBinding:
    """One INSERT listener registered on a channel."""
    table: str
    callback: InsertCallback
    row_filter: Optional[RowFilter] = None
    
    def accepts(self, table: str, row: Dict[str, Any]) -> bool:
        if table != self.table:
            return False
        return self.row_filter is None or self.row_filter.matches(row)


@dataclass
class Channel:
    """
    A named subscription owned by one viewer.
    
    Bindings are registered with ``on_insert`` before ``subscribe``; nothing is
    delivered until the channel has been subscribed, and nothing after it has
    been unsubscribed.
    """
    name: str
    notifier: "RealtimeNotifier"
    bindings: List[InsertBinding] = field(default_factory=list)
    subscribed: bool = False
    
    def on_insert(
        self,
        table: str,
        callback: InsertCallback,
        row_filter: Optional[Union[RowFilter, str]] = None,
    ) -> "Channel":
        if isinstance(row_filter, str):
            row_filter = RowFilter.parse(row_filter)
        self.bindings.append(InsertBinding(table=table, callback=callback, row_filter=row_filter))
        return self
    
    async def subscribe(self) -> "Channel":
        self.notifier.attach(self)
        self.subscribed = True
        debug_log("Channel %s subscribed (%d bindings)", self.name, len(self.bindings))
        return self
    
    async def unsubscribe(self) -> None:
        if not self.subscribed:
            return
        self.subscribed = False
        self.notifier.detach(self)
        debug_log("Channel %s unsubscribed", self.name)
    
    async def deliver(self, table: str, payload: Dict[str, Any]) -> int:
        """Run every matching binding. Returns how many callbacks ran."""
        delivered = 0
        for binding in list(self.bindings):
            if not self.subscribed:
                break
            if not binding.accepts(table, payload["new"]):
                continue
            try:
                result = binding.callback(payload)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:
                logger.warning(f"Listener on channel {self.name} failed: {e}")
        return delivered


class RealtimeNotifier:
    """
    Tracks subscribed channels and fans insert events out to them.
    
    Delivery order follows publish order. Channels that fail are logged and
    skipped; they stay subscribed until their owner tears them down.
    """
    
    def __init__(self):
        self._channels: Dict[str, Channel] = {}
    
    def channel(self, name: str) -> Channel:
        """Create a new, not yet subscribed channel."""
        return Channel(name=name, notifier=self)
    
    def attach(self, channel: Channel) -> None:
        existing = self._channels.get(channel.name)
        if existing is not None and existing is not channel:
            logger.warning(f"Channel name {channel.name} reused, replacing stale channel")
            existing.subscribed = False
        self._channels[channel.name] = channel
    
    def detach(self, channel: Channel) -> None:
        if self._channels.get(channel.name) is channel:
            self._channels.pop(channel.name)
    
    async def publish_insert(self, table: str, row: Dict[str, Any]) -> int:
        """Notify every subscribed channel with a matching INSERT binding."""
        payload = {"type": "INSERT", "table": table, "new": row}
        delivered = 0
        for channel in list(self._channels.values()):
            delivered += await channel.deliver(table, payload)
        debug_log("Published INSERT on %s to %d listeners", table, delivered)
        return delivered
    
    def get_all_channels(self) -> Dict[str, Channel]:
        return self._channels.copy()
    
    @property
    def channel_count(self) -> int:
        return len(self._channels)


# Global notifier shared by the HTTP API, the WebSocket handler and SQLDataService
notifier = RealtimeNotifier()
