"""In-process realtime notifier for row-insert events."""

from pulse.realtime.notifier import Channel, RealtimeNotifier, RowFilter, notifier

__all__ = ["Channel", "RealtimeNotifier", "RowFilter", "notifier"]
