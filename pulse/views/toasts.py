"""Transient emotion badges shown to the professor as feedback arrives."""

import asyncio
import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from pulse.config import TOAST_TTL_MS
from pulse.models import EmotionType
from pulse.utils.logging import debug_log


def monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass(order=True)
class Toast:
    """One badge. Ordered by expiry so the tray can keep them in a heap."""
    expires_at: float
    seq: int
    emotion_type: EmotionType = field(compare=False)
    created_at: float = field(compare=False)


class ToastTray:
    """
    Holds toasts until they are ``ttl_ms`` old.
    
    Expirations live in a min-heap. When an event loop is running, a single
    timer is armed for the earliest expiry and re-armed after each eviction,
    so there is no fixed-period polling. ``sweep()`` can also be called
    directly, which is how tests drive a simulated clock.
    """
    
    def __init__(
        self,
        ttl_ms: float = TOAST_TTL_MS,
        clock: Optional[Callable[[], float]] = None,
        schedule: bool = True,
    ):
        self.ttl_ms = ttl_ms
        self._clock = clock or monotonic_ms
        self._schedule = schedule
        self._heap: List[Toast] = []
        self._seq = itertools.count()
        self._timer: Optional[asyncio.TimerHandle] = None
        self._closed = False
    
    @property
    def toasts(self) -> List[Toast]:
        """Live toasts, oldest first."""
        return sorted(self._heap, key=lambda t: t.seq)
    
    def __len__(self) -> int:
        return len(self._heap)
    
    def push(self, emotion_type: EmotionType) -> Optional[Toast]:
        if self._closed:
            return None
        now = self._clock()
        toast = Toast(
            expires_at=now + self.ttl_ms,
            seq=next(self._seq),
            emotion_type=EmotionType(emotion_type),
            created_at=now,
        )
        heapq.heappush(self._heap, toast)
        # Only the head of the heap decides when the timer fires
        if self._timer is None or self._heap[0] is toast:
            self._arm()
        return toast
    
    def sweep(self) -> List[Toast]:
        """Evict every toast whose age has reached the TTL."""
        now = self._clock()
        evicted = []
        while self._heap and self._heap[0].expires_at <= now:
            evicted.append(heapq.heappop(self._heap))
        if evicted:
            debug_log("Evicted %d toasts", len(evicted))
        self._arm()
        return evicted
    
    def next_expiry(self) -> Optional[float]:
        return self._heap[0].expires_at if self._heap else None
    
    def close(self) -> None:
        self._closed = True
        self._cancel_timer()
        self._heap.clear()
    
    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
    
    def _arm(self) -> None:
        self._cancel_timer()
        if not self._schedule or self._closed or not self._heap:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the owner calls sweep() itself
            return
        delay = max(0.0, (self._heap[0].expires_at - self._clock()) / 1000)
        self._timer = loop.call_later(delay, self._on_timer)
    
    def _on_timer(self) -> None:
        self._timer = None
        self.sweep()
