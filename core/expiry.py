"""
Popup expiry timers running on the daemon's event loop.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, Optional

CallLater = Callable[..., object]


class ExpiryTimers:
    """
    Schedules one delayed callback per Notify call.

    Each schedule gets a fresh generation number. When a timer fires it only
    acts if its generation is still the current one for that id, so timers
    superseded by a replacement or orphaned by ``discard`` fall through.
    """

    def __init__(self, delay_ms: int, call_later: Optional[CallLater] = None) -> None:
        self.delay_ms = delay_ms
        self._call_later = call_later
        self._generation = 0
        self._pending: Dict[int, int] = {}

    def schedule(self, notification_id: int, callback: Callable[[int], None]) -> None:
        call_later = self._call_later or asyncio.get_running_loop().call_later
        self._generation += 1
        generation = self._generation
        self._pending[notification_id] = generation
        call_later(self.delay_ms / 1000, self._fire, notification_id, generation, callback)

    def discard(self, notification_id: int) -> None:
        self._pending.pop(notification_id, None)

    def is_pending(self, notification_id: int) -> bool:
        return notification_id in self._pending

    def _fire(self, notification_id: int, generation: int, callback: Callable[[int], None]) -> None:
        if self._pending.get(notification_id) != generation:
            return
        del self._pending[notification_id]
        callback(notification_id)
