"""
Named change events published by the notification registry.
"""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, Signal

LIFECYCLE_EVENTS = ("notified", "dismissed", "closed", "changed")
BUS_EVENTS = ("notification_closed", "action_invoked")


class UnknownEventError(KeyError):
    """Raised when subscribing to or publishing an event that does not exist."""


class NotificationEvents(QObject):
    """
    Typed signals for every registry event, addressable by name.

    Handlers run synchronously in the order they subscribed. A handler may
    publish further events while it runs.
    """

    notified = Signal(object)
    dismissed = Signal(object)
    closed = Signal(object)
    changed = Signal()

    # Outbound protocol signals, relayed onto the bus by the adapter.
    notification_closed = Signal(object, object)
    action_invoked = Signal(object, str)

    def subscribe(self, name: str, callback: Callable[..., None]) -> None:
        self._signal(name).connect(callback)

    def unsubscribe(self, name: str, callback: Callable[..., None]) -> None:
        self._signal(name).disconnect(callback)

    def publish(self, name: str, *args) -> None:
        self._signal(name).emit(*args)

    def _signal(self, name: str):
        if name not in LIFECYCLE_EVENTS and name not in BUS_EVENTS:
            raise UnknownEventError(name)
        return getattr(self, name)
