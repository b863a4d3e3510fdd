"""
Access point handed to in-process collaborators (popup layer, dnd toggle).
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from core.registry import NotificationRegistry
from shared.notification import Notification


class Notifications:
    """
    Builds the registry on first use and forwards the common operations.

    One instance is created by the application coordinator and injected
    wherever notifications are needed.
    """

    def __init__(self, factory: Callable[[], NotificationRegistry]) -> None:
        self._factory = factory
        self._instance: Optional[NotificationRegistry] = None

    @property
    def instance(self) -> NotificationRegistry:
        if self._instance is None:
            self._instance = self._factory()
        return self._instance

    def clear(self) -> None:
        self.instance.clear()

    def close(self, notification_id: int) -> None:
        self.instance.close(notification_id)

    def dismiss(self, notification_id: int) -> None:
        self.instance.dismiss(notification_id)

    def invoke(self, notification_id: int, action_id: str) -> None:
        self.instance.invoke_action(notification_id, action_id)

    @property
    def dnd(self) -> bool:
        return self.instance.dnd

    @dnd.setter
    def dnd(self, value: bool) -> None:
        self.instance.dnd = value

    @property
    def popups(self) -> Dict[int, Notification]:
        return self.instance.popups

    @property
    def notifications(self) -> Dict[int, Notification]:
        return self.instance.notifications

    def subscribe(self, name: str, callback: Callable[..., None]) -> None:
        self.instance.events.subscribe(name, callback)
