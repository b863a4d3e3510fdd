"""
Registry of live notifications and the lifecycle rules that govern them.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from core.events import NotificationEvents
from core.expiry import ExpiryTimers
from core.image_resolver import ImageResolver
from core.notification_store import CacheFormatError, NotificationStore
from linux_notifier_core.linux_notifier_core import logger as app_logger
from shared.hints import (
    HintError,
    decode_desktop_entry,
    decode_image_data,
    decode_urgency,
    parse_actions,
)
from shared.notification import Notification

SERVER_NAME = "linux-notifier"
SERVER_VENDOR = "Linux Notifier"
SERVER_VERSION = "1.0.0"
SPEC_VERSION = "1.2"
CAPABILITIES = ("actions", "body", "icon-static", "persistence")

# replaces_id 0 asks for a fresh id, so allocation starts above it.
FIRST_ID = 1

# The only NotificationClosed reason this daemon reports.
CLOSE_REASON = 3


class NotificationRegistry:
    """
    Owns every live notification keyed by id.

    Lifecycle per id: created (popup or not) -> dismissed (popup cleared) ->
    closed (removed). Invoking an action closes the notification directly.
    All calls are expected on the daemon's single event loop.
    """

    def __init__(
        self,
        *,
        store: NotificationStore,
        image_resolver: ImageResolver,
        timers: ExpiryTimers,
        events: Optional[NotificationEvents] = None,
        clock: Callable[[], float] = time.time,
        first_id: int = FIRST_ID,
    ) -> None:
        self._logger = app_logger.get_logger()
        self._store = store
        self._image_resolver = image_resolver
        self._timers = timers
        self._clock = clock
        self.events = events or NotificationEvents()

        self._notifications: Dict[int, Notification] = {}
        self._next_id = first_id
        self._dnd = False

    @property
    def dnd(self) -> bool:
        return self._dnd

    @dnd.setter
    def dnd(self, value: bool) -> None:
        self._dnd = bool(value)
        self._logger.info("Do-not-disturb {}", "enabled" if self._dnd else "disabled")
        self.events.publish("changed")

    @property
    def notifications(self) -> Dict[int, Notification]:
        return dict(self._notifications)

    @property
    def popups(self) -> Dict[int, Notification]:
        return {nid: n for nid, n in self._notifications.items() if n.popup}

    def get(self, notification_id: int) -> Optional[Notification]:
        return self._notifications.get(notification_id)

    def restore(self) -> None:
        """Load the cached snapshot into the registry."""
        try:
            restored = self._store.load()
        except CacheFormatError as exc:
            self._logger.error("Ignoring unreadable notification cache {}: {}", self._store.path, exc)
            return

        for notification in restored:
            notification.popup = False
            self._notifications[notification.id] = notification
            self._next_id = max(self._next_id, notification.id + 1)

        self._logger.info("Restored {} notifications from {}", len(restored), self._store.path)
        self.events.publish("changed")

    def notify(
        self,
        app_name: str,
        replaces_id: int,
        app_icon: str,
        summary: str,
        body: str,
        actions: Sequence[str],
        hints: Mapping[str, Any],
    ) -> int:
        parsed_actions = parse_actions(actions)
        notification_id = replaces_id if replaces_id else self._allocate_id()

        notification = Notification(
            id=notification_id,
            app_name=app_name,
            app_icon=app_icon,
            summary=summary,
            body=body,
            actions=parsed_actions,
            urgency=decode_urgency(hints),
            created_at=int(self._clock()),
            app_entry=decode_desktop_entry(hints),
            image=self._resolve_image(f"{summary}{notification_id}", app_icon, hints),
            popup=not self._dnd,
        )
        replaced = notification_id in self._notifications
        self._notifications[notification_id] = notification
        self._logger.debug(
            "{} notification {} from {!r} (urgency={}, popup={})",
            "Replaced" if replaced else "Created",
            notification_id,
            app_name,
            notification.urgency.value,
            notification.popup,
        )

        self._persist()
        self.events.publish("notified", notification_id)
        self.events.publish("changed")
        self._timers.schedule(notification_id, self.dismiss)
        return notification_id

    def dismiss(self, notification_id: int) -> None:
        notification = self._notifications.get(notification_id)
        if notification is None:
            return

        notification.popup = False
        self.events.publish("dismissed", notification_id)
        self.events.publish("changed")

    def close(self, notification_id: int) -> None:
        if notification_id not in self._notifications:
            self._logger.debug("Close requested for unknown notification {}", notification_id)
            return

        self.events.publish("notification_closed", notification_id, CLOSE_REASON)
        del self._notifications[notification_id]
        self._timers.discard(notification_id)
        self.events.publish("closed", notification_id)
        self.events.publish("changed")
        self._persist()

    def invoke_action(self, notification_id: int, action_id: str) -> None:
        if notification_id not in self._notifications:
            self._logger.debug("Action {!r} invoked on unknown notification {}", action_id, notification_id)
            return

        self._logger.info("Action {!r} invoked on notification {}", action_id, notification_id)
        self.events.publish("action_invoked", notification_id, action_id)
        self.close(notification_id)

    def clear(self) -> None:
        for notification_id in list(self._notifications):
            self.close(notification_id)

    def get_capabilities(self) -> List[str]:
        return list(CAPABILITIES)

    def get_server_information(self) -> Tuple[str, str, str, str]:
        return SERVER_NAME, SERVER_VENDOR, SERVER_VERSION, SPEC_VERSION

    def _allocate_id(self) -> int:
        # Skip ids a caller claimed through an unknown replaces_id.
        while self._next_id in self._notifications:
            self._next_id += 1
        notification_id = self._next_id
        self._next_id += 1
        return notification_id

    def _resolve_image(self, key: str, app_icon: str, hints: Mapping[str, Any]) -> Optional[str]:
        try:
            payload = decode_image_data(hints)
        except HintError as exc:
            self._logger.warning("Ignoring malformed image-data hint: {}", exc)
            payload = None

        image = self._image_resolver.resolve_from_payload(key, payload)
        if image is not None:
            return image
        return self._image_resolver.resolve_from_path(app_icon)

    def _persist(self) -> None:
        try:
            self._store.save(self._notifications.values())
        except OSError as exc:
            self._logger.error("Failed to write notification cache {}: {}", self._store.path, exc)
