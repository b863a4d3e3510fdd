"""
org.freedesktop.Notifications interface exported on the session bus.
"""

# dbus-next reads D-Bus signatures from the annotations at decoration time,
# so this module must not postpone annotation evaluation.

from typing import Any, Dict, List, Optional

from dbus_next import Variant
from dbus_next.aio import MessageBus
from dbus_next.constants import BusType, NameFlag, RequestNameReply
from dbus_next.errors import AuthError, DBusError, InvalidAddressError
from dbus_next.service import ServiceInterface, method, signal

from core.registry import NotificationRegistry
from linux_notifier_core.linux_notifier_core import logger as app_logger

BUS_NAME = "org.freedesktop.Notifications"
OBJECT_PATH = "/org/freedesktop/Notifications"
INTERFACE_NAME = "org.freedesktop.Notifications"

_LOGGER = app_logger.get_logger()


class NotificationsInterface(ServiceInterface):
    """Maps the standard notification-daemon methods onto the registry."""

    def __init__(self, registry: NotificationRegistry) -> None:
        super().__init__(INTERFACE_NAME)
        self._registry = registry
        registry.events.subscribe("notification_closed", self._on_notification_closed)
        registry.events.subscribe("action_invoked", self._on_action_invoked)

    @method()
    def Notify(
        self,
        app_name: "s",
        replaces_id: "u",
        app_icon: "s",
        summary: "s",
        body: "s",
        actions: "as",
        hints: "a{sv}",
        expire_timeout: "i",
    ) -> "u":
        return self.handle_notify(app_name, replaces_id, app_icon, summary, body, actions, hints, expire_timeout)

    @method()
    def CloseNotification(self, id: "u"):
        self._registry.close(id)

    @method()
    def GetCapabilities(self) -> "as":
        return self._registry.get_capabilities()

    @method()
    def GetServerInformation(self) -> "ssss":
        return list(self._registry.get_server_information())

    @signal()
    def NotificationClosed(self, id: "u", reason: "u") -> "uu":
        return [id, reason]

    @signal()
    def ActionInvoked(self, id: "u", action_key: "s") -> "us":
        return [id, action_key]

    def handle_notify(
        self,
        app_name: str,
        replaces_id: int,
        app_icon: str,
        summary: str,
        body: str,
        actions: List[str],
        hints: Dict[str, Any],
        expire_timeout: int = -1,
    ) -> int:
        """Translate a Notify call and return the assigned id."""
        if expire_timeout > 0:
            _LOGGER.debug("Ignoring requested expire_timeout {} ms from {!r}", expire_timeout, app_name)
        return self._registry.notify(
            app_name,
            replaces_id,
            app_icon,
            summary,
            body,
            list(actions),
            unwrap_hints(hints),
        )

    def _on_notification_closed(self, notification_id: int, reason: int) -> None:
        self.NotificationClosed(notification_id, reason)

    def _on_action_invoked(self, notification_id: int, action_id: str) -> None:
        self.ActionInvoked(notification_id, action_id)


def unwrap_hints(hints: Dict[str, Any]) -> Dict[str, Any]:
    """Replace dbus-next ``Variant`` wrappers with their plain values."""
    return {key: value.value if isinstance(value, Variant) else value for key, value in hints.items()}


async def export_on_session_bus(
    interface: NotificationsInterface,
    *,
    bus: Optional[MessageBus] = None,
) -> Optional[MessageBus]:
    """
    Claim the notifications bus name and export ``interface``.

    Returns the connected bus, or ``None`` when the name is held by another
    daemon or no session bus is reachable. The registry keeps working for
    in-process consumers either way.
    """
    try:
        bus = await (bus or MessageBus(bus_type=BusType.SESSION)).connect()
    except (OSError, InvalidAddressError, AuthError) as exc:
        _LOGGER.warning("Session bus unavailable ({}); notifications will not be exported.", exc)
        return None

    try:
        reply = await bus.request_name(BUS_NAME, NameFlag.DO_NOT_QUEUE)
    except DBusError as exc:
        _LOGGER.warning("Failed to request {}: {}", BUS_NAME, exc)
        bus.disconnect()
        return None

    if reply not in (RequestNameReply.PRIMARY_OWNER, RequestNameReply.ALREADY_OWNER):
        _LOGGER.warning(
            "Another notification daemon already owns {}. "
            "Stop it (e.g. dunst or mako) to receive notifications here.",
            BUS_NAME,
        )
        bus.disconnect()
        return None

    bus.export(OBJECT_PATH, interface)
    _LOGGER.info("Exported {} at {}", INTERFACE_NAME, OBJECT_PATH)
    return bus
