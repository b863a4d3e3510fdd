"""Tests for core.dbus_service: the org.freedesktop.Notifications adapter."""

import asyncio
from unittest.mock import MagicMock

import pytest
from dbus_next import Variant
from dbus_next.constants import NameFlag, RequestNameReply

from core.dbus_service import (
    BUS_NAME,
    OBJECT_PATH,
    NotificationsInterface,
    export_on_session_bus,
    unwrap_hints,
)
from shared.notification import Urgency


class FakeBus:
    """Minimal stand-in for ``dbus_next.aio.MessageBus``."""

    def __init__(self, reply=RequestNameReply.PRIMARY_OWNER, connect_error=None):
        self.reply = reply
        self.connect_error = connect_error
        self.requested = []
        self.exported = []
        self.disconnected = False

    async def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        return self

    async def request_name(self, name, flags):
        self.requested.append((name, flags))
        return self.reply

    def export(self, path, interface):
        self.exported.append((path, interface))

    def disconnect(self):
        self.disconnected = True


@pytest.fixture
def interface(registry):
    return NotificationsInterface(registry)


class TestNotify:
    def test_variants_are_unwrapped(self, interface, registry):
        hints = {
            "urgency": Variant("y", 2),
            "desktop-entry": Variant("s", "org.example.Chat"),
            "x-vendor": Variant("s", "ignored"),
        }

        notification_id = interface.handle_notify("Chat", 0, "", "Ping", "body", ["reply", "Reply"], hints, -1)

        notification = registry.get(notification_id)
        assert notification.urgency is Urgency.CRITICAL
        assert notification.app_entry == "org.example.Chat"
        assert [a.id for a in notification.actions] == ["reply"]

    def test_image_data_variant(self, interface, registry, tmp_path):
        hints = {"image-data": Variant("(iiibiiay)", [1, 1, 3, False, 8, 3, b"\x10\x20\x30"])}

        notification_id = interface.handle_notify("Photos", 0, "", "Pic", "", [], hints, 5000)

        assert registry.get(notification_id).image == str(tmp_path / "images" / "Pic1.png")

    def test_replaces_id_is_honoured(self, interface, registry):
        first = interface.handle_notify("App", 0, "", "one", "", [], {})
        again = interface.handle_notify("App", first, "", "two", "", [], {})
        assert again == first
        assert registry.get(first).summary == "two"

    def test_unwrap_keeps_plain_values(self):
        assert unwrap_hints({"urgency": 1, "desktop-entry": Variant("s", "x")}) == {
            "urgency": 1,
            "desktop-entry": "x",
        }


class TestSignals:
    def test_close_emits_notification_closed(self, interface, registry, monkeypatch):
        emitted = MagicMock()
        monkeypatch.setattr(interface, "NotificationClosed", emitted)
        notification_id = interface.handle_notify("App", 0, "", "Hi", "", [], {})

        registry.close(notification_id)

        emitted.assert_called_once_with(notification_id, 3)

    def test_invoke_emits_action_then_closed(self, interface, registry, monkeypatch):
        calls = []
        monkeypatch.setattr(interface, "ActionInvoked", lambda nid, key: calls.append(("action", nid, key)))
        monkeypatch.setattr(interface, "NotificationClosed", lambda nid, reason: calls.append(("closed", nid, reason)))
        notification_id = interface.handle_notify("App", 0, "", "Hi", "", ["open", "Open"], {})

        registry.invoke_action(notification_id, "open")

        assert calls == [("action", notification_id, "open"), ("closed", notification_id, 3)]

    def test_clear_emits_one_signal_per_notification(self, interface, registry, monkeypatch):
        emitted = MagicMock()
        monkeypatch.setattr(interface, "NotificationClosed", emitted)
        for summary in ("a", "b", "c"):
            interface.handle_notify("App", 0, "", summary, "", [], {})

        registry.clear()

        assert emitted.call_count == 3
        assert registry.notifications == {}

    def test_signals_without_bus_return_payload(self, interface):
        assert interface.NotificationClosed(4, 3) == [4, 3]
        assert interface.ActionInvoked(4, "open") == [4, "open"]


class TestExport:
    def test_exports_when_name_acquired(self, interface):
        bus = FakeBus()

        result = asyncio.run(export_on_session_bus(interface, bus=bus))

        assert result is bus
        assert bus.requested == [(BUS_NAME, NameFlag.DO_NOT_QUEUE)]
        assert bus.exported == [(OBJECT_PATH, interface)]

    def test_name_owned_elsewhere_is_not_fatal(self, interface):
        bus = FakeBus(reply=RequestNameReply.EXISTS)

        result = asyncio.run(export_on_session_bus(interface, bus=bus))

        assert result is None
        assert bus.exported == []
        assert bus.disconnected

    def test_unreachable_bus_is_not_fatal(self, interface):
        bus = FakeBus(connect_error=ConnectionRefusedError("no bus"))
        assert asyncio.run(export_on_session_bus(interface, bus=bus)) is None
