"""Shared fixtures for the notifier core tests."""

import os
import tempfile

# Keep the file log sink out of the user's state directory.
os.environ.setdefault("LINUX_NOTIFIER_LOG_DIR", tempfile.mkdtemp(prefix="linux-notifier-logs-"))

import pytest  # noqa: E402

from core.expiry import ExpiryTimers  # noqa: E402
from core.image_resolver import ImageResolver  # noqa: E402
from core.notification_store import NotificationStore  # noqa: E402
from core.registry import NotificationRegistry  # noqa: E402

FIXED_NOW = 1_700_000_000.0


class FakeScheduler:
    """Stands in for ``loop.call_later`` and fires timers on demand."""

    def __init__(self):
        self.calls = []

    def __call__(self, delay, callback, *args):
        self.calls.append((delay, callback, args))

    def fire_all(self):
        calls, self.calls = self.calls, []
        for _delay, callback, args in calls:
            callback(*args)


class EventRecorder:
    """Collects every event published by a registry, in order."""

    def __init__(self, events):
        self.log = []
        events.subscribe("notified", lambda nid: self.log.append(("notified", nid)))
        events.subscribe("dismissed", lambda nid: self.log.append(("dismissed", nid)))
        events.subscribe("closed", lambda nid: self.log.append(("closed", nid)))
        events.subscribe("changed", lambda: self.log.append(("changed",)))
        events.subscribe(
            "notification_closed",
            lambda nid, reason: self.log.append(("notification_closed", nid, reason)),
        )
        events.subscribe(
            "action_invoked",
            lambda nid, action_id: self.log.append(("action_invoked", nid, action_id)),
        )

    def named(self, name):
        return [entry for entry in self.log if entry[0] == name]


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def store(cache_dir):
    return NotificationStore(cache_dir)


@pytest.fixture
def make_registry(store, scheduler, tmp_path):
    def _make(**kwargs):
        kwargs.setdefault("store", store)
        kwargs.setdefault("timers", ExpiryTimers(3000, call_later=scheduler))
        return NotificationRegistry(
            image_resolver=ImageResolver(tmp_path / "images"),
            clock=lambda: FIXED_NOW,
            **kwargs,
        )

    return _make


@pytest.fixture
def registry(make_registry):
    return make_registry()


@pytest.fixture
def recorder(registry):
    return EventRecorder(registry.events)
