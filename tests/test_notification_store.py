"""Tests for core.notification_store."""

import json

import pytest

from core.notification_store import CACHE_FILE_NAME, CacheFormatError, NotificationStore
from shared.notification import Action, Notification, Urgency


def _notification(notification_id=1, **overrides):
    fields = dict(
        id=notification_id,
        app_name="Mail",
        app_icon="mail-unread",
        summary="New message",
        body="Hello there",
        actions=[Action(id="open", label="Open")],
        urgency=Urgency.CRITICAL,
        created_at=1_700_000_000,
        app_entry="org.example.Mail",
        image="/tmp/image.png",
        popup=True,
    )
    fields.update(overrides)
    return Notification(**fields)


class TestLoad:
    def test_missing_file_is_empty(self, tmp_path):
        assert NotificationStore(tmp_path / "nowhere").load() == []

    def test_restored_records_are_not_popups(self, tmp_path):
        store = NotificationStore(tmp_path)
        entry = _notification().to_cache_dict()
        entry["isPopupVisible"] = True
        store.path.write_text(json.dumps([entry]), encoding="utf-8")

        restored = store.load()

        assert len(restored) == 1
        assert restored[0].popup is False
        assert restored[0].actions == []

    def test_invalid_json_raises(self, tmp_path):
        store = NotificationStore(tmp_path)
        store.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CacheFormatError):
            store.load()

    def test_undecodable_bytes_raise(self, tmp_path):
        store = NotificationStore(tmp_path)
        store.path.write_bytes(b"\xff\xfe[garbage")
        with pytest.raises(CacheFormatError):
            store.load()

    def test_non_array_root_raises(self, tmp_path):
        store = NotificationStore(tmp_path)
        store.path.write_text(json.dumps({"id": 1}), encoding="utf-8")
        with pytest.raises(CacheFormatError):
            store.load()

    def test_bad_record_raises(self, tmp_path):
        store = NotificationStore(tmp_path)
        store.path.write_text(json.dumps([{"id": "seven"}]), encoding="utf-8")
        with pytest.raises(CacheFormatError):
            store.load()


class TestSave:
    def test_creates_directory_and_file(self, tmp_path):
        store = NotificationStore(tmp_path / "a" / "b")
        store.save([_notification()])
        assert (tmp_path / "a" / "b" / CACHE_FILE_NAME).exists()
        assert not (tmp_path / "a" / "b" / (CACHE_FILE_NAME + ".tmp")).exists()

    def test_document_shape(self, tmp_path):
        store = NotificationStore(tmp_path)
        store.save([_notification(3), _notification(4, app_entry=None, image=None)])

        document = json.loads(store.path.read_text(encoding="utf-8"))

        assert [entry["id"] for entry in document] == [3, 4]
        first, second = document
        assert first == {
            "id": 3,
            "appName": "Mail",
            "appIconRef": "mail-unread",
            "appEntry": "org.example.Mail",
            "summary": "New message",
            "body": "Hello there",
            "urgency": "critical",
            "createdAt": 1_700_000_000,
            "imageRef": "/tmp/image.png",
            "isPopupVisible": False,
        }
        assert "appEntry" not in second
        assert second["imageRef"] is None
        assert all("actions" not in entry for entry in document)

    def test_round_trip_clears_actions_and_popup(self, tmp_path):
        store = NotificationStore(tmp_path)
        original = _notification(9)
        store.save([original])

        (restored,) = store.load()

        assert restored == _notification(9, actions=[], popup=False)

    def test_save_overwrites_previous_snapshot(self, tmp_path):
        store = NotificationStore(tmp_path)
        store.save([_notification(1), _notification(2)])
        store.save([_notification(2)])
        assert [n.id for n in store.load()] == [2]
