"""
Persistence layer keeping a JSON snapshot of the live notifications.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from linux_notifier_core.linux_notifier_core import logger as app_logger
from shared.notification import Notification

CACHE_FILE_NAME = "notifications.json"

_LOGGER = app_logger.get_logger()


class CacheFormatError(ValueError):
    """Raised when the cache file exists but does not hold valid notification data."""


@dataclass
class NotificationStore:
    """Reads and writes the full notification snapshot under ``cache_dir``."""

    cache_dir: Path

    def __post_init__(self) -> None:
        self.cache_dir = Path(self.cache_dir)

    @property
    def path(self) -> Path:
        return self.cache_dir / CACHE_FILE_NAME

    def load(self) -> List[Notification]:
        """
        Return every cached notification.

        A missing or unreadable file yields an empty list. Restored records
        never carry actions and are never flagged as popups.
        """
        try:
            contents = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            _LOGGER.warning("Unable to read notification cache {}: {}", self.path, exc)
            return []
        except UnicodeDecodeError as exc:
            raise CacheFormatError(f"Notification cache is not valid UTF-8: {exc}") from exc

        try:
            raw = json.loads(contents)
        except json.JSONDecodeError as exc:
            raise CacheFormatError(f"Notification cache is not valid JSON: {exc}") from exc

        if not isinstance(raw, list):
            raise CacheFormatError("Notification cache root must be a JSON array.")

        notifications: List[Notification] = []
        for entry in raw:
            try:
                notifications.append(Notification.from_cache_dict(entry))
            except ValueError as exc:
                raise CacheFormatError(str(exc)) from exc
        return notifications

    def save(self, notifications: Iterable[Notification]) -> None:
        """Write the snapshot, replacing the previous file in one rename."""
        payload = [notification.to_cache_dict() for notification in notifications]
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        temp_path = self.path.with_name(CACHE_FILE_NAME + ".tmp")
        temp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        temp_path.replace(self.path)
