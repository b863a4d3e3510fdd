"""
Shared representation of a notification record and its cache encoding.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Urgency(Enum):
    LOW = "low"
    NORMAL = "normal"
    CRITICAL = "critical"


@dataclass(slots=True)
class Action:
    id: str
    label: str


@dataclass(slots=True)
class Notification:
    """
    A single notification request together with its lifecycle state.

    ``popup`` tracks whether the record should still be presented as a
    transient popup; the record itself lives until it is closed.
    """

    id: int
    app_name: str
    app_icon: str
    summary: str
    body: str
    actions: List[Action] = field(default_factory=list)
    urgency: Urgency = Urgency.NORMAL
    created_at: int = 0
    app_entry: Optional[str] = None
    image: Optional[str] = None
    popup: bool = True

    def to_cache_dict(self) -> Dict[str, Any]:
        """
        Encode the record for the on-disk cache.

        Actions are not written and the popup flag is always stored as false:
        nothing restored from the cache should re-appear as a fresh popup.
        """
        data: Dict[str, Any] = {
            "id": self.id,
            "appName": self.app_name,
            "appIconRef": self.app_icon,
            "summary": self.summary,
            "body": self.body,
            "urgency": self.urgency.value,
            "createdAt": self.created_at,
            "imageRef": self.image,
            "isPopupVisible": False,
        }
        if self.app_entry is not None:
            data["appEntry"] = self.app_entry
        return data

    @classmethod
    def from_cache_dict(cls, data: Any) -> "Notification":
        """Decode a cache entry, raising ``ValueError`` for malformed data."""
        if not isinstance(data, dict):
            raise ValueError("Cached notification must be a JSON object.")

        notification_id = data.get("id")
        if not isinstance(notification_id, int) or isinstance(notification_id, bool) or notification_id < 0:
            raise ValueError(f"Cached notification has an invalid id: {notification_id!r}")

        try:
            urgency = Urgency(data.get("urgency", Urgency.NORMAL.value))
        except ValueError as exc:
            raise ValueError(f"Cached notification {notification_id} has an invalid urgency.") from exc

        created_at = data.get("createdAt", 0)
        if not isinstance(created_at, int):
            raise ValueError(f"Cached notification {notification_id} has an invalid createdAt.")

        app_entry = data.get("appEntry")
        image = data.get("imageRef")

        return cls(
            id=notification_id,
            app_name=_string(data, "appName", notification_id),
            app_icon=_string(data, "appIconRef", notification_id),
            summary=_string(data, "summary", notification_id),
            body=_string(data, "body", notification_id),
            actions=[],
            urgency=urgency,
            created_at=created_at,
            app_entry=app_entry if isinstance(app_entry, str) else None,
            image=image if isinstance(image, str) else None,
            popup=False,
        )


def _string(data: Dict[str, Any], key: str, notification_id: int) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise ValueError(f"Cached notification {notification_id} field {key} must be a string.")
    return value
