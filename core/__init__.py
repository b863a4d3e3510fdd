"""
Core services of the Linux Notifier notification daemon.
"""

from .notification_store import CacheFormatError, NotificationStore  # noqa: F401
from .registry import NotificationRegistry  # noqa: F401
