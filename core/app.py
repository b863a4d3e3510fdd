"""
Application coordinator wiring the registry, its storage and the bus.
"""

from __future__ import annotations

import asyncio
import signal
from dataclasses import dataclass, field
from typing import Optional

from dbus_next.aio import MessageBus

from core.dbus_service import NotificationsInterface, export_on_session_bus
from core.expiry import ExpiryTimers
from core.image_resolver import ImageResolver
from core.notification_store import NotificationStore
from core.registry import NotificationRegistry
from core.service import Notifications
from core.settings import CoreSettings, CoreSettingsManager
from linux_notifier_core.linux_notifier_core import logger as app_logger

APP_NAME = "Linux Notifier Core"
IMAGES_SUBDIR = "images"


@dataclass
class AppCoordinator:
    settings_manager: CoreSettingsManager = field(default_factory=CoreSettingsManager)

    def __post_init__(self) -> None:
        self._logger = app_logger.get_logger()
        self._settings: CoreSettings = self.settings_manager.read_settings()
        self.notifications = Notifications(self._build_registry)

        self._interface: Optional[NotificationsInterface] = None
        self._bus: Optional[MessageBus] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._manual_shutdown_requested = False

    @property
    def settings(self) -> CoreSettings:
        return self._settings

    @property
    def manual_shutdown_requested(self) -> bool:
        return self._manual_shutdown_requested

    async def start(self) -> None:
        self._logger.info(
            "Starting {}. Cache directory {}, popup timeout {} ms",
            APP_NAME,
            self._settings.cache_dir,
            self._settings.popup_timeout_ms,
        )
        self._interface = NotificationsInterface(self.notifications.instance)
        self._bus = await export_on_session_bus(self._interface)
        if self._bus is None:
            self._logger.warning("Running without a bus connection; only in-process clients are served.")

    async def run(self) -> None:
        """Start the daemon and block until a shutdown is requested."""
        self._stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(signum, self.shutdown)

        await self.start()
        try:
            await self._stop_event.wait()
        finally:
            for signum in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(signum)

    def shutdown(self) -> None:
        self._logger.info("Shutting down on request.")
        self._manual_shutdown_requested = True
        if self._bus is not None:
            self._bus.disconnect()
            self._bus = None
        if self._stop_event is not None:
            self._stop_event.set()

    def _build_registry(self) -> NotificationRegistry:
        cache_dir = self._settings.cache_dir
        registry = NotificationRegistry(
            store=NotificationStore(cache_dir),
            image_resolver=ImageResolver(cache_dir / IMAGES_SUBDIR),
            timers=ExpiryTimers(self._settings.popup_timeout_ms),
        )
        registry.restore()
        return registry
