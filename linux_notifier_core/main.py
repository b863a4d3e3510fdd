"""
Entry point for the linux_notifier_core daemon.
"""

from __future__ import annotations

import asyncio
import time
from typing import Tuple

from core.app import AppCoordinator
from linux_notifier_core.linux_notifier_core import logger as app_logger

_LOGGER = app_logger.get_logger()


def _run_daemon_once() -> Tuple[int, bool]:
    """Run the daemon once and report whether shutdown was intentional."""
    coordinator = AppCoordinator()
    asyncio.run(coordinator.run())
    return 0, coordinator.manual_shutdown_requested


def main() -> int:
    """Launch the daemon, restarting it with backoff after unexpected exits."""
    backoff_seconds = 2
    max_backoff = 30

    while True:
        try:
            exit_code, manual = _run_daemon_once()
        except Exception:  # pragma: no cover - defensive crash guard
            _LOGGER.exception("Daemon crashed; attempting automatic recovery.")
            exit_code = 1
            manual = False

        if manual:
            return exit_code

        _LOGGER.warning(
            "Daemon exited unexpectedly (code={}). Restarting in {} seconds.",
            exit_code,
            backoff_seconds,
        )
        time.sleep(backoff_seconds)
        backoff_seconds = min(backoff_seconds * 2, max_backoff)


if __name__ == "__main__":
    raise SystemExit(main())
