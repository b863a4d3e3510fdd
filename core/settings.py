"""
File-backed configuration for the Linux Notifier Core runtime.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from linux_notifier_core.linux_notifier_core import logger as app_logger

_LOGGER = app_logger.get_logger()

_CONFIG_HOME = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
_CACHE_HOME = Path(os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache")
DEFAULT_CONFIG_PATH = Path(
    os.environ.get("LINUX_NOTIFIER_CONFIG", str(_CONFIG_HOME / "linux-notifier" / "config.json"))
)
DEFAULT_CACHE_DIR = _CACHE_HOME / "linux-notifier" / "notifications"
DEFAULT_POPUP_TIMEOUT_MS = 3000
_MAX_POPUP_TIMEOUT_MS = 3_600_000


@dataclass(eq=True)
class CoreSettings:
    popup_timeout_ms: int = DEFAULT_POPUP_TIMEOUT_MS
    cache_dir: Path = field(default_factory=lambda: DEFAULT_CACHE_DIR)


class CoreSettingsManager:
    """Loads the JSON configuration file and replaces invalid data with defaults."""

    def __init__(self, *, config_path: Optional[Path] = None) -> None:
        self.config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    def read_settings(self) -> CoreSettings:
        raw = self._read_config()
        if raw is None:
            return CoreSettings()

        return CoreSettings(
            popup_timeout_ms=self._read_popup_timeout(raw),
            cache_dir=self._read_cache_dir(raw),
        )

    def _read_config(self) -> Optional[Dict[str, Any]]:
        try:
            contents = self.config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            _LOGGER.warning("Unable to read configuration {}: {}", self.config_path, exc)
            return None

        try:
            raw = json.loads(contents)
        except json.JSONDecodeError as exc:
            _LOGGER.warning("Configuration {} is not valid JSON: {}. Using defaults.", self.config_path, exc)
            return None

        if not isinstance(raw, dict):
            _LOGGER.warning("Configuration root in {} must be a JSON object. Using defaults.", self.config_path)
            return None
        return raw

    def _read_popup_timeout(self, raw: Dict[str, Any]) -> int:
        value = raw.get("notificationPopupTimeout")
        if value is None:
            return DEFAULT_POPUP_TIMEOUT_MS
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            _LOGGER.warning(
                "Invalid notificationPopupTimeout {!r} in configuration. Using {} ms.",
                value,
                DEFAULT_POPUP_TIMEOUT_MS,
            )
            return DEFAULT_POPUP_TIMEOUT_MS
        if value > _MAX_POPUP_TIMEOUT_MS:
            _LOGGER.warning("notificationPopupTimeout {} exceeds one hour. Clamping.", value)
            return _MAX_POPUP_TIMEOUT_MS
        return value

    def _read_cache_dir(self, raw: Dict[str, Any]) -> Path:
        value = raw.get("cacheDir")
        if value is None:
            return DEFAULT_CACHE_DIR
        if not isinstance(value, str) or not value.strip():
            _LOGGER.warning("Invalid cacheDir {!r} in configuration. Using {}.", value, DEFAULT_CACHE_DIR)
            return DEFAULT_CACHE_DIR
        return Path(value.strip()).expanduser()
