"""
Turns notification image hints into files the popup layer can load.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from PySide6.QtGui import QImage

from linux_notifier_core.linux_notifier_core import logger as app_logger
from shared.hints import ImageData

_LOGGER = app_logger.get_logger()
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_name(key: str) -> str:
    """Strip every character that is not an ASCII letter or digit."""
    return _UNSAFE_CHARS.sub("", key)


class ImageResolver:
    """
    Resolves a notification's image to a path on disk.

    Raw pixel payloads are encoded to PNG under ``images_dir``; icon hints are
    accepted as-is when they name an existing file.
    """

    def __init__(self, images_dir: Path) -> None:
        self.images_dir = Path(images_dir)

    def resolve_from_payload(self, key: str, payload: Optional[ImageData]) -> Optional[str]:
        if payload is None:
            return None

        name = sanitize_name(key)
        if not name:
            _LOGGER.warning("Image key {!r} has no usable characters; skipping image.", key)
            return None

        target = self.images_dir / f"{name}.png"
        image = _to_qimage(payload)
        if image is None or image.isNull():
            _LOGGER.warning("Unable to decode image payload for {}", name)
            return None

        try:
            self.images_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            _LOGGER.error("Failed to create image directory {}: {}", self.images_dir, exc)
            return None

        if not image.save(str(target), "PNG"):
            _LOGGER.warning("Failed to write notification image {}", target)
            return None
        return str(target)

    def resolve_from_path(self, path: str) -> Optional[str]:
        if not path:
            return None
        return path if Path(path).exists() else None


def _to_qimage(payload: ImageData) -> Optional[QImage]:
    if payload.channels == 4 and payload.has_alpha:
        image_format = QImage.Format.Format_RGBA8888
    elif payload.channels == 4:
        image_format = QImage.Format.Format_RGBX8888
    elif payload.channels == 3:
        image_format = QImage.Format.Format_RGB888
    else:
        return None

    # QImage reads rowstride * height bytes; senders may omit the last row's padding.
    data = payload.data.ljust(payload.rowstride * payload.height, b"\0")
    # QImage borrows the buffer; copy() detaches it before the bytes go away.
    image = QImage(data, payload.width, payload.height, payload.rowstride, image_format)
    return image.copy()
