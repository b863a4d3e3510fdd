"""
Decoding of the Notify arguments that need interpretation: the flat action
list and the recognised hints (``urgency``, ``desktop-entry``, ``image-data``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from .notification import Action, Urgency

URGENCY_LEVELS = (Urgency.LOW, Urgency.NORMAL, Urgency.CRITICAL)
DEFAULT_URGENCY_INDEX = 1

IMAGE_DATA_HINT = "image-data"
DESKTOP_ENTRY_HINT = "desktop-entry"
URGENCY_HINT = "urgency"


class HintError(ValueError):
    """Raised when a hint value does not have the expected shape."""


@dataclass(frozen=True)
class ImageData:
    """Raw pixel buffer carried by the ``image-data`` hint, signature ``(iiibiiay)``."""

    width: int
    height: int
    rowstride: int
    has_alpha: bool
    bits_per_sample: int
    channels: int
    data: bytes

    @classmethod
    def from_hint(cls, value: Any) -> "ImageData":
        if not isinstance(value, (list, tuple)) or len(value) != 7:
            raise HintError("image-data must be a 7-field structure.")

        width, height, rowstride, has_alpha, bits_per_sample, channels, data = value
        for name, number in (
            ("width", width),
            ("height", height),
            ("rowstride", rowstride),
            ("bits_per_sample", bits_per_sample),
            ("channels", channels),
        ):
            if not isinstance(number, int) or isinstance(number, bool):
                raise HintError(f"image-data {name} must be an integer.")

        if width <= 0 or height <= 0:
            raise HintError(f"image-data has invalid dimensions {width}x{height}.")
        if bits_per_sample != 8:
            raise HintError(f"image-data uses unsupported {bits_per_sample} bits per sample.")
        if channels not in (3, 4):
            raise HintError(f"image-data uses unsupported channel count {channels}.")
        if rowstride < width * channels:
            raise HintError("image-data rowstride is shorter than a row of pixels.")

        if isinstance(data, (list, tuple)):
            data = bytes(data)
        if not isinstance(data, (bytes, bytearray)):
            raise HintError("image-data pixels must be a byte array.")

        # The final row is not required to carry rowstride padding.
        expected = rowstride * (height - 1) + width * channels
        if len(data) < expected:
            raise HintError(f"image-data holds {len(data)} bytes, expected at least {expected}.")

        return cls(
            width=width,
            height=height,
            rowstride=rowstride,
            has_alpha=bool(has_alpha),
            bits_per_sample=bits_per_sample,
            channels=channels,
            data=bytes(data),
        )


def parse_actions(flat_actions: Sequence[str]) -> List[Action]:
    """
    Pair the alternating ``[id, label, id, label, ...]`` list into actions.

    Pairs with an empty label are dropped, as is an unmatched trailing id.
    """
    actions: List[Action] = []
    for index in range(0, len(flat_actions) - 1, 2):
        action_id = flat_actions[index]
        label = flat_actions[index + 1]
        if label == "":
            continue
        actions.append(Action(id=action_id, label=label))
    return actions


def decode_urgency(hints: Mapping[str, Any]) -> Urgency:
    raw = hints.get(URGENCY_HINT)
    if raw is None or isinstance(raw, bool):
        return URGENCY_LEVELS[DEFAULT_URGENCY_INDEX]
    try:
        index = int(raw)
    except (TypeError, ValueError):
        return URGENCY_LEVELS[DEFAULT_URGENCY_INDEX]
    if 0 <= index < len(URGENCY_LEVELS):
        return URGENCY_LEVELS[index]
    return URGENCY_LEVELS[DEFAULT_URGENCY_INDEX]


def decode_desktop_entry(hints: Mapping[str, Any]) -> Optional[str]:
    value = hints.get(DESKTOP_ENTRY_HINT)
    return value if isinstance(value, str) else None


def decode_image_data(hints: Mapping[str, Any]) -> Optional[ImageData]:
    """Return the decoded ``image-data`` hint, or ``None`` when it is absent."""
    raw = hints.get(IMAGE_DATA_HINT)
    if raw is None:
        return None
    return ImageData.from_hint(raw)
