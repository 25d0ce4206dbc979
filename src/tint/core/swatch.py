# -*- coding: utf-8 -*-
"""
src/tint/core/swatch.py

The immutable value types describing a captured color.

A `ColorSample` is what the screen sampler hands over: three sRGB channels as
floats in [0, 1]. A `Swatch` is the stored form of one pick, with its 8-bit
channels, the `#RRGGBB` string rendered from them, a unique id and the
capture time.
"""

import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, NamedTuple, Optional

from .errors import MalformedRecordError

HEX_PATTERN = re.compile(r"^#[0-9A-F]{6}$")


class ColorSample(NamedTuple):
    """A sampled color in sRGB, each channel nominally in [0, 1]."""
    red: float
    green: float
    blue: float


class RGB(NamedTuple):
    """8-bit sRGB channels."""
    red: int
    green: int
    blue: int

    def to_hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(self.red, self.green, self.blue)


def channel_to_byte(value: float) -> int:
    """
    Converts a [0, 1] channel to an integer in [0, 255].

    Out-of-range and NaN inputs are clamped first. Rounding is half away from
    zero, so 0.5/255 steps always round up (Python's round() would round
    half to even).
    """
    if math.isnan(value):
        value = 0.0
    clamped = min(max(float(value), 0.0), 1.0)
    return int(math.floor(clamped * 255 + 0.5))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Swatch:
    """
    One captured color.

    Attributes:
        rgb (RGB): The 8-bit channels.
        timestamp (datetime): Timezone-aware capture instant.
        id (str): Unique identifier (UUID4), assigned at creation.
        hex (str): "#RRGGBB", always derived from `rgb`.
    """
    rgb: RGB
    timestamp: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    hex: str = field(init=False)

    def __post_init__(self):
        # Frozen dataclass: the one place hex is ever computed.
        object.__setattr__(self, "hex", self.rgb.to_hex())

    @classmethod
    def create(cls, sample: ColorSample, now: Optional[datetime] = None) -> "Swatch":
        """
        Builds a new swatch from a sampled color.

        Args:
            sample (ColorSample): sRGB channels in [0, 1].
            now (Optional[datetime]): Capture time; defaults to the current UTC time.

        Returns:
            Swatch: A swatch with a fresh id.
        """
        rgb = RGB(
            channel_to_byte(sample.red),
            channel_to_byte(sample.green),
            channel_to_byte(sample.blue),
        )
        return cls(rgb=rgb, timestamp=now if now is not None else utc_now())

    def to_dict(self) -> Dict[str, Any]:
        """Returns the persisted record for this swatch."""
        return {
            "id": self.id,
            "hex": self.hex,
            "rgb": {"red": self.rgb.red, "green": self.rgb.green, "blue": self.rgb.blue},
            "timestamp": self.timestamp.astimezone(timezone.utc).isoformat(),
        }

    @classmethod
    def from_dict(cls, record: Any) -> "Swatch":
        """
        Rebuilds a swatch from a persisted record.

        Raises:
            MalformedRecordError: If the record is not exactly the expected shape.
        """
        if not isinstance(record, dict):
            raise MalformedRecordError(f"Expected an object, got {type(record).__name__}")
        try:
            record_id = record["id"]
            hex_str = record["hex"]
            channels = record["rgb"]
            raw_timestamp = record["timestamp"]
        except KeyError as e:
            raise MalformedRecordError(f"Missing field: {e}") from e

        if not isinstance(record_id, str) or not record_id:
            raise MalformedRecordError("Field 'id' must be a non-empty string")
        if not isinstance(hex_str, str) or not HEX_PATTERN.match(hex_str):
            raise MalformedRecordError(f"Invalid hex value: {hex_str!r}")
        if not isinstance(channels, dict):
            raise MalformedRecordError("Field 'rgb' must be an object")

        values = []
        for name in ("red", "green", "blue"):
            value = channels.get(name)
            # bool is an int subclass; reject it explicitly.
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise MalformedRecordError(f"Invalid {name} channel: {value!r}")
            values.append(value)
        rgb = RGB(*values)

        if rgb.to_hex() != hex_str:
            raise MalformedRecordError(f"Hex {hex_str} does not match rgb {tuple(rgb)}")

        if not isinstance(raw_timestamp, str):
            raise MalformedRecordError("Field 'timestamp' must be an ISO-8601 string")
        try:
            timestamp = datetime.fromisoformat(raw_timestamp)
        except ValueError as e:
            raise MalformedRecordError(f"Invalid timestamp: {raw_timestamp!r}") from e
        if timestamp.tzinfo is None:
            raise MalformedRecordError(f"Timestamp has no UTC offset: {raw_timestamp!r}")

        return cls(rgb=rgb, timestamp=timestamp, id=record_id)
