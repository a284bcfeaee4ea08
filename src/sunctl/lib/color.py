"""Manual light color selection and RGB/hex conversion."""

from __future__ import annotations

import re
from dataclasses import dataclass

CUSTOM_SWATCH = "custom"
HEX_PATTERN = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


class InvalidColorError(ValueError):
    """Raised when a color string is not in #RRGGBB form."""


@dataclass(frozen=True)
class Swatch:
    swatch_id: str
    name: str
    r: int
    g: int
    b: int


PRESETS: dict[str, Swatch] = {
    swatch.swatch_id: swatch
    for swatch in (
        Swatch("sunrise", "Sunrise", 255, 60, 10),
        Swatch("warm", "Warm white", 255, 147, 41),
        Swatch("daylight", "Daylight", 255, 255, 220),
        Swatch("red", "Red", 255, 0, 0),
    )
}
DEFAULT_SWATCH = "sunrise"


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return "#" + "".join(f"{channel:02x}" for channel in (r, g, b))


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    match = HEX_PATTERN.match(value.strip())
    if not match:
        raise InvalidColorError(f"Expected #RRGGBB, got {value!r}.")
    r, g, b = (int(pair, 16) for pair in match.groups())
    return r, g, b


@dataclass
class ColorSelection:
    """The pending manual-light color and the swatch shown as active.

    Channels only change through the select_* methods so a send never sees a
    half-updated color.
    """

    r: int
    g: int
    b: int
    active_swatch: str

    @classmethod
    def initial(cls) -> ColorSelection:
        preset = PRESETS[DEFAULT_SWATCH]
        return cls(r=preset.r, g=preset.g, b=preset.b, active_swatch=preset.swatch_id)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b

    @property
    def is_custom(self) -> bool:
        return self.active_swatch == CUSTOM_SWATCH

    def select_preset(self, swatch_id: str) -> Swatch:
        try:
            preset = PRESETS[swatch_id]
        except KeyError:
            raise ValueError(f"Unknown preset swatch: {swatch_id}") from None
        self.r, self.g, self.b = preset.r, preset.g, preset.b
        self.active_swatch = preset.swatch_id
        return preset

    def select_custom(self) -> None:
        self.active_swatch = CUSTOM_SWATCH

    def select_from_hex(self, value: str) -> None:
        self.r, self.g, self.b = hex_to_rgb(value)

    def to_hex(self) -> str:
        return rgb_to_hex(self.r, self.g, self.b)
