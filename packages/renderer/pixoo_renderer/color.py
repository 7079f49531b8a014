"""RGB color value type and the fixed device palette."""

from __future__ import annotations

from dataclasses import dataclass


def clamp(value: int, minimum: int = 0, maximum: int = 255) -> int:
    return max(minimum, min(maximum, int(value)))


@dataclass(frozen=True)
class Color:
    """Immutable RGB triple; channels are clamped into [0, 255] on construction."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "r", clamp(self.r))
        object.__setattr__(self, "g", clamp(self.g))
        object.__setattr__(self, "b", clamp(self.b))

    @classmethod
    def from_hex(cls, value: str) -> Color:
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"Expected #RRGGBB, got {value!r}")
        return cls(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))

    @classmethod
    def from_int(cls, value: int) -> Color:
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def to_int(self) -> int:
        return (self.r << 16) | (self.g << 8) | self.b

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


class Palette:
    BLACK = Color(0, 0, 0)
    WHITE = Color(255, 255, 255)
    RED = Color(255, 0, 0)
    GREEN = Color(0, 255, 0)
    BLUE = Color(0, 0, 255)
    YELLOW = Color(255, 255, 0)
    CYAN = Color(0, 255, 255)
    MAGENTA = Color(255, 0, 255)
