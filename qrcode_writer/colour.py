"""Colour values for QR rendering.

A colour is either ``Opaque`` (24-bit RGB) or ``WithAlpha`` (32-bit ARGB).
Both expose the same read-only views so renderers never need to know which
one they were handed.
"""

import string
from dataclasses import dataclass

from qrcode_writer.errors import ColourError


class _ColourViews:
    """Derived views shared by both colour variants."""

    argb: int

    @property
    def alpha(self) -> int:
        return (self.argb >> 24) & 0xFF

    @property
    def rgb(self) -> int:
        return self.argb & 0xFFFFFF

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        """Pillow-style ``(r, g, b, a)`` tuple."""
        rgb = self.rgb
        return (rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF, self.alpha

    @property
    def hex(self) -> str:
        """CSS ``#rrggbb`` text, alpha excluded."""
        return f"#{self.rgb:06x}"

    @property
    def opacity(self) -> float:
        return self.alpha / 255

    @property
    def is_opaque(self) -> bool:
        return self.alpha == 0xFF


@dataclass(frozen=True)
class Opaque(_ColourViews):
    """A fully opaque colour given as ``0xRRGGBB``."""

    value: int

    def __post_init__(self):
        if not 0 <= self.value <= 0xFFFFFF:
            raise ColourError(f"RGB value out of range: {self.value:#x}")

    @property
    def argb(self) -> int:
        return 0xFF000000 | self.value


@dataclass(frozen=True)
class WithAlpha(_ColourViews):
    """A colour with explicit alpha given as ``0xAARRGGBB``."""

    value: int

    def __post_init__(self):
        if not 0 <= self.value <= 0xFFFFFFFF:
            raise ColourError(f"ARGB value out of range: {self.value:#x}")

    @property
    def argb(self) -> int:
        return self.value


Colour = Opaque | WithAlpha


def from_argb(argb: int) -> Colour:
    """Wrap a 32-bit ARGB constant, collapsing full alpha to ``Opaque``."""
    if (argb >> 24) & 0xFF == 0xFF:
        return Opaque(argb & 0xFFFFFF)
    return WithAlpha(argb)


def parse_colour(text: str) -> Colour:
    """Parse ``RRGGBB`` or ``AARRGGBB`` hex text, with or without ``0x``.

    Raises:
        ColourError: If the text is not exactly 6 or 8 hex digits.
    """
    digits = text.strip()
    if digits[:2] in ("0x", "0X"):
        digits = digits[2:]

    if not digits or any(ch not in string.hexdigits for ch in digits):
        raise ColourError(f"Invalid colour '{text}': expected hex digits")

    if len(digits) == 6:
        return Opaque(int(digits, 16))
    if len(digits) == 8:
        return WithAlpha(int(digits, 16))

    raise ColourError(
        f"Invalid colour '{text}': expected 6 (RRGGBB) or 8 (AARRGGBB) hex digits, "
        f"got {len(digits)}"
    )
