"""qrcode-writer — encode a single text datum into a PNG or SVG QR code."""

__version__ = "1.0.0"

# Shared constants
DEFAULT_PNG_OUTPUT = "out.png"
DEFAULT_SVG_OUTPUT = "out.svg"
DEFAULT_WIDTH = 300
DEFAULT_HEIGHT = 300
DEFAULT_MARGIN = 0  # Quiet zone in modules; the symbol fills the whole image
DEFAULT_ERROR_CORRECTION = "L"

# ARGB values
DEFAULT_FOREGROUND = 0xFF000000
OPAQUE_WHITE = 0xFFFFFFFF
TRANSPARENT_WHITE = 0x00FFFFFF

DEFAULT_OUTPUTS = {
    "png": DEFAULT_PNG_OUTPUT,
    "svg": DEFAULT_SVG_OUTPUT,
}
