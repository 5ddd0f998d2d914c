"""Turn a text datum into a module matrix sized for the output image."""

from dataclasses import dataclass

import qrcode
from qrcode.exceptions import DataOverflowError

from qrcode_writer import DEFAULT_ERROR_CORRECTION, DEFAULT_MARGIN
from qrcode_writer.errors import EncodeError

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


@dataclass(frozen=True)
class ModuleMatrix:
    """Read-only grid of module states, ``True`` meaning dark.

    The symbol is stored once at one cell per module and laid out on a
    ``width × height`` grid: each module covers a ``scale × scale`` block
    whose top-left symbol corner sits at ``(left, top)``. Everything outside
    the symbol is light. Rows are indexed by y (downwards), columns by x.
    """

    modules: tuple[tuple[bool, ...], ...]
    scale: int = 1
    left: int = 0
    top: int = 0
    width: int = 0
    height: int = 0

    def __post_init__(self):
        if not self.modules or not self.modules[0]:
            raise ValueError("Module matrix must not be empty.")
        symbol_width = len(self.modules[0])
        if any(len(row) != symbol_width for row in self.modules):
            raise ValueError("Module matrix rows must all have the same width.")
        if self.scale < 1 or self.left < 0 or self.top < 0:
            raise ValueError("Module matrix layout must be non-negative with scale >= 1.")

        # Unset dimensions default to the symbol plus equal padding on both sides
        if not self.width:
            object.__setattr__(self, "width", 2 * self.left + self.symbol_width * self.scale)
        if not self.height:
            object.__setattr__(self, "height", 2 * self.top + self.symbol_height * self.scale)
        if (
            self.left + self.symbol_width * self.scale > self.width
            or self.top + self.symbol_height * self.scale > self.height
        ):
            raise ValueError("Symbol does not fit inside the module matrix.")

    @property
    def symbol_width(self) -> int:
        return len(self.modules[0])

    @property
    def symbol_height(self) -> int:
        return len(self.modules)

    def get(self, x: int, y: int) -> bool:
        if x < self.left or y < self.top:
            return False
        module_x = (x - self.left) // self.scale
        module_y = (y - self.top) // self.scale
        if module_x >= self.symbol_width or module_y >= self.symbol_height:
            return False
        return self.modules[module_y][module_x]

    def dark_modules(self):
        """Yield ``(x, y)`` for every dark cell, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                if self.get(x, y):
                    yield x, y


def encode(
    data: str,
    width: int = 0,
    height: int = 0,
    margin: int = DEFAULT_MARGIN,
    error_correction: str = DEFAULT_ERROR_CORRECTION,
) -> ModuleMatrix:
    """Encode data as a QR code and lay it out on a ``width × height`` grid.

    A width or height of 0 means "natural size": one cell per module, plus
    the margin. Larger sizes scale each module to the largest whole-number
    block that fits and centre the symbol, leaving the remainder light.

    Args:
        data: The text to encode.
        width: Requested grid width in cells (pixels for raster output).
        height: Requested grid height in cells.
        margin: Quiet zone around the symbol, in modules.
        error_correction: One of ``L``, ``M``, ``Q``, ``H``.

    Returns:
        The module matrix, at least as large as the symbol plus margin.

    Raises:
        EncodeError: If the data is empty, too long for any QR version, or
            the layout arguments are invalid.
    """
    if not data:
        raise EncodeError("QR data cannot be empty.")
    if width < 0 or height < 0:
        raise EncodeError(f"Requested dimensions are negative: {width}x{height}")
    if margin < 0:
        raise EncodeError(f"Margin cannot be negative: {margin}")

    level = ERROR_CORRECTION_LEVELS.get(error_correction.upper())
    if level is None:
        raise EncodeError(f"Unknown error correction level: {error_correction}")

    qr = qrcode.QRCode(error_correction=level, border=0)
    qr.add_data(data)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        # qrcode 8 reports overflow as an invalid version 41
        raise EncodeError(
            f"Data too long for a QR code ({len(data)} characters, "
            f"error correction {error_correction.upper()})."
        ) from e

    return _layout(qr.get_matrix(), width, height, margin)


def _layout(modules, width: int, height: int, margin: int) -> ModuleMatrix:
    """Pick the module scale and centring offsets for the requested grid."""
    code_width = len(modules[0])
    code_height = len(modules)
    input_width = code_width + 2 * margin
    input_height = code_height + 2 * margin
    output_width = max(width, input_width)
    output_height = max(height, input_height)

    multiple = min(output_width // input_width, output_height // input_height)
    left = (output_width - code_width * multiple) // 2
    top = (output_height - code_height * multiple) // 2

    return ModuleMatrix(
        tuple(tuple(bool(cell) for cell in row) for row in modules),
        scale=multiple,
        left=left,
        top=top,
        width=output_width,
        height=output_height,
    )
