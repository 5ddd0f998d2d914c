"""Render a module matrix as a Pillow bitmap or an SVG document."""

import xml.etree.ElementTree as ET

from PIL import Image

from qrcode_writer.colour import Colour
from qrcode_writer.encoder import ModuleMatrix

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def render_image(
    matrix: ModuleMatrix,
    foreground: Colour,
    background: Colour,
) -> Image.Image:
    """Paint the matrix, one pixel per matrix cell.

    Dark cells take the foreground colour, light cells the background. The
    image is RGB when both colours are opaque and RGBA otherwise. The symbol
    is painted at one pixel per module, enlarged by the matrix scale and
    pasted at the matrix offset, so the result has exactly the matrix size.
    """
    if foreground.is_opaque and background.is_opaque:
        mode = "RGB"
        dark, light = foreground.rgba[:3], background.rgba[:3]
    else:
        mode = "RGBA"
        dark, light = foreground.rgba, background.rgba

    symbol = Image.new(mode, (matrix.symbol_width, matrix.symbol_height), light)
    symbol.putdata([dark if cell else light for row in matrix.modules for cell in row])
    if matrix.scale > 1:
        symbol = symbol.resize(
            (matrix.symbol_width * matrix.scale, matrix.symbol_height * matrix.scale),
            Image.NEAREST,
        )

    image = Image.new(mode, (matrix.width, matrix.height), light)
    image.paste(symbol, (matrix.left, matrix.top))
    return image


def render_svg(matrix: ModuleMatrix, foreground: Colour) -> ET.ElementTree:
    """Build an SVG with one filled 1x1 square per dark module.

    Light modules draw nothing and there is no background rectangle, so the
    canvas shows through.
    """
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NAMESPACE,
            "version": "1.1",
            "width": str(matrix.width),
            "height": str(matrix.height),
            "viewBox": f"0 0 {matrix.width} {matrix.height}",
            "shape-rendering": "crispEdges",
        },
    )

    fill = {"fill": foreground.hex}
    if not foreground.is_opaque:
        fill["fill-opacity"] = f"{foreground.opacity:.4g}"

    for x, y in matrix.dark_modules():
        ET.SubElement(
            root,
            "rect",
            {"x": str(x), "y": str(y), "width": "1", "height": "1", **fill},
        )

    return ET.ElementTree(root)
