"""Output path handling, file writing and scan verification."""

import os
import xml.etree.ElementTree as ET
from enum import Enum

from PIL import Image, ImageOps

from qrcode_writer import DEFAULT_OUTPUTS
from qrcode_writer.errors import OutputError


class VerifyResult(Enum):
    """Result of QR scannability verification."""
    SCANNABLE = "scannable"
    NOT_SCANNABLE = "not_scannable"
    SKIPPED = "skipped"  # pyzbar not installed


def resolve_output_path(path: str, image_format: str) -> str:
    """Return the file to write, using the default filename inside directories."""
    if os.path.isdir(path):
        return os.path.join(path, DEFAULT_OUTPUTS[image_format])
    return path


def check_writable(path: str) -> None:
    """Fail early if the output file cannot be created or replaced.

    Raises:
        OutputError: If the parent directory is missing or read-only, or the
            file exists and is not writable.
    """
    parent = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(parent):
        raise OutputError(f"Directory does not exist: {parent}")
    if os.path.exists(path):
        if os.path.isdir(path):
            raise OutputError(f"Output path is a directory: {path}")
        if not os.access(path, os.W_OK):
            raise OutputError(f"Cannot write file {path}")
    elif not os.access(parent, os.W_OK):
        raise OutputError(f"Cannot write to directory {parent}")


def write_png(image: Image.Image, path: str) -> str:
    """Save a rendered bitmap as PNG and return the path."""
    check_writable(path)
    try:
        with open(path, "wb") as fh:
            image.save(fh, "PNG")
    except OSError as e:
        raise OutputError(f"{path}: {e}") from e
    return path


def write_svg(tree: ET.ElementTree, path: str) -> str:
    """Serialise an SVG element tree as UTF-8 and return the path."""
    check_writable(path)
    try:
        with open(path, "wb") as fh:
            tree.write(fh, encoding="utf-8", xml_declaration=True)
    except OSError as e:
        raise OutputError(f"{path}: {e}") from e
    return path


def _with_quiet_zone(img: Image.Image) -> Image.Image:
    """Flatten onto white and add a light border so readers can lock on."""
    img = img.convert("RGBA")
    flat = Image.new("RGBA", img.size, (255, 255, 255, 255))
    flat = Image.alpha_composite(flat, img).convert("RGB")
    border = max(8, max(flat.size) // 4)
    return ImageOps.expand(flat, border=border, fill=(255, 255, 255))


def verify_qr_scannable(image_path: str) -> tuple[VerifyResult, str | None]:
    """Attempt to decode the QR code from a written PNG.

    Uses pyzbar if available, otherwise returns SKIPPED.

    Args:
        image_path: Path to the image to verify.

    Returns:
        Tuple of (VerifyResult, decoded_data: str | None).
    """
    try:
        from pyzbar.pyzbar import decode as pyzbar_decode
    except ImportError:
        return VerifyResult.SKIPPED, None

    try:
        with Image.open(image_path) as img:
            results = pyzbar_decode(_with_quiet_zone(img))
    except Exception:
        return VerifyResult.NOT_SCANNABLE, None

    if results:
        decoded = results[0].data.decode("utf-8", errors="replace")
        return VerifyResult.SCANNABLE, decoded
    return VerifyResult.NOT_SCANNABLE, None
