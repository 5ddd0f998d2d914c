"""CLI entry point for qrcode-writer."""

import argparse
import os
import sys
from dataclasses import dataclass

from qrcode_writer import (
    DEFAULT_ERROR_CORRECTION,
    DEFAULT_FOREGROUND,
    DEFAULT_HEIGHT,
    DEFAULT_MARGIN,
    DEFAULT_OUTPUTS,
    DEFAULT_WIDTH,
    OPAQUE_WHITE,
    TRANSPARENT_WHITE,
    __version__,
)
from qrcode_writer.colour import Colour, WithAlpha, from_argb, parse_colour
from qrcode_writer.errors import (
    EXIT_OK,
    ColourError,
    EncodeError,
    OutputError,
    UsageError,
)

FORMATS = ("png", "svg")


@dataclass(frozen=True)
class RenderConfig:
    """Everything needed to encode and write one QR code."""
    data: str
    output: str
    image_format: str = "png"
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    foreground: Colour = from_argb(DEFAULT_FOREGROUND)
    background: Colour = from_argb(OPAQUE_WHITE)
    margin: int = DEFAULT_MARGIN
    error_correction: str = DEFAULT_ERROR_CORRECTION
    verify: bool = False


class _ArgumentParser(argparse.ArgumentParser):
    """Report parse failures as UsageError instead of exiting with code 2."""

    def error(self, message):
        raise UsageError(message)


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: '{text}'")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return value


def _colour(text: str) -> Colour:
    try:
        return parse_colour(text)
    except ColourError as e:
        raise argparse.ArgumentTypeError(str(e))


def create_parser() -> argparse.ArgumentParser:
    # -h is --height, so argparse's own -h/--help is replaced by a bare --help
    parser = _ArgumentParser(
        prog="qrcode",
        usage="%(prog)s [OPTIONS] DATUM",
        description="Encode DATUM as a QR code and write it to a PNG or SVG file.",
        add_help=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 300x300 black on white PNG in ./out.png
  qrcode "HELLO"

  # Green SVG, one unit square per module
  qrcode -f svg -c 0x00FF00 "TEST"

  # Semi-transparent red on a transparent background
  qrcode -c 0x80FF0000 -w 600 -h 600 -o red.png "https://example.com"

Exit codes: 0 success, 1 usage error, 2 encoding failure, 4 output failure.
        """,
    )

    parser.add_argument("data", nargs="*", metavar="DATUM", help="text to encode")

    parser.add_argument(
        "-o", "--output",
        metavar="FILENAME",
        default=None,
        help="file to write to; a directory gets out.png/out.svg inside it "
             "(default: out.png, or out.svg for SVG)",
    )
    parser.add_argument(
        "-f", "--format",
        choices=FORMATS,
        default=None,
        help="image format (default: from the output suffix, else png)",
    )
    parser.add_argument(
        "-w", "--width",
        metavar="WIDTH",
        type=_positive_int,
        default=DEFAULT_WIDTH,
        help=f"image width in pixels, PNG only (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "-h", "--height",
        metavar="HEIGHT",
        type=_positive_int,
        default=DEFAULT_HEIGHT,
        help=f"image height in pixels, PNG only (default: {DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "-c", "--colour",
        metavar="COLOUR",
        type=_colour,
        default=None,
        help="module colour as 0xRRGGBB or 0xAARRGGBB (default: 0x000000)",
    )
    parser.add_argument(
        "-b", "--background",
        metavar="COLOUR",
        type=_colour,
        default=None,
        help="background colour, PNG only (default: opaque white, or "
             "transparent white when --colour has an alpha channel)",
    )
    parser.add_argument(
        "-e", "--error-correction",
        type=str.upper,
        choices=("L", "M", "Q", "H"),
        default=DEFAULT_ERROR_CORRECTION,
        help=f"error correction level (default: {DEFAULT_ERROR_CORRECTION})",
    )

    parser.add_argument(
        "--verify",
        action="store_true",
        help="decode the written PNG to check it scans (needs pyzbar)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="only print errors",
    )
    parser.add_argument("--help", action="store_true", help="print this message")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def _infer_format(output: str | None) -> str:
    if output and os.path.splitext(output)[1].lower() == ".svg":
        return "svg"
    return "png"


def resolve_config(args: argparse.Namespace) -> RenderConfig:
    """Apply defaults to parsed arguments.

    Raises:
        UsageError: If there is not exactly one DATUM.
    """
    from qrcode_writer.output import resolve_output_path

    if len(args.data) != 1:
        raise UsageError(f"expected exactly one DATUM, got {len(args.data)}")

    image_format = args.format or _infer_format(args.output)
    output = resolve_output_path(args.output or DEFAULT_OUTPUTS[image_format], image_format)

    foreground = args.colour
    if foreground is None:
        foreground = from_argb(DEFAULT_FOREGROUND)
    background = args.background
    if background is None:
        alpha_aware = isinstance(foreground, WithAlpha)
        background = from_argb(TRANSPARENT_WHITE if alpha_aware else OPAQUE_WHITE)

    return RenderConfig(
        data=args.data[0],
        output=output,
        image_format=image_format,
        width=args.width,
        height=args.height,
        foreground=foreground,
        background=background,
        error_correction=args.error_correction,
        verify=args.verify,
    )


def write_qr_code(config: RenderConfig) -> str:
    """Encode, render and write one QR code; return the written path.

    Raises:
        EncodeError: If the data cannot be encoded.
        OutputError: If the file cannot be written.
    """
    from qrcode_writer.encoder import encode
    from qrcode_writer.output import write_png, write_svg
    from qrcode_writer.render import render_image, render_svg

    if config.image_format == "svg":
        # Natural size: one SVG unit per module
        matrix = encode(config.data, 0, 0, config.margin, config.error_correction)
        return write_svg(render_svg(matrix, config.foreground), config.output)

    matrix = encode(
        config.data, config.width, config.height, config.margin, config.error_correction
    )
    image = render_image(matrix, config.foreground, config.background)
    return write_png(image, config.output)


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()

    try:
        args = parser.parse_args(argv)
        if args.help:
            parser.print_help()
            return EXIT_OK
        config = resolve_config(args)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return e.exit_code

    def status(message: str) -> None:
        if not args.quiet:
            print(message)

    status(f"Encoding {len(config.data)} characters as {config.image_format.upper()}")

    try:
        output_path = write_qr_code(config)
    except EncodeError as e:
        print(f"Could not create QR code from data ({e})", file=sys.stderr)
        return e.exit_code
    except OutputError as e:
        print(f"Could not save QR code to file ({e})", file=sys.stderr)
        return e.exit_code

    status(f"  ✓ Saved: {output_path}")

    if config.verify:
        from qrcode_writer.output import VerifyResult, verify_qr_scannable

        if config.image_format != "png":
            status("  ⊘ Verification skipped (only PNG output can be decoded)")
        else:
            result, decoded = verify_qr_scannable(output_path)
            if result == VerifyResult.SCANNABLE:
                status(f"  ✓ QR code is SCANNABLE! Decoded: {decoded}")
            elif result == VerifyResult.SKIPPED:
                status("  ⊘ Verification skipped (pyzbar not installed)")
                status("    Install with: pip install pyzbar")
            else:
                print(
                    "  ⚠️  WARNING: QR code may not be scannable. "
                    "Try a larger --width/--height or a darker --colour.",
                    file=sys.stderr,
                )

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
