import xml.etree.ElementTree as ET

import pytest
import qrcode
from PIL import Image

from qrcode_writer.cli import create_parser, main, resolve_config
from qrcode_writer.colour import Opaque, WithAlpha
from qrcode_writer.errors import EXIT_ENCODE, EXIT_OK, EXIT_OUTPUT, EXIT_USAGE, UsageError
from qrcode_writer.render import SVG_NAMESPACE


@pytest.fixture(autouse=True)
def in_tmp_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def colours(image):
    return {colour for _, colour in image.getcolors()}


def test_hello_with_defaults(tmp_path):
    assert main(["HELLO"]) == EXIT_OK

    with Image.open(tmp_path / "out.png") as img:
        assert img.size == (300, 300)
        assert img.mode == "RGB"
        assert colours(img) == {(0, 0, 0), (255, 255, 255)}
        assert img.getpixel((0, 0)) == (255, 255, 255)
        assert img.getpixel((3, 3)) == (0, 0, 0)


def test_test_as_green_svg(tmp_path):
    assert main(["-f", "svg", "-c", "0x00FF00", "TEST"]) == EXIT_OK

    root = ET.parse(tmp_path / "out.svg").getroot()
    assert root.tag == f"{{{SVG_NAMESPACE}}}svg"
    children = list(root)
    assert children
    assert all(child.tag == f"{{{SVG_NAMESPACE}}}rect" for child in children)
    assert {child.get("fill") for child in children} == {"#00ff00"}
    assert {(child.get("width"), child.get("height")) for child in children} == {("1", "1")}

    xs = [int(child.get("x")) for child in children]
    ys = [int(child.get("y")) for child in children]
    assert (min(xs), max(xs) + 1) == (0, 21)
    assert (min(ys), max(ys) + 1) == (0, 21)


def test_svg_format_is_inferred_from_output_suffix(tmp_path):
    assert main(["-o", "code.svg", "TEST"]) == EXIT_OK
    assert (tmp_path / "code.svg").read_bytes().startswith(b"<?xml")
    assert not (tmp_path / "out.png").exists()


def test_requested_dimensions(tmp_path):
    assert main(["-w", "100", "-h", "50", "-o", "small.png", "HELLO"]) == EXIT_OK
    with Image.open(tmp_path / "small.png") as img:
        assert img.size == (100, 50)


def test_long_option_names(tmp_path):
    argv = ["--width", "64", "--height", "64", "--output", "long.png", "--colour", "FF0000", "HELLO"]
    assert main(argv) == EXIT_OK
    with Image.open(tmp_path / "long.png") as img:
        assert colours(img) == {(255, 0, 0), (255, 255, 255)}


def test_alpha_colour_defaults_to_transparent_background(tmp_path):
    assert main(["-c", "0x80FF0000", "HELLO"]) == EXIT_OK
    with Image.open(tmp_path / "out.png") as img:
        assert img.mode == "RGBA"
        assert colours(img) == {(255, 0, 0, 128), (255, 255, 255, 0)}


def test_explicit_background(tmp_path):
    assert main(["-b", "0xFFFF00", "HELLO"]) == EXIT_OK
    with Image.open(tmp_path / "out.png") as img:
        assert colours(img) == {(0, 0, 0), (255, 255, 0)}


def test_output_directory_gets_default_filename(tmp_path):
    (tmp_path / "codes").mkdir()
    assert main(["-o", "codes", "HELLO"]) == EXIT_OK
    assert (tmp_path / "codes" / "out.png").is_file()


@pytest.mark.parametrize("argv", [[], ["HELLO", "WORLD"]])
def test_wrong_positional_count_is_a_usage_error(tmp_path, capsys, argv):
    assert main(argv) == EXIT_USAGE
    err = capsys.readouterr().err
    assert "DATUM" in err
    assert "usage: qrcode" in err
    assert list(tmp_path.iterdir()) == []


def test_help_prints_usage_and_writes_nothing(tmp_path, capsys):
    assert main(["--help"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "usage: qrcode [OPTIONS] DATUM" in out
    assert "--height" in out
    assert list(tmp_path.iterdir()) == []


def test_help_short_circuits_encoding(tmp_path):
    assert main(["--help", "x" * 4000]) == EXIT_OK
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize(
    "argv",
    [
        ["-c", "0x1234567", "HELLO"],
        ["-c", "green", "HELLO"],
        ["-w", "0", "HELLO"],
        ["-h", "abc", "HELLO"],
        ["-f", "gif", "HELLO"],
        ["--bogus", "HELLO"],
    ],
)
def test_bad_options_are_usage_errors(tmp_path, capsys, argv):
    assert main(argv) == EXIT_USAGE
    assert "Error:" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []


def test_data_too_long_is_an_encode_error(tmp_path, capsys):
    assert main(["x" * 4000]) == EXIT_ENCODE
    assert "Could not create QR code from data" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []


def test_missing_directory_is_an_output_error(capsys):
    assert main(["-o", "missing/out.png", "HELLO"]) == EXIT_OUTPUT
    err = capsys.readouterr().err
    assert "Could not save QR code to file" in err
    assert "missing" in err


def test_quiet(capsys):
    assert main(["-q", "HELLO"]) == EXIT_OK
    assert capsys.readouterr().out == ""


def test_version():
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0


def test_verify_without_pyzbar(capsys, no_pyzbar):
    assert main(["--verify", "HELLO"]) == EXIT_OK
    assert "Verification skipped" in capsys.readouterr().out


def test_verify_failure_only_warns(capsys, fake_pyzbar):
    assert main(["--verify", "HELLO"]) == EXIT_OK
    assert "may not be scannable" in capsys.readouterr().err


def test_verify_success(capsys, fake_pyzbar):
    fake_pyzbar.decoded = ["HELLO"]
    assert main(["--verify", "HELLO"]) == EXIT_OK
    assert "Decoded: HELLO" in capsys.readouterr().out


def test_resolve_config_defaults():
    config = resolve_config(create_parser().parse_args(["HELLO"]))
    assert config.data == "HELLO"
    assert config.output == "out.png"
    assert config.image_format == "png"
    assert (config.width, config.height) == (300, 300)
    assert config.foreground == Opaque(0x000000)
    assert config.background == Opaque(0xFFFFFF)
    assert config.margin == 0
    assert config.error_correction == "L"


def test_resolve_config_svg_defaults():
    config = resolve_config(create_parser().parse_args(["-f", "svg", "-c", "00000000", "TEST"]))
    assert config.output == "out.svg"
    assert isinstance(config.foreground, WithAlpha)


def test_parser_raises_usage_error_instead_of_exiting():
    with pytest.raises(UsageError):
        create_parser().parse_args(["-w", "-5", "HELLO"])


def reference_modules(data):
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_L, border=0)
    qr.add_data(data)
    qr.make(fit=True)
    return [[bool(cell) for cell in row] for row in qr.get_matrix()]


def test_hello_png_matches_the_encoded_symbol(tmp_path):
    assert main(["-q", "HELLO"]) == EXIT_OK
    expected = reference_modules("HELLO")
    size = len(expected)

    # 14 pixels per module, 3 pixels of padding on each side
    with Image.open(tmp_path / "out.png") as img:
        symbol = img.crop((3, 3, 3 + 14 * size, 3 + 14 * size)).resize((size, size), Image.NEAREST)
    decoded = [[symbol.getpixel((x, y)) == (0, 0, 0) for x in range(size)] for y in range(size)]
    assert decoded == expected


def test_test_svg_matches_the_encoded_symbol(tmp_path):
    assert main(["-q", "-f", "svg", "TEST"]) == EXIT_OK
    expected = {
        (x, y)
        for y, row in enumerate(reference_modules("TEST"))
        for x, dark in enumerate(row)
        if dark
    }

    root = ET.parse(tmp_path / "out.svg").getroot()
    assert {(int(rect.get("x")), int(rect.get("y"))) for rect in root} == expected


def test_large_image(tmp_path):
    assert main(["-q", "-w", "4000", "-h", "4000", "HELLO"]) == EXIT_OK
    with Image.open(tmp_path / "out.png") as img:
        assert img.size == (4000, 4000)
