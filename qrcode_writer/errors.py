"""Error types, each bound to the process exit code the CLI reports."""

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_ENCODE = 2
EXIT_OUTPUT = 4


class QRCodeWriterError(Exception):
    """Base class for failures reported to the user."""

    exit_code = EXIT_USAGE


class UsageError(QRCodeWriterError):
    """Bad flags, wrong number of positionals or malformed option values."""

    exit_code = EXIT_USAGE


class ColourError(UsageError):
    """Raised when colour text is not valid RRGGBB or AARRGGBB hex."""


class EncodeError(QRCodeWriterError):
    """Raised when the datum cannot be represented as a QR code."""

    exit_code = EXIT_ENCODE


class OutputError(QRCodeWriterError):
    """Raised when the output file cannot be created or written."""

    exit_code = EXIT_OUTPUT
