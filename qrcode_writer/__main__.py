"""Allow ``python -m qrcode_writer``."""

import sys

from qrcode_writer.cli import main

sys.exit(main())
