"""Entry point for ``python -m booking_ical``."""

import sys

from booking_ical.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
