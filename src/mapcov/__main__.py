"""Allow ``python -m mapcov``."""

import sys

from mapcov.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
