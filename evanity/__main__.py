"""Entry point for python -m evanity."""

import sys

from evanity.cli import main

if __name__ == "__main__":
    sys.exit(main())
