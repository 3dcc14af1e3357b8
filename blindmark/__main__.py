"""Allows ``python -m blindmark <command> [args]``."""

import sys

from src.cli import main

if __name__ == "__main__":
    sys.exit(main())
