"""CLI entrypoint for navguard."""

from __future__ import annotations

import sys

from navguard.cli import main

if __name__ == "__main__":
    sys.exit(main())
