"""Entry point for flakegen. Intended to be run as a module:

    python -m flakegen myapp python -p ruff,mypy > flake.nix

or via the `flakegen` console script.
"""

from __future__ import annotations

import sys

from flakegen.cli import main

if __name__ == "__main__":
    sys.exit(main())
