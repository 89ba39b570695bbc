"""Main entry point for running graphcalc_pkg as a module.

This allows running graphcalc with:
    python -m graphcalc_pkg "x^2" "sin(x)"
    python -m graphcalc_pkg --health-check
    python -m graphcalc_pkg "2√x" --ascii

This is equivalent to running:
    python -m graphcalc_pkg.cli
    graphcalc
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
