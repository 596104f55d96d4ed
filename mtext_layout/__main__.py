"""
Entry point for running mtext_layout as a module.

Usage:
    python -m mtext_layout "{\\C1;Hello}\\PWorld" --font txt.json --output hello.pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
