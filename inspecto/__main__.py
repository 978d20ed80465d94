"""
Usage:
    python -m inspecto data.json
    python -m inspecto --help
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
