"""
Entry point for ``python -m listing_hub.cli``.

Usage:
    python -m listing_hub.cli --archive data/data.zip --output public
"""

import sys

from listing_hub.cli.build import main

if __name__ == "__main__":
    sys.exit(main())
