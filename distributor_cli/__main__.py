"""
Module execution entry point.

Allows running with: python -m distributor_cli
"""

import sys
from distributor_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
