"""
Module execution entry point.

Allows running with: python -m reviewproof_cli
"""

import sys
from reviewproof_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
