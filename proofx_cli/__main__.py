"""
Module execution entry point.

Allows running with: python -m proofx_cli
"""

import sys
from proofx_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
