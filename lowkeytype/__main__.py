"""
LowkeyType - terminal typing test
Allows the package to be run with: python -m lowkeytype
"""

import sys

from .app import main

if __name__ == "__main__":
    sys.exit(main())
