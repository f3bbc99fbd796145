"""Entry point: python -m hllcount"""

import sys

from hllcount.cli import main

if __name__ == "__main__":
    sys.exit(main())
