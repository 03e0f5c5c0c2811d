"""Console Entry Point - Root Module.

Lets the monitor run from a checkout with `python main.py [-q MAG] [-l LAT LON] [test]`.
It imports from the envmonitor package.
"""

import sys

from envmonitor.main import main


if __name__ == "__main__":
    sys.exit(main())
