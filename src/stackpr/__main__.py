"""Allow running stackpr with ``python -m stackpr``."""

import sys

from stackpr.cli import main

if __name__ == "__main__":
	sys.exit(main())
