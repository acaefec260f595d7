"""Entry point for ``python -m walrus_mcp``."""

import sys

from walrus_mcp.cli import main

sys.exit(main())
