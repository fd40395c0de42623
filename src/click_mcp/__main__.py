"""Entry point for ``python -m click_mcp``."""

import sys

from click_mcp.cli import main

sys.exit(main())
