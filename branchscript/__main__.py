"""Entry point for ``python -m branchscript``."""

import sys

from branchscript.engine import main

sys.exit(main())
