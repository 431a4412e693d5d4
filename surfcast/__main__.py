"""Allow running as ``python -m surfcast``."""

import sys

from surfcast.cli import main

sys.exit(main())
