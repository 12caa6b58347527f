"""Allow ``python -m lazydata``."""

import sys

from lazydata.cli import main

sys.exit(main())
