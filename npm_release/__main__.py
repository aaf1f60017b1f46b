"""Allow ``python -m npm_release``."""

import sys

from .cli import main

sys.exit(main())
