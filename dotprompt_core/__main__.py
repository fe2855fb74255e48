"""Allow ``python -m dotprompt_core``."""

import sys

from .cli import main

sys.exit(main())
