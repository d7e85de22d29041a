from __future__ import annotations

import sys

from .cli_main import main

sys.exit(main())
