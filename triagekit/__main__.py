"""Allow ``python -m triagekit``."""

from __future__ import annotations

import sys

from triagekit.cli import main

sys.exit(main())
