"""Allow ``python -m cargo_sponsor``."""

from __future__ import annotations

import sys

from cargo_sponsor.cli import main

sys.exit(main())
