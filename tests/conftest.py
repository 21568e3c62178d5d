"""Pytest bootstrap for local source imports.

Ensure ``import liveserver`` resolves to the package in this checkout even when
the ``pytest`` console script runs with a sys.path that excludes the root.
"""

import sys
from pathlib import Path

PROJECT_ROOT = str(Path(__file__).resolve().parent.parent)

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)
