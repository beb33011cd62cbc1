"""digitspin – intersected digit solids that read correctly from two sides."""

from __future__ import annotations

import os

__all__ = ["__version__"]

__version__ = "0.1.0"

# Allow VTK to load side-by-side libs without crashing.
os.environ.setdefault("VTK_PYTHON_ALLOW_DUPLICATE_LIBS", "1")
