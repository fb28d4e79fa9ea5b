"""ChartFit: fitted SVG output for declarative chart specifications."""

from __future__ import annotations

__version__ = "0.1.0"
