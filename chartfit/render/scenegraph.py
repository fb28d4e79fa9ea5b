"""Self-reported layout bounds from a Vega scenegraph.

vl-convert exposes the laid-out Vega scenegraph (``vega_to_scenegraph``) as
nested marks and items. Each group item positions its child marks relative to
its own ``x``/``y``; the root group sits at the view ``origin``. Item
``bounds``, when present, are the engine's own boxes in the enclosing group's
coordinates. Items without bounds contribute their laid-out geometry: the
``x``/``y`` anchor, ``width``/``height`` extents and rule end points. Text
glyph extents and rotations are the engine's concern and are not re-estimated
here.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from ..core.models import ReportedBounds


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if math.isfinite(value) else None


class _Accumulator:
    def __init__(self) -> None:
        self.bounds: ReportedBounds | None = None

    def add(self, x1: float, y1: float, x2: float, y2: float) -> None:
        x1, x2 = min(x1, x2), max(x1, x2)
        y1, y2 = min(y1, y2), max(y1, y2)
        if self.bounds is None:
            self.bounds = ReportedBounds(x1, y1, x2, y2)
            return
        b = self.bounds
        self.bounds = ReportedBounds(min(b.x1, x1), min(b.y1, y1), max(b.x2, x2), max(b.y2, y2))


def _visit_mark(mark: Mapping[str, Any], ox: float, oy: float, acc: _Accumulator) -> None:
    is_group = mark.get("marktype") == "group"
    for item in mark.get("items") or []:
        if not isinstance(item, Mapping):
            continue
        x = ox + (_number(item.get("x")) or 0.0)
        y = oy + (_number(item.get("y")) or 0.0)

        own = item.get("bounds")
        reported = ReportedBounds.from_mapping(own) if isinstance(own, Mapping) else None
        if reported is not None:
            acc.add(ox + reported.x1, oy + reported.y1, ox + reported.x2, oy + reported.y2)
        else:
            width = _number(item.get("width"))
            height = _number(item.get("height"))
            x2 = _number(item.get("x2"))
            y2 = _number(item.get("y2"))
            acc.add(
                x,
                y,
                x + width if width is not None else (ox + x2 if x2 is not None else x),
                y + height if height is not None else (oy + y2 if y2 is not None else y),
            )

        if is_group:
            for child in item.get("items") or []:
                if isinstance(child, Mapping):
                    _visit_mark(child, x, y, acc)


def scenegraph_bounds(scenegraph: Mapping[str, Any]) -> ReportedBounds | None:
    """Bounds of every laid-out item in document coordinates, or None if empty.

    Args:
        scenegraph: ``vega_to_scenegraph`` output with ``scenegraph`` (the root
            mark) and ``origin`` (``[x, y]`` translation of the root group)
    """
    root = scenegraph.get("scenegraph")
    if not isinstance(root, Mapping):
        return None

    origin = scenegraph.get("origin") or (0, 0)
    try:
        ox = _number(origin[0]) or 0.0
        oy = _number(origin[1]) or 0.0
    except (IndexError, KeyError, TypeError):
        ox = oy = 0.0

    acc = _Accumulator()
    _visit_mark(root, ox, oy, acc)
    return acc.bounds
