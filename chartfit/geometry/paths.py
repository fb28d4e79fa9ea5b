"""Bounding boxes for SVG path data.

Supported commands are M, L, H, V, C, Q and Z (lowercase forms are relative to
the current pen position). Curves contribute their control points as well as
their end points, so the box always contains the true curve extent. Arcs and
shorthand curves (A, S, T) are consumed without contributing points.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

_TOKEN_RE = re.compile(
    r"(?P<cmd>[A-Za-z])|(?P<num>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)"
)

Point = tuple[float, float]


def tokenize_path(d: str) -> Iterator[tuple[str, list[float]]]:
    """Split path data into ``(command, numbers)`` runs.

    Numbers appearing before the first command are dropped.
    """
    command: str | None = None
    args: list[float] = []
    for match in _TOKEN_RE.finditer(d):
        if match.group("cmd"):
            if command is not None:
                yield command, args
            command = match.group("cmd")
            args = []
        elif command is not None:
            args.append(float(match.group("num")))
    if command is not None:
        yield command, args


def path_points(d: str) -> list[Point]:
    """Return every point the pen visits, including curve control points."""
    points: list[Point] = []
    x = y = 0.0

    for command, args in tokenize_path(d):
        relative = command.islower()
        op = command.upper()

        if op in ("M", "L"):
            for i in range(0, len(args) - 1, 2):
                if relative:
                    x, y = x + args[i], y + args[i + 1]
                else:
                    x, y = args[i], args[i + 1]
                points.append((x, y))
        elif op == "H":
            for value in args:
                x = x + value if relative else value
                points.append((x, y))
        elif op == "V":
            for value in args:
                y = y + value if relative else value
                points.append((x, y))
        elif op == "C":
            for i in range(0, len(args) - 5, 6):
                ox, oy = (x, y) if relative else (0.0, 0.0)
                points.append((ox + args[i], oy + args[i + 1]))
                points.append((ox + args[i + 2], oy + args[i + 3]))
                x, y = ox + args[i + 4], oy + args[i + 5]
                points.append((x, y))
        elif op == "Q":
            for i in range(0, len(args) - 3, 4):
                ox, oy = (x, y) if relative else (0.0, 0.0)
                points.append((ox + args[i], oy + args[i + 1]))
                x, y = ox + args[i + 2], oy + args[i + 3]
                points.append((x, y))
        elif op == "Z":
            if points:
                x, y = points[0]
                points.append((x, y))
        # Anything else (A, S, T, ...) is skipped

    return points


def path_extent(d: str) -> tuple[float, float, float, float] | None:
    """Return ``(min_x, min_y, max_x, max_y)`` for path data, or None if empty."""
    points = path_points(d)
    if not points:
        return None
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return min(xs), min(ys), max(xs), max(ys)
