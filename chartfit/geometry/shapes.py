"""Per-element bounding boxes for the SVG shapes emitted by chart renderers."""

from __future__ import annotations

import html
import re

from ..core.enums import ShapeKind
from ..core.models import ShapeBox, TransformFrame
from .paths import path_extent

DEFAULT_FONT_SIZE = 14.0

# Text metrics are estimates; no glyph data is available
TEXT_CHAR_WIDTH = 0.6
TEXT_EMPTY_HALF_WIDTH = 5.0
TEXT_ASCENT = 1.2
TEXT_DESCENT = 0.5

_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_TRANSLATE_RE = re.compile(
    r"translate\(\s*([^,)\s]+)(?:\s*,\s*|\s+)?([^,)\s]+)?\s*\)"
)


def get_attribute(attributes: str, name: str) -> str | None:
    """Read one attribute value from a raw tag attribute string."""
    match = re.search(
        rf"(?:^|\s){re.escape(name)}\s*=\s*(\"([^\"]*)\"|'([^']*)')", attributes
    )
    if not match:
        return None
    return match.group(2) if match.group(2) is not None else match.group(3)


def parse_number(value: str | None) -> float | None:
    """Parse the leading number of an attribute value (``"10px"`` -> 10.0)."""
    if value is None:
        return None
    match = _NUMBER_RE.match(value)
    return float(match.group(1)) if match else None


def number_attribute(attributes: str, name: str) -> float | None:
    return parse_number(get_attribute(attributes, name))


def coordinate(attributes: str, name: str) -> float:
    """Coordinate attribute; absent or unparsable values are 0 as in SVG."""
    value = number_attribute(attributes, name)
    return 0.0 if value is None else value


def parse_translate(transform: str | None) -> TransformFrame:
    """Translation part of a transform attribute; other transforms are ignored."""
    if not transform:
        return TransformFrame()
    match = _TRANSLATE_RE.search(transform)
    if not match:
        return TransformFrame()
    tx = parse_number(match.group(1)) or 0.0
    ty = parse_number(match.group(2)) or 0.0
    return TransformFrame(tx=tx, ty=ty)


def path_box(attributes: str) -> ShapeBox | None:
    d = get_attribute(attributes, "d")
    if not d:
        return None
    extent = path_extent(d)
    if extent is None:
        return None
    return ShapeBox(ShapeKind.PATH, *extent)


def circle_box(attributes: str) -> ShapeBox | None:
    r = number_attribute(attributes, "r")
    if r is None:
        return None
    cx = coordinate(attributes, "cx")
    cy = coordinate(attributes, "cy")
    return ShapeBox(ShapeKind.CIRCLE, cx - r, cy - r, cx + r, cy + r)


def rect_box(attributes: str) -> ShapeBox | None:
    width = number_attribute(attributes, "width")
    height = number_attribute(attributes, "height")
    if width is None or height is None:
        return None
    x = coordinate(attributes, "x")
    y = coordinate(attributes, "y")
    return ShapeBox(ShapeKind.RECT, x, y, x + width, y + height)


def line_box(attributes: str) -> ShapeBox:
    x1, y1 = coordinate(attributes, "x1"), coordinate(attributes, "y1")
    x2, y2 = coordinate(attributes, "x2"), coordinate(attributes, "y2")
    return ShapeBox(ShapeKind.LINE, min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))


def text_box(attributes: str, content: str | None = None) -> ShapeBox:
    """Approximate box for a text element, centered horizontally on ``x``.

    The half-width scales with character count when the text content is known,
    and falls back to a fixed multiple of the font size otherwise.
    """
    x = coordinate(attributes, "x")
    y = coordinate(attributes, "y")
    font_size = number_attribute(attributes, "font-size") or DEFAULT_FONT_SIZE

    chars = len(html.unescape(content).strip()) if content else 0
    if chars:
        half_width = TEXT_CHAR_WIDTH * chars * font_size
    else:
        half_width = TEXT_EMPTY_HALF_WIDTH * font_size

    return ShapeBox(
        ShapeKind.TEXT,
        x - half_width,
        y - TEXT_ASCENT * font_size,
        x + half_width,
        y + TEXT_DESCENT * font_size,
    )
