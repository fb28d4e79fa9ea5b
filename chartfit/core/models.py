from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .enums import ShapeKind
from .exceptions import InvalidSpecError


@dataclass(frozen=True)
class BoxPadding:
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def normalize(
        cls,
        value: float | int | Mapping[str, Any] | BoxPadding | None,
        fallback: BoxPadding | None = None,
    ) -> BoxPadding:
        """Build a padding box from a scalar, a partial mapping or nothing.

        A scalar applies to all four sides. Sides missing from a mapping come
        from ``fallback`` (``DEFAULT_PADDING`` when omitted). Negative values
        are clamped to 0.
        """
        base = fallback if fallback is not None else DEFAULT_PADDING
        if isinstance(value, BoxPadding):
            value = value.to_dict()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            side = max(0.0, float(value))
            return cls(top=side, bottom=side, left=side, right=side)
        if not isinstance(value, Mapping):
            value = {}

        def _side(name: str) -> float:
            raw = value.get(name)
            if raw is None:
                raw = getattr(base, name)
            if isinstance(raw, bool):
                raise InvalidSpecError(f"Invalid padding '{name}': {raw!r}. Must be a number")
            try:
                return max(0.0, float(raw))
            except (TypeError, ValueError) as e:
                raise InvalidSpecError(
                    f"Invalid padding '{name}': {raw!r}. Must be a number"
                ) from e

        return cls(
            top=_side("top"),
            bottom=_side("bottom"),
            left=_side("left"),
            right=_side("right"),
        )

    def __add__(self, other: BoxPadding) -> BoxPadding:
        return BoxPadding(
            top=self.top + other.top,
            bottom=self.bottom + other.bottom,
            left=self.left + other.left,
            right=self.right + other.right,
        )

    def is_zero(self) -> bool:
        return not (self.top or self.bottom or self.left or self.right)

    def to_dict(self) -> dict[str, float]:
        return {
            "top": self.top,
            "bottom": self.bottom,
            "left": self.left,
            "right": self.right,
        }


# Right side is wider to leave room for trailing axis labels
DEFAULT_PADDING = BoxPadding(top=8, bottom=12, left=12, right=28)


@dataclass(frozen=True)
class ReportedBounds:
    """Bounding box self-reported by the renderer after layout."""

    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ReportedBounds | None:
        if not data:
            return None
        try:
            return cls(
                x1=float(data["x1"]),
                y1=float(data["y1"]),
                x2=float(data["x2"]),
                y2=float(data["y2"]),
            )
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class RenderResult:
    """One response from the external renderer."""

    markup: str
    bounds: ReportedBounds | None
    view_width: float
    view_height: float


@dataclass(frozen=True)
class RenderAttempt:
    padding: BoxPadding
    markup: str
    bounds: ReportedBounds | None
    view_width: float
    view_height: float


@dataclass(frozen=True)
class TransformFrame:
    """Cumulative translation at one level of a nested group stack."""

    tx: float = 0.0
    ty: float = 0.0

    def compose(self, other: TransformFrame) -> TransformFrame:
        return TransformFrame(tx=self.tx + other.tx, ty=self.ty + other.ty)


@dataclass(frozen=True)
class ShapeBox:
    kind: ShapeKind
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def translated(self, frame: TransformFrame) -> ShapeBox:
        return ShapeBox(
            kind=self.kind,
            min_x=self.min_x + frame.tx,
            min_y=self.min_y + frame.ty,
            max_x=self.max_x + frame.tx,
            max_y=self.max_y + frame.ty,
        )


@dataclass(frozen=True)
class ContentBounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def union(self, box: ShapeBox | ContentBounds) -> ContentBounds:
        return ContentBounds(
            min_x=min(self.min_x, box.min_x),
            min_y=min(self.min_y, box.min_y),
            max_x=max(self.max_x, box.max_x),
            max_y=max(self.max_y, box.max_y),
        )

    @classmethod
    def from_boxes(cls, boxes: Iterable[ShapeBox]) -> ContentBounds | None:
        result: ContentBounds | None = None
        for box in boxes:
            if result is None:
                result = cls(box.min_x, box.min_y, box.max_x, box.max_y)
            else:
                result = result.union(box)
        return result

    def to_dict(self) -> dict[str, float]:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }


def format_number(value: float) -> str:
    """Format a coordinate for an SVG attribute (no trailing ``.0``)."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class Viewport:
    min_x: float
    min_y: float
    width: float
    height: float

    def __str__(self) -> str:
        return " ".join(
            format_number(v) for v in (self.min_x, self.min_y, self.width, self.height)
        )


@dataclass(frozen=True)
class SvgAttributes:
    width: float | None = None
    height: float | None = None
    view_box: str | None = None


@dataclass
class RenderOutcome:
    """Result of the measure-and-correct loop."""

    markup: str
    attempts: list[RenderAttempt] = field(default_factory=list)
    converged: bool = False

    @property
    def final_padding(self) -> BoxPadding | None:
        return self.attempts[-1].padding if self.attempts else None
