"""Measure-and-correct render loop.

Renders a sized chart specification, compares the renderer's reported bounds
with its view size, and grows the padding box by the overflow on each side
until nothing overflows or the attempt budget runs out. Running out of
attempts is not an error: the last markup is used as-is.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Mapping
from typing import Any

from ..core.exceptions import InvalidSpecError, RenderFailure
from ..core.logging_config import get_logger
from ..core.models import (
    DEFAULT_PADDING,
    BoxPadding,
    RenderAttempt,
    RenderOutcome,
    RenderResult,
    ReportedBounds,
)
from .backends import ChartRenderer

logger = get_logger(__name__)

MAX_RENDER_ATTEMPTS = 3
OVERFLOW_EPSILON = 1.0


def coerce_dimension(value: Any, name: str) -> float:
    """Coerce a requested size to a number of at least 1 pixel."""
    if isinstance(value, bool):
        raise InvalidSpecError(f"Invalid {name}: {value!r}. Must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidSpecError(f"Invalid {name}: {value!r}. Must be a number") from e
    if not math.isfinite(number):
        raise InvalidSpecError(f"Invalid {name}: {value!r}. Must be a number")
    number = max(1.0, number)
    return int(number) if number.is_integer() else number


def compute_overflow(
    bounds: ReportedBounds | None,
    view_width: float,
    view_height: float,
    epsilon: float = OVERFLOW_EPSILON,
) -> BoxPadding | None:
    """Per-side amount by which ``bounds`` exceed ``[0, w] x [0, h]``.

    Each overflowing side gets ``epsilon`` added. Returns None when bounds are
    absent or nothing overflows.
    """
    if bounds is None:
        return None

    left = -bounds.x1 + epsilon if bounds.x1 < 0 else 0.0
    top = -bounds.y1 + epsilon if bounds.y1 < 0 else 0.0
    right = bounds.x2 - view_width + epsilon if bounds.x2 > view_width else 0.0
    bottom = bounds.y2 - view_height + epsilon if bounds.y2 > view_height else 0.0

    overflow = BoxPadding(top=top, bottom=bottom, left=left, right=right)
    return None if overflow.is_zero() else overflow


def is_step_height(height: Any) -> bool:
    return isinstance(height, Mapping) and height.get("step") is not None


def prepare_spec(spec: Mapping[str, Any], width: Any, height: Any) -> dict[str, Any]:
    """Size a copy of ``spec`` and force pad-style autosizing with full bounds."""
    if not isinstance(spec, Mapping):
        raise InvalidSpecError(
            f"Chart specification must be a JSON object, got {type(spec).__name__}"
        )
    sized: dict[str, Any] = copy.deepcopy(dict(spec))
    sized["width"] = coerce_dimension(width, "width")
    # Step-based heights size rows by category count and are left alone
    if not is_step_height(sized.get("height")):
        sized["height"] = coerce_dimension(height, "height")

    autosize = sized.get("autosize")
    if not isinstance(autosize, Mapping):
        autosize = {}
    sized["autosize"] = {**autosize, "type": "pad", "contains": "padding"}
    sized["bounds"] = "full"
    return sized


class RenderCoordinator:
    """Drive a bounded render loop against an injected renderer."""

    def __init__(
        self,
        renderer: ChartRenderer,
        max_attempts: int = MAX_RENDER_ATTEMPTS,
        overflow_epsilon: float = OVERFLOW_EPSILON,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.renderer = renderer
        self.max_attempts = max_attempts
        self.overflow_epsilon = overflow_epsilon

    async def render(
        self,
        spec: Mapping[str, Any],
        width: Any,
        height: Any,
        padding: float | Mapping[str, Any] | BoxPadding | None = None,
    ) -> RenderOutcome:
        """Render ``spec`` at ``width`` x ``height``, expanding padding on overflow.

        Args:
            spec: Chart specification (already free of custom formatters)
            width: Requested width in pixels (coerced to >= 1)
            height: Requested height in pixels (coerced to >= 1)
            padding: Initial padding override; defaults to the spec's own
                padding merged over DEFAULT_PADDING

        Returns:
            RenderOutcome with the final markup and every attempt made

        Raises:
            InvalidSpecError: If the spec or dimensions are unusable
            RenderFailure: If the renderer raises (not retried)
        """
        sized = prepare_spec(spec, width, height)
        initial = padding if padding is not None else sized.get("padding")
        current = BoxPadding.normalize(initial, DEFAULT_PADDING)

        outcome = RenderOutcome(markup="")
        for attempt in range(1, self.max_attempts + 1):
            sized["padding"] = current.to_dict()
            result = await self._render_once(sized)

            outcome.markup = result.markup
            outcome.attempts.append(
                RenderAttempt(
                    padding=current,
                    markup=result.markup,
                    bounds=result.bounds,
                    view_width=result.view_width,
                    view_height=result.view_height,
                )
            )

            overflow = compute_overflow(
                result.bounds, result.view_width, result.view_height, self.overflow_epsilon
            )
            logger.debug(
                "Render attempt complete",
                extra={
                    "attempt": attempt,
                    "padding": current.to_dict(),
                    "overflow": overflow.to_dict() if overflow else None,
                },
            )
            if overflow is None:
                outcome.converged = True
                break
            current = current + overflow

        if not outcome.converged:
            logger.warning(
                "Render loop did not converge; using last attempt",
                extra={
                    "attempts": len(outcome.attempts),
                    "final_padding": outcome.final_padding.to_dict(),
                },
            )
        return outcome

    async def _render_once(self, spec: dict[str, Any]) -> RenderResult:
        try:
            # Each attempt hands the renderer a private copy
            return await self.renderer.render(copy.deepcopy(spec))
        except RenderFailure:
            raise
        except Exception as e:
            logger.error(
                "Renderer failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise RenderFailure(str(e)) from e
