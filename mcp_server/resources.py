"""MCP resources describing ChartFit rendering defaults."""

from __future__ import annotations

import json
from typing import Any

from chartfit.core.config import get_settings
from chartfit.core.enums import InsightType
from chartfit.core.models import DEFAULT_PADDING
from chartfit.geometry.viewport import MARGIN_RATIO, MIN_MARGIN
from chartfit.render.coordinator import MAX_RENDER_ATTEMPTS, OVERFLOW_EPSILON


def get_render_defaults() -> dict[str, Any]:
    settings = get_settings()
    return {
        "renderer": settings.renderer,
        "default_width": settings.default_width,
        "default_height": settings.default_height,
        "padding": DEFAULT_PADDING.to_dict(),
        "max_render_attempts": MAX_RENDER_ATTEMPTS,
        "overflow_epsilon": OVERFLOW_EPSILON,
        "viewport_margin": {"min": MIN_MARGIN, "ratio": MARGIN_RATIO},
        "insight_types": [t.value for t in InsightType],
    }


def get_render_defaults_resource() -> str:
    """
    Rendering defaults used by the fitting pipeline.

    URI: chartfit://defaults
    """
    return json.dumps(get_render_defaults(), indent=2)
