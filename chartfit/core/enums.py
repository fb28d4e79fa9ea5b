from __future__ import annotations

from enum import Enum


class ShapeKind(str, Enum):
    PATH = "path"
    CIRCLE = "circle"
    RECT = "rect"
    LINE = "line"
    TEXT = "text"


class InsightType(str, Enum):
    POPC = "popc"
    CURRENT_TREND = "currenttrend"
    UNUSUAL_CHANGE = "unusualchange"
    TOP_CONTRIBUTOR = "topcontributor"
    ALL = "all"


class RendererBackend(str, Enum):
    VL_CONVERT = "vl-convert"
