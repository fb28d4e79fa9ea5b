"""Geometry package for measuring and fitting rendered SVG charts.

This package recomputes where a rendered chart's marks actually are, straight
from the emitted SVG markup, and rewrites the document's visible region so that
nothing is cropped. It is independent of the renderer's own layout report.

Key Capabilities:
    1. Path-data parsing (M, L, H, V, C, Q, Z, absolute and relative)
    2. Per-shape boxes for path, circle, rect, line and approximate text
    3. Nested group translation tracking
    4. viewBox rewriting with margin, canvas union and origin clamping

Main Components:
    - GeometryExtractor / extract_content_bounds: content bounds from markup
    - fit_viewport: viewBox rewrite for a document and its content bounds

Usage:
    from chartfit.geometry import extract_content_bounds, fit_viewport

    bounds = extract_content_bounds(svg)
    fitted = fit_viewport(svg, bounds)

Limitations:
    - Only translate() transforms are modeled; rotate/scale/skew are ignored
    - Text extents are estimated from font size and character count
    - Arc (A) and shorthand curve (S, T) path commands contribute no points
"""

from __future__ import annotations

from .extractor import GeometryExtractor, extract_content_bounds
from .viewport import compute_viewport, fit_viewport, parse_svg_attributes

__all__ = [
    "GeometryExtractor",
    "compute_viewport",
    "extract_content_bounds",
    "fit_viewport",
    "parse_svg_attributes",
]
