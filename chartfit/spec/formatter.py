"""Rewrite lookup-map axis formatting into portable label expressions.

Analytics chart specifications label categorical axes through a side table,
``customFormatterMaps``, referenced from ``axis.format`` as
``{"custom": true, "mapName": "<name>"}``. Stock Vega-Lite renderers do not
understand that marker, so every such axis is rewritten to an equivalent
``labelExpr`` conditional chain and the side table is dropped.

Usage:
    from chartfit.spec.formatter import transform_spec

    portable = transform_spec(spec)  # spec itself is left untouched
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from ..core.exceptions import InvalidSpecError
from ..core.logging_config import get_logger

logger = get_logger(__name__)

FORMATTER_MAPS_KEY = "customFormatterMaps"
IDENTITY_EXPR = "datum.value"
AXIS_CHANNELS = ("x", "y")

# Keys holding lists of child view nodes, and keys holding a single child node
_CHILD_LIST_KEYS = ("layer", "hconcat", "vconcat", "concat")
_CHILD_NODE_KEYS = ("spec",)

_ESCAPES = (
    ("\\", "\\\\"),  # backslash first
    ("'", "\\'"),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def escape_expression_string(value: Any) -> str:
    """Escape a value for embedding in a single-quoted expression literal."""
    text = str(value)
    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return text


def build_label_expr(lookup: Mapping[Any, Any] | None) -> str:
    """Build a chained conditional that maps raw axis values to display strings.

    The chain is assembled from the last entry backward so the first entry of
    ``lookup`` is the first comparison evaluated. A missing map yields the
    identity expression.
    """
    if not lookup:
        return IDENTITY_EXPR

    expr = IDENTITY_EXPR
    for key, display in reversed(list(lookup.items())):
        expr = (
            f"datum.value === '{escape_expression_string(key)}' "
            f"? '{escape_expression_string(display)}' : {expr}"
        )
    return expr


def iter_layer_nodes(node: Mapping[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield ``node`` and every nested view node below it, depth first."""
    if not isinstance(node, Mapping):
        return
    yield node  # type: ignore[misc]
    for key in _CHILD_LIST_KEYS:
        children = node.get(key)
        if isinstance(children, list):
            for child in children:
                yield from iter_layer_nodes(child)
    for key in _CHILD_NODE_KEYS:
        child = node.get(key)
        if isinstance(child, Mapping):
            yield from iter_layer_nodes(child)


class LayerVisitor:
    """Apply a callback to every view node of a specification tree."""

    def __init__(self, visit: Callable[[dict[str, Any]], None]) -> None:
        self._visit = visit

    def walk(self, root: dict[str, Any]) -> int:
        count = 0
        for node in iter_layer_nodes(root):
            self._visit(node)
            count += 1
        return count


class FormatterTransformer:
    """Replace custom lookup-map axis formats with ``labelExpr`` chains."""

    def __init__(self, formatter_maps: Mapping[str, Mapping[Any, Any]] | None) -> None:
        self.formatter_maps = formatter_maps or {}
        self.rewritten = 0

    def label_expr_for(self, map_name: str | None) -> str:
        if map_name is None:
            return IDENTITY_EXPR
        if not isinstance(map_name, str):
            raise InvalidSpecError(
                f"Custom axis format 'mapName' must be a string, got {type(map_name).__name__}"
            )
        lookup = self.formatter_maps.get(map_name)
        if lookup is None:
            logger.debug("Formatter map not found, using identity", extra={"map_name": map_name})
        return build_label_expr(lookup)

    def visit(self, node: dict[str, Any]) -> None:
        encoding = node.get("encoding")
        if not isinstance(encoding, dict):
            return
        for channel in AXIS_CHANNELS:
            channel_def = encoding.get(channel)
            if not isinstance(channel_def, dict):
                continue
            axis = channel_def.get("axis")
            if not isinstance(axis, dict):
                continue
            fmt = axis.get("format")
            if not isinstance(fmt, dict) or not fmt.get("custom"):
                continue
            del axis["format"]
            axis["labelExpr"] = self.label_expr_for(fmt.get("mapName"))
            self.rewritten += 1


def transform_spec(spec: Mapping[str, Any]) -> dict[str, Any]:
    """Return a portable copy of ``spec`` with no lookup-map formatting.

    Args:
        spec: Vega-Lite style chart specification, optionally carrying a
            top-level ``customFormatterMaps`` table

    Returns:
        A new specification; ``spec`` is never mutated

    Raises:
        InvalidSpecError: If ``spec`` is not a mapping
    """
    if not isinstance(spec, Mapping):
        raise InvalidSpecError(
            f"Chart specification must be a JSON object, got {type(spec).__name__}"
        )

    transformed: dict[str, Any] = copy.deepcopy(dict(spec))
    formatter_maps = transformed.pop(FORMATTER_MAPS_KEY, None)
    if formatter_maps is not None and not isinstance(formatter_maps, Mapping):
        raise InvalidSpecError(f"'{FORMATTER_MAPS_KEY}' must be an object of lookup maps")
    for name, lookup in (formatter_maps or {}).items():
        if not isinstance(lookup, Mapping):
            raise InvalidSpecError(
                f"Lookup map '{name}' in '{FORMATTER_MAPS_KEY}' must be an object, "
                f"got {type(lookup).__name__}"
            )

    transformer = FormatterTransformer(formatter_maps)
    visited = LayerVisitor(transformer.visit).walk(transformed)
    logger.debug(
        "Transformed chart specification",
        extra={"nodes_visited": visited, "axes_rewritten": transformer.rewritten},
    )
    return transformed
