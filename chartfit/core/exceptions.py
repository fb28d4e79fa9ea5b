"""Exceptions raised by the ChartFit rendering pipeline."""

from __future__ import annotations


class ChartFitError(Exception):
    """Base exception for ChartFit errors."""

    pass


class InvalidSpecError(ChartFitError, ValueError):
    """The chart specification or its size parameters are structurally unusable."""

    pass


class RenderFailure(ChartFitError, RuntimeError):
    """The external chart renderer raised while rendering a specification."""

    pass
