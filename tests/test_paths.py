"""Tests for SVG path data parsing."""

from __future__ import annotations

import pytest

from chartfit.geometry.paths import path_extent, path_points, tokenize_path


def test_tokenize_compact_numbers():
    tokens = list(tokenize_path("M10-5L.5.5"))
    assert tokens == [("M", [10.0, -5.0]), ("L", [0.5, 0.5])]


def test_absolute_lines():
    assert path_extent("M10,10 L20,30") == (10, 10, 20, 30)


def test_relative_commands_accumulate():
    # (10,10) -> (15,15) -> (25,15) -> (25,-5)
    assert path_extent("m10 10 l5 5 h10 v-20") == (10, -5, 25, 15)


def test_horizontal_and_vertical_absolute():
    assert path_extent("M0,0 H50 V-20") == (0, -20, 50, 0)


def test_cubic_control_points_included():
    assert path_extent("M0,0 C10,-10 20,30 30,0") == (0, -10, 30, 30)


def test_relative_quadratic():
    # control (15,-10), end (20,10)
    assert path_extent("M10,10 q5,-20 10,0") == (10, -10, 20, 10)


def test_close_path_returns_to_start():
    points = path_points("M5,5 L10,10 Z")
    assert points[-1] == (5, 5)


def test_implicit_lineto_after_moveto():
    assert path_extent("M0,0 10,10 20,-5") == (0, -5, 20, 10)


def test_exponent_notation():
    assert path_extent("M1e1,2") == (10, 2, 10, 2)


def test_arc_commands_are_skipped():
    assert path_extent("M0,0 A5,5 0 0 1 100,100 L10,10") == (0, 0, 10, 10)


@pytest.mark.parametrize("d", ["", "A5,5 0 0 1 10,10", "M10", "garbage"])
def test_no_points_yields_none(d):
    assert path_extent(d) is None
