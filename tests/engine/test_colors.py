"""Test color parsing, interpolation and formatting."""

import pytest

pytestmark = pytest.mark.unit

from maptheme.contracts import InvalidColorError, ThemeConfigError
from maptheme.engine.colors import format_color, interpolate_rgba, parse_color, round_half_up, to_unit_rgba


class TestParseColor:

    @pytest.mark.parametrize("text, expected", [
        ("#ff0000", (255, 0, 0, 1.0)),
        ("#F00", (255, 0, 0, 1.0)),
        ("#00ff0080", (0, 255, 0, 128 / 255)),
        ("white", (255, 255, 255, 1.0)),
        ("rgb(10, 20, 30)", (10, 20, 30, 1.0)),
        ("rgba(10, 20, 30, 0.5)", (10, 20, 30, 0.5)),
        ("rgb(100%, 0%, 50%)", (255, 0, 128, 1.0)),
        ("rgb(10 20 30 / 25%)", (10, 20, 30, 0.25)),
        ("hsl(0, 100%, 50%)", (255, 0, 0, 1.0)),
        ("hsla(240, 100%, 50%, 0.5)", (0, 0, 255, 0.5)),
        ("transparent", (0, 0, 0, 0.0)),
        ("  #000000  ", (0, 0, 0, 1.0)),
    ])
    def test_css_forms(self, text, expected):
        r, g, b, a = parse_color(text)
        assert (r, g, b) == expected[:3]
        assert a == pytest.approx(expected[3])

    @pytest.mark.parametrize("text", ["not-a-color", "#ggg", "rgb(1, 2)", "hsl(a, b, c)"])
    def test_invalid(self, text):
        with pytest.raises(InvalidColorError):
            parse_color(text)

    def test_invalid_color_is_a_config_error(self):
        with pytest.raises(ThemeConfigError):
            parse_color("nope")


class TestInterpolation:

    def test_round_half_up(self):
        assert round_half_up(127.5) == 128
        assert round_half_up(126.5) == 127
        assert round_half_up(0.49) == 0

    def test_midpoint(self):
        assert interpolate_rgba((0, 0, 0, 1.0), (255, 255, 255, 1.0), 0.5) == (128, 128, 128, 1.0)

    def test_endpoints(self):
        lo, hi = (10, 20, 30, 1.0), (200, 100, 0, 0.0)
        assert interpolate_rgba(lo, hi, 0.0) == lo
        assert interpolate_rgba(lo, hi, 1.0) == hi

    def test_alpha_interpolates_linearly(self):
        assert interpolate_rgba((0, 0, 0, 0.0), (0, 0, 0, 1.0), 0.25)[3] == pytest.approx(0.25)

    def test_t_is_clamped(self):
        assert interpolate_rgba((0, 0, 0, 1.0), (255, 255, 255, 1.0), 2.0) == (255, 255, 255, 1.0)


class TestFormatColor:

    def test_opaque_hex(self):
        assert format_color((128, 128, 128, 1.0)) == "#808080"

    def test_translucent_rgba(self):
        assert format_color((255, 0, 0, 0.5)) == "rgba(255, 0, 0, 0.5)"

    def test_unit_rgba(self):
        assert to_unit_rgba((255, 0, 51, 0.5)) == (1.0, 0.0, 0.2, 0.5)
