"""Tests for the gradient compiler."""

import pytest

from holocard.gradient import (
    GradientConfig,
    GradientStop,
    GradientType,
    compile_function,
    compile_params,
    format_number,
    hex_to_rgb,
)


def _config(gradient_type, angle=45, stops=None):
    return GradientConfig(
        type=gradient_type,
        angle=angle,
        stops=stops if stops is not None else [
            GradientStop(id=1, color='#FF0000', position=0, alpha=100),
            GradientStop(id=2, color='#0000FF', position=100, alpha=50),
        ],
    )


class TestHexToRgb:
    """Tests for hex color parsing."""

    def test_six_digits(self):
        assert hex_to_rgb('#FF8000') == (255, 128, 0)

    def test_three_digits(self):
        """Short form expands each digit."""
        assert hex_to_rgb('#abc') == (170, 187, 204)

    def test_hash_is_optional(self):
        assert hex_to_rgb('ffffff') == (255, 255, 255)

    @pytest.mark.parametrize('color', ['red', '#GGGGGG', '#12345', 'rgba(0,0,0,1)', ''])
    def test_not_hex(self, color):
        assert hex_to_rgb(color) is None


class TestFormatNumber:

    def test_integral_float(self):
        assert format_number(50.0) == '50'

    def test_fraction(self):
        assert format_number(12.5) == '12.5'

    def test_int(self):
        assert format_number(7) == '7'


class TestCompileParams:
    """Tests for gradient parameter compilation."""

    def test_linear_prefix(self):
        config = _config(GradientType.LINEAR, angle=90)
        assert compile_params(config) == '90deg, rgba(255, 0, 0, 1.00) 0%, rgba(0, 0, 255, 0.50) 100%'

    def test_repeating_linear_uses_angle(self):
        config = _config(GradientType.REPEATING_LINEAR, angle=135)
        assert compile_params(config).startswith('135deg, ')

    @pytest.mark.parametrize('gradient_type', [GradientType.RADIAL, GradientType.REPEATING_RADIAL])
    def test_radial_prefix(self, gradient_type):
        """Radial kinds ignore the angle."""
        config = _config(gradient_type, angle=90)
        assert compile_params(config).startswith('circle, rgba(255, 0, 0, 1.00) 0%')

    @pytest.mark.parametrize('gradient_type', [GradientType.CONIC, GradientType.REPEATING_CONIC])
    def test_conic_prefix(self, gradient_type):
        config = _config(gradient_type, angle=30)
        assert compile_params(config).startswith('from 30deg, ')

    def test_stops_sorted_by_position(self):
        config = _config(GradientType.LINEAR, stops=[
            GradientStop(id=1, color='#000000', position=80, alpha=100),
            GradientStop(id=2, color='#FFFFFF', position=20, alpha=100),
        ])
        assert compile_params(config) == '45deg, rgba(255, 255, 255, 1.00) 20%, rgba(0, 0, 0, 1.00) 80%'

    def test_equal_positions_keep_order(self):
        config = _config(GradientType.LINEAR, stops=[
            GradientStop(id=1, color='#000000', position=50, alpha=100),
            GradientStop(id=2, color='#FFFFFF', position=50, alpha=100),
        ])
        params = compile_params(config)
        assert params.index('rgba(0, 0, 0') < params.index('rgba(255, 255, 255')

    def test_alpha_two_decimals(self):
        config = _config(GradientType.LINEAR, stops=[
            GradientStop(id=1, color='#FFFFFF', position=0, alpha=33.333),
        ])
        assert compile_params(config) == '45deg, rgba(255, 255, 255, 0.33) 0%'

    def test_unparseable_color_passes_through(self):
        """Non-hex colors are emitted verbatim, never an error."""
        config = _config(GradientType.LINEAR, stops=[
            GradientStop(id=1, color='hsl(10, 50%, 50%)', position=25, alpha=10),
        ])
        assert compile_params(config) == '45deg, hsl(10, 50%, 50%) 25%'

    def test_fractional_position(self):
        config = _config(GradientType.LINEAR, stops=[
            GradientStop(id=1, color='#000000', position=12.5, alpha=0),
        ])
        assert compile_params(config) == '45deg, rgba(0, 0, 0, 0.00) 12.5%'

    def test_no_stops(self):
        assert compile_params(_config(GradientType.LINEAR, angle=10, stops=[])) == '10deg, '


class TestCompileFunction:

    def test_wraps_params(self):
        config = _config(GradientType.RADIAL)
        assert compile_function(config) == f"radial-gradient({compile_params(config)})"

    def test_default_config(self):
        """Default gradient type is serialized as its CSS name."""
        assert compile_function(GradientConfig()) == 'linear-gradient(45deg, )'
