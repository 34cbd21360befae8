"""
Gradient compiler.

Turns a structured gradient description (type, angle, color stops) into the
CSS text consumed by the card renderer:

- ``compile_params``: the bare parameter list, e.g.
  ``"45deg, rgba(255, 255, 255, 0.00) 0%, rgba(255, 255, 255, 0.80) 50%"``
- ``compile_function``: the full function call, e.g.
  ``"linear-gradient(45deg, ...)"``

Both are permissive: a color that is not a hex string is passed through as is.
"""

import re
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GradientType(str, Enum):
    """CSS gradient functions supported by the card renderer."""
    LINEAR = "linear-gradient"
    RADIAL = "radial-gradient"
    CONIC = "conic-gradient"
    REPEATING_LINEAR = "repeating-linear-gradient"
    REPEATING_RADIAL = "repeating-radial-gradient"
    REPEATING_CONIC = "repeating-conic-gradient"


GRADIENT_TYPES: frozenset[str] = frozenset(t.value for t in GradientType)

_RADIAL_TYPES = {GradientType.RADIAL.value, GradientType.REPEATING_RADIAL.value}
_CONIC_TYPES = {GradientType.CONIC.value, GradientType.REPEATING_CONIC.value}

_HEX_RE = re.compile(r'^#?([0-9a-f]{3}|[0-9a-f]{6})$', re.IGNORECASE)


class GradientStop(BaseModel):
    """A single color stop. ``position`` and ``alpha`` are percentages."""
    id: int = Field(default=1)
    color: str = Field(default='#FFFFFF')
    position: Union[int, float] = Field(default=0)
    alpha: Union[int, float] = Field(default=100)

    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class GradientConfig(BaseModel):
    """
    Structured gradient description.

    ``angle`` is the direction for linear kinds and the start rotation for
    conic kinds; radial kinds ignore it. Stops may be stored in any order.
    """
    type: GradientType = Field(default=GradientType.LINEAR.value)
    angle: Union[int, float] = Field(default=45)
    stops: list[GradientStop] = Field(default_factory=list)

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
        use_enum_values=True,
    )


def format_number(value: Union[int, float]) -> str:
    """Format a number the way the card renderer prints it (``50`` not ``50.0``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def hex_to_rgb(color: str) -> Optional[tuple[int, int, int]]:
    """
    Parse ``#RGB`` / ``#RRGGBB`` (leading ``#`` optional).

    Returns:
        (r, g, b) tuple, or None if the string is not a hex color
    """
    match = _HEX_RE.match(color.strip())
    if not match:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = ''.join(c * 2 for c in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def is_radial(gradient_type: str) -> bool:
    return gradient_type in _RADIAL_TYPES


def is_conic(gradient_type: str) -> bool:
    return gradient_type in _CONIC_TYPES


def _stop_color(stop: GradientStop) -> str:
    rgb = hex_to_rgb(stop.color)
    if rgb is None:
        return stop.color
    r, g, b = rgb
    return f"rgba({r}, {g}, {b}, {stop.alpha / 100:.2f})"


def _stop_string(config: GradientConfig) -> str:
    # sorted() is stable: equal positions keep their stored order
    stops = sorted(config.stops, key=lambda s: s.position)
    return ', '.join(f"{_stop_color(s)} {format_number(s.position)}%" for s in stops)


def compile_params(config: GradientConfig) -> str:
    """
    Compile the parameter list of a gradient (without the function name).

    Args:
        config: Gradient description

    Returns:
        Parameter string, e.g. ``"circle, rgba(0, 0, 0, 1.00) 0%"``
    """
    stops = _stop_string(config)
    if is_radial(config.type):
        return f"circle, {stops}"
    if is_conic(config.type):
        return f"from {format_number(config.angle)}deg, {stops}"
    return f"{format_number(config.angle)}deg, {stops}"


def compile_function(config: GradientConfig) -> str:
    """Compile the full CSS function call, e.g. ``linear-gradient(45deg, ...)``."""
    return f"{config.type}({compile_params(config)})"
