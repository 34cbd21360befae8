"""
Effects Module

Conversion of layer effects into render-ready configs, shared-effect
reference resolution, and the built-in preset registry.
"""

from .presets import (
    EffectPreset,
    clone_preset_effect,
    get_available_presets,
    get_preset,
    preset_registry,
)
from .resolve import (
    compute_pos_axis,
    compute_source_position,
    compute_source_size,
    layer_mask,
    resolve_editable,
    resolve_reference,
    source_to_background,
    to_parallax_layer,
    to_parallax_layers,
    to_render_config,
)

__all__ = [
    # Conversion
    'compute_pos_axis',
    'compute_source_position',
    'compute_source_size',
    'source_to_background',
    'to_render_config',
    'layer_mask',
    'to_parallax_layer',
    'to_parallax_layers',
    # Resolution
    'resolve_reference',
    'resolve_editable',
    # Presets
    'EffectPreset',
    'preset_registry',
    'get_preset',
    'get_available_presets',
    'clone_preset_effect',
]
