"""
Effect conversion and reference resolution.

Two resolution targets exist for a layer's effect slot:

- render: ``resolve_reference`` + ``to_render_config`` collapse any variant
  into an ``EffectConfig`` (or None for "no effect")
- edit: ``resolve_editable`` always yields an ``EditorLayerEffect``; a
  render-ready config cannot be decomposed and is replaced by a fresh
  disabled default

None of these functions raise; a dangling shared reference resolves to a
default effect.
"""

from typing import Optional, Union

from holocard.defaults import create_default_effect
from holocard.gradient import compile_params, format_number
from holocard.models import (
    BackgroundSource,
    CardScheme,
    EditorGradientSource,
    EditorLayer,
    EditorLayerEffect,
    EffectConfig,
    MaskMode,
    ParallaxLayer,
    PosAxisConfig,
)

EffectObject = Union[EditorLayerEffect, EffectConfig]


def compute_pos_axis(axis: PosAxisConfig) -> str:
    """Render one position axis (``50%``, ``var(--x)`` or ``calc(var(--x) * f)``)."""
    if axis.mode == 'var':
        return f"var({axis.variable})"
    if axis.mode == 'calc':
        return f"calc(var({axis.variable}) * {format_number(axis.calc_factor)})"
    return axis.value


def compute_source_size(source: EditorGradientSource) -> str:
    if source.size_mode == 'keyword':
        return source.size_keyword
    return f"{format_number(source.size_w)}% {format_number(source.size_h)}%"


def compute_source_position(source: EditorGradientSource) -> str:
    if source.pos_mode == 'preset':
        return source.pos_preset
    return f"{compute_pos_axis(source.pos_x)} {compute_pos_axis(source.pos_y)}"


def source_to_background(source: EditorGradientSource) -> BackgroundSource:
    """
    Convert an editable source into a render-ready background source.

    Empty size/position/repeat/blend strings are omitted.

    Args:
        source: Editable source

    Returns:
        BackgroundSource with the image URL or compiled gradient parameters
    """
    if source.source_type == 'image':
        source_type = 'image'
        value = source.image_url
    else:
        source_type = source.gradient_config.type
        value = compile_params(source.gradient_config)

    return BackgroundSource(
        type=source_type,
        value=value,
        size=compute_source_size(source) or None,
        position=compute_source_position(source) or None,
        repeat=source.repeat or None,
        blend_mode=source.blend_mode or None,
    )


def to_render_config(value: EffectObject) -> Optional[EffectConfig]:
    """
    Collapse an effect object into a render-ready config.

    A render-ready config is returned unchanged unless it has no layers.
    An editable effect yields None when disabled or without sources.

    Args:
        value: Editable effect or render-ready config

    Returns:
        EffectConfig, or None meaning "no effect to apply"
    """
    if isinstance(value, EffectConfig):
        if not value.layers:
            return None
        return value

    if not value.enabled or not value.sources:
        return None

    return EffectConfig(
        layers=[source_to_background(source) for source in value.sources],
        opacity=value.opacity / 100,
        mix_blend_mode=value.mix_blend_mode or None,
        filter=value.filter or None,
        mask=value.mask or None,
    )


def resolve_reference(value: Union[EffectObject, str], scheme: CardScheme) -> EffectObject:
    """
    Resolve a layer effect slot value.

    Strings are looked up in ``scheme.shared_effects``; the shared effect
    itself is returned so edits apply to every referencing layer. A dangling
    reference yields a fresh disabled default. Objects are returned as is.
    """
    if isinstance(value, str):
        shared = scheme.get_shared_effect(value)
        if shared is None:
            return create_default_effect()
        return shared.effect
    return value


def resolve_editable(value: Union[EffectObject, str], scheme: CardScheme) -> EditorLayerEffect:
    """Resolve a slot value for the editing surface (always editable)."""
    resolved = resolve_reference(value, scheme)
    if isinstance(resolved, EditorLayerEffect):
        return resolved
    # Render-ready configs cannot be decomposed for editing
    return create_default_effect()


def layer_mask(layer: EditorLayer) -> Optional[str]:
    """
    Resolve a layer's mask descriptor.

    Returns:
        ``"full"``, the custom mask URL, or None (automatic / no mask)
    """
    if layer.mask_mode == MaskMode.FULL.value:
        return 'full'
    if layer.mask_mode == MaskMode.CUSTOM.value:
        return layer.mask_url or None
    return None


def _copied_render_config(value: Union[EffectObject, str], scheme: CardScheme) -> Optional[EffectConfig]:
    config = to_render_config(resolve_reference(value, scheme))
    return config.model_copy(deep=True) if config is not None else None


def to_parallax_layer(layer: EditorLayer, scheme: CardScheme) -> ParallaxLayer:
    """Build the render-ready record of one layer."""
    return ParallaxLayer(
        id=layer.id,
        img=layer.img,
        z_height=layer.z_height,
        mask=layer_mask(layer),
        shine_effects=_copied_render_config(layer.shine, scheme),
        glare_effects=_copied_render_config(layer.glare, scheme),
    )


def to_parallax_layers(scheme: CardScheme) -> list[ParallaxLayer]:
    """
    Map a scheme to the render-ready layer records handed to the renderer.

    Hidden layers are skipped. Effects are deep copies, so renderers never
    hold references into the document.
    """
    return [to_parallax_layer(layer, scheme) for layer in scheme.layers if layer.visible]
