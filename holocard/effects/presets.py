"""Built-in effect presets."""

import time
from dataclasses import dataclass
from typing import Any, Optional

from holocard.gradient import GradientConfig, GradientStop
from holocard.models import EditorGradientSource, EditorLayerEffect, PosAxisConfig

RAINBOW_FILTER = 'brightness(calc((var(--glare-opacity) * 0.25) + 0.66)) contrast(2) saturate(0.95)'


@dataclass
class EffectPreset:
    """A named, ready-made editable effect."""

    id: str
    display_name: str
    category: str  # 'shine' | 'glare' | 'both'
    effect: EditorLayerEffect


def _stops(*stops: tuple[str, float, float]) -> list[GradientStop]:
    return [
        GradientStop(id=index, color=color, position=position, alpha=alpha)
        for index, (color, position, alpha) in enumerate(stops, start=1)
    ]


def _gradient_source(source_id: int, gradient_type: str, angle: float, stops: list[GradientStop], **overrides) -> EditorGradientSource:
    return EditorGradientSource(
        id=source_id,
        gradient_config=GradientConfig(type=gradient_type, angle=angle, stops=stops),
        **overrides,
    )


def _axis(mode: str, variable: str, value: str = '50%') -> PosAxisConfig:
    return PosAxisConfig(mode=mode, value=value, variable=variable, calc_factor=1)


def _split(width: int, height: int) -> dict[str, Any]:
    return {'size_mode': 'split', 'size_w': width, 'size_h': height}


_PRESETS = [
    EffectPreset(
        id='rainbow-holo',
        display_name='Rainbow Holo',
        category='shine',
        effect=EditorLayerEffect(
            enabled=True,
            sources=[
                _gradient_source(
                    1, 'repeating-linear-gradient', 45,
                    _stops(('#FD4741', 0, 100), ('#FFF397', 14, 100), ('#A8FF5F', 28, 100),
                           ('#83FFF7', 42, 100), ('#4BC6FF', 57, 100), ('#FF49F6', 71, 100),
                           ('#FF3831', 85, 100)),
                    pos_x=_axis('value', '--pointer-x', value='0%'),
                    pos_y=_axis('calc', '--pointer-y'),
                    blend_mode='soft-light',
                    **_split(500, 500),
                ),
                _gradient_source(
                    2, 'repeating-linear-gradient', 135,
                    _stops(('#592E50', 0, 50), ('#8FD4A0', 25, 100), ('#DF60CA', 50, 100),
                           ('#55C9C9', 75, 100), ('#0E152E', 100, 50)),
                    pos_x=_axis('calc', '--pointer-x'),
                    pos_y=_axis('calc', '--pointer-y'),
                    blend_mode='normal',
                    **_split(1000, 1000),
                ),
            ],
            opacity=80,
            filter=RAINBOW_FILTER,
        ),
    ),
    EffectPreset(
        id='metallic-sheen',
        display_name='Metallic Sheen',
        category='shine',
        effect=EditorLayerEffect(
            enabled=True,
            sources=[
                _gradient_source(
                    1, 'linear-gradient', 135,
                    _stops(('#2C2C2C', 0, 60), ('#C0C0C0', 30, 90), ('#FFFFFF', 50, 100),
                           ('#C0C0C0', 70, 90), ('#2C2C2C', 100, 60)),
                    blend_mode='overlay',
                    **_split(300, 300),
                ),
            ],
            opacity=70,
            filter='contrast(1.3) brightness(1.1)',
        ),
    ),
    EffectPreset(
        id='simple-highlight',
        display_name='Simple Highlight',
        category='shine',
        effect=EditorLayerEffect(
            enabled=True,
            sources=[
                _gradient_source(
                    1, 'linear-gradient', 120,
                    _stops(('#FFFFFF', 0, 0), ('#FFFFFF', 45, 60), ('#FFFFFF', 55, 60),
                           ('#FFFFFF', 100, 0)),
                    blend_mode='overlay',
                    **_split(200, 200),
                ),
            ],
            opacity=60,
        ),
    ),
    EffectPreset(
        id='radial-glare',
        display_name='Radial Glare',
        category='glare',
        effect=EditorLayerEffect(
            enabled=True,
            sources=[
                _gradient_source(
                    1, 'radial-gradient', 0,
                    _stops(('#FFFFFF', 10, 80), ('#FFFFFF', 20, 65), ('#000000', 90, 50)),
                ),
            ],
            opacity=100,
            mix_blend_mode='overlay',
        ),
    ),
    EffectPreset(
        id='gold-foil',
        display_name='Gold Foil',
        category='shine',
        effect=EditorLayerEffect(
            enabled=True,
            sources=[
                _gradient_source(
                    1, 'linear-gradient', 135,
                    _stops(('#B8860B', 0, 70), ('#FFD700', 25, 100), ('#FFA500', 50, 90),
                           ('#FFD700', 75, 100), ('#B8860B', 100, 70)),
                    blend_mode='color-dodge',
                    **_split(400, 400),
                ),
                _gradient_source(
                    2, 'radial-gradient', 0,
                    _stops(('#FFFFFF', 0, 40), ('#FFD700', 50, 20), ('#000000', 100, 0)),
                    blend_mode='overlay',
                ),
            ],
            opacity=75,
            filter='saturate(1.5) brightness(1.1)',
        ),
    ),
    EffectPreset(
        id='neon-glow',
        display_name='Neon Glow',
        category='shine',
        effect=EditorLayerEffect(
            enabled=True,
            sources=[
                _gradient_source(
                    1, 'linear-gradient', 90,
                    _stops(('#FF00FF', 0, 0), ('#00FFFF', 33, 80), ('#FF00FF', 66, 80),
                           ('#00FFFF', 100, 0)),
                    blend_mode='screen',
                    **_split(300, 300),
                ),
            ],
            opacity=65,
            filter='brightness(1.2) saturate(1.8)',
        ),
    ),
]

# Registry for lookup by id
preset_registry: dict[str, EffectPreset] = {preset.id: preset for preset in _PRESETS}


def get_preset(preset_id: str) -> Optional[EffectPreset]:
    """Get a preset by id, or None if unknown."""
    return preset_registry.get(preset_id)


def get_available_presets(category: Optional[str] = None) -> list[EffectPreset]:
    """
    List presets, optionally filtered by slot category.

    Presets of category ``both`` match every category.
    """
    if category is None:
        return list(preset_registry.values())
    return [p for p in preset_registry.values() if p.category in (category, 'both')]


def clone_preset_effect(preset: EffectPreset) -> EditorLayerEffect:
    """Deep-copy a preset's effect and assign fresh source ids."""
    clone = preset.effect.model_copy(deep=True)
    next_id = int(time.time() * 1000)
    for source in clone.sources:
        source.id = next_id
        next_id += 1
    return clone
