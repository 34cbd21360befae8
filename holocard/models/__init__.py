"""
Holocard Models

Pydantic models for the card scheme document.

Model Hierarchy:
    EditorPersistence (root document)
    └── CardScheme
        ├── EditorLayer
        │   └── LayerEffectValue = EditorLayerEffect | EffectConfig | str
        └── SharedEffect
            └── EditorLayerEffect
                └── EditorGradientSource
                    ├── GradientConfig
                    └── PosAxisConfig

Render-ready output:
    ParallaxLayer
    └── EffectConfig
        └── BackgroundSource
"""

from holocard.gradient import GradientConfig, GradientStop, GradientType

from .editor import (
    CardScheme,
    EditorGradientSource,
    EditorLayer,
    EditorLayerEffect,
    EditorPersistence,
    EffectKind,
    EffectSlot,
    LayerEffectValue,
    MaskMode,
    PosAxisConfig,
    PosAxisMode,
    SharedEffect,
    effect_kind,
    generate_id,
    timestamp_id,
)
from .render import (
    BACKGROUND_TYPES,
    BackgroundSource,
    BackgroundType,
    EffectConfig,
    ParallaxLayer,
)

__all__ = [
    # Gradients
    'GradientConfig',
    'GradientStop',
    'GradientType',
    # Editable
    'CardScheme',
    'EditorGradientSource',
    'EditorLayer',
    'EditorLayerEffect',
    'EditorPersistence',
    'EffectKind',
    'EffectSlot',
    'LayerEffectValue',
    'MaskMode',
    'PosAxisConfig',
    'PosAxisMode',
    'SharedEffect',
    # Render-ready
    'BACKGROUND_TYPES',
    'BackgroundSource',
    'BackgroundType',
    'EffectConfig',
    'ParallaxLayer',
    # Utilities
    'effect_kind',
    'generate_id',
    'timestamp_id',
]
