"""
Factory defaults and the built-in system default scheme.

Factories return fresh objects on every call; callers may mutate them freely.
"""

from typing import Optional

from holocard.models import (
    BackgroundSource,
    CardScheme,
    EditorLayer,
    EditorLayerEffect,
    EditorPersistence,
    EffectConfig,
    SharedEffect,
    generate_id,
    timestamp_id,
)

DEFAULT_SCHEME_NAME = 'My Card'
UNTITLED_NAME = 'Untitled'
UNNAMED_EFFECT_NAME = 'Unnamed Effect'
DEFAULT_CARD_WIDTH = '300px'

SYSTEM_DEFAULT_SCHEME_ID = '__system_default__'

_ASSET_BASE = 'https://s3.hi168.com/hi168-26327-7861xjfr/shine'


def create_default_effect() -> EditorLayerEffect:
    """Create a disabled, empty editable effect."""
    return EditorLayerEffect()


def create_default_layer(layer_id: Optional[int] = None) -> EditorLayer:
    """Create an empty layer; the id defaults to the current timestamp."""
    return EditorLayer(id=layer_id if layer_id is not None else timestamp_id())


def create_default_scheme(
    *,
    id: Optional[str] = None,
    name: str = UNTITLED_NAME,
    card_width: str = DEFAULT_CARD_WIDTH,
    layers: Optional[list[EditorLayer]] = None,
    shared_effects: Optional[list[SharedEffect]] = None,
) -> CardScheme:
    """
    Create a scheme with one default layer.

    Args:
        id: Scheme id (a new UUID if omitted)
        name: Display name
        card_width: CSS length of the card
        layers: Layers to use instead of the single default layer
        shared_effects: Shared effects (empty if omitted)

    Returns:
        New CardScheme
    """
    return CardScheme(
        id=id or generate_id(),
        name=name,
        card_width=card_width,
        layers=layers if layers is not None else [create_default_layer(1)],
        shared_effects=shared_effects if shared_effects is not None else [],
    )


def create_fresh_persistence() -> EditorPersistence:
    """Create a document holding one fresh scheme, which is active."""
    scheme = create_default_scheme(name=DEFAULT_SCHEME_NAME)
    return EditorPersistence(
        schemes=[scheme],
        default_scheme_id=None,
        active_scheme_id=scheme.id,
    )


# System default scheme

def _shine() -> EffectConfig:
    return EffectConfig(
        layers=[
            BackgroundSource(
                type='image',
                value=f'{_ASSET_BASE}/b1.png',
                size='50% 50%',
                position='center',
                blend_mode='color-burn',
            ),
            BackgroundSource(
                type='repeating-linear-gradient',
                value=(
                    '\n      calc(var(--gradient-angle-dynamic) - 20deg),'
                    '\n      rgb(253, 71, 65) calc(7% * 1),'
                    '\n      rgb(255, 243, 151) calc(7% * 2),'
                    '\n      rgba(168, 255, 95, 1) calc(7% * 3),'
                    '\n      rgba(131, 255, 247, 1) calc(7% * 4),'
                    '\n      rgb(75, 198, 255) calc(7% * 5),'
                    '\n      rgb(255, 73, 246) calc(7% * 6),'
                    '\n      rgb(255, 56, 49) calc(7% * 7)'
                    '\n    '
                ),
                size='500% 500%',
                position='0% calc(var(--pointer-y) * 1)',
                blend_mode='soft-light',
            ),
            BackgroundSource(
                type='repeating-linear-gradient',
                value=(
                    '\n      calc(var(--gradient-angle-dynamic) - 130deg),'
                    '\n      rgba(89, 46, 80, 0.5) 0%,'
                    '\n      hsl(118, 43%, 76%) 2.5%,'
                    '\n      rgb(223, 96, 202) 5%,'
                    '\n      hsl(180, 57%, 56%) 7.5%,'
                    '\n      rgba(14, 21, 46, 0.5) 10%,'
                    '\n      rgba(14, 21, 46, 0.5) 15%'
                    '\n    '
                ),
                size='1000% 1000%',
                position='calc(var(--pointer-x) * 1) calc(var(--pointer-y) * 1)',
                blend_mode='normal',
            ),
            BackgroundSource(
                type='image',
                value=f'{_ASSET_BASE}/b0.png',
                size='100% 100%',
                position='center',
                blend_mode='normal',
            ),
        ],
        filter='brightness(calc((var(--glare-opacity) * 0.25) + 0.66)) contrast(2) saturate(0.95)',
    )


def _glare() -> EffectConfig:
    return EffectConfig(
        layers=[
            BackgroundSource(
                type='radial-gradient',
                value=(
                    'farthest-corner circle at var(--pointer-x) var(--pointer-y), '
                    'rgba(255,255,255,0.8) 10%, rgba(255,255,255,0.65) 20%, '
                    'rgba(0,0,0,0.5) 90%'
                ),
                size='cover',
                position='center',
            ),
        ],
        mix_blend_mode='overlay',
    )


def _none() -> EffectConfig:
    return EffectConfig(layers=[], filter='none')


def system_default_scheme() -> CardScheme:
    """
    Return the built-in fallback scheme.

    Used when no user scheme is marked as default. It is not part of the
    persisted collection; each call returns a new copy.
    """
    # (id, image, depth, shine, glare)
    rows = [
        (1, '0.png', 120, _shine(), _none()),
        (2, '1.png', 50, _shine(), _glare()),
        (3, '2.png', 80, _none(), _none()),
        (4, '3.png', 80, _none(), _none()),
        (5, '4.png', 150, _shine(), _none()),
    ]
    return CardScheme(
        id=SYSTEM_DEFAULT_SCHEME_ID,
        name='System Default',
        card_width=DEFAULT_CARD_WIDTH,
        layers=[
            EditorLayer(
                id=layer_id,
                img=f'{_ASSET_BASE}/{image}',
                z_height=depth,
                shine=shine,
                glare=glare,
            )
            for layer_id, image, depth, shine, glare in rows
        ],
        shared_effects=[],
    )
