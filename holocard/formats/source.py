"""
Source-code exports of render-ready layers.

Two text formats share one layer literal:

- TypeScript module: ``cardWidth`` and ``layers`` constants
- Vue single-file component: the same literal wrapped in a runnable
  ``<ShineCard>`` usage example

Neither format is read back by the importer.
"""

import json
from typing import Any, Optional, Sequence

from holocard.defaults import DEFAULT_CARD_WIDTH
from holocard.gradient import format_number
from holocard.models import BackgroundSource, EffectConfig, ParallaxLayer

TYPE_IMPORT = "import type { ParallaxLayer } from '#layers/shine-card/app/utils/shine-card-types'"


def _quote(value: Any) -> str:
    """JS literal for a string or number."""
    return json.dumps(value, ensure_ascii=False)


def _template_literal(value: str) -> str:
    escaped = value.replace('\\', '\\\\').replace('`', '\\`').replace('${', '\\${')
    return f"`{escaped}`"


def _scalar(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return _quote(value)


def _stringify_background_source(source: BackgroundSource, indent: int) -> str:
    pad = ' ' * indent
    outer = ' ' * (indent - 2)
    parts = [f"{pad}type: {_quote(source.type)}"]

    # Multi-line values (hand-written gradients) stay readable
    if '\n' in source.value:
        block = '\n' + source.value + '\n' + pad
        parts.append(f"{pad}value: {_template_literal(block)}")
    else:
        parts.append(f"{pad}value: {_quote(source.value)}")

    for key, value in (
        ('size', source.size),
        ('position', source.position),
        ('repeat', source.repeat),
        ('blendMode', source.blend_mode),
    ):
        if value:
            parts.append(f"{pad}{key}: {_quote(value)}")

    body = ',\n'.join(parts)
    return f"{outer}{{\n{body}\n{outer}}}"


def _stringify_background_sources(sources: Sequence[BackgroundSource], indent: int) -> str:
    if not sources:
        return '[]'
    items = ',\n'.join(_stringify_background_source(s, indent + 2) for s in sources)
    return f"[\n{items}\n{' ' * indent}]"


def _stringify_effect_config(config: EffectConfig, indent: int) -> str:
    pad = ' ' * indent
    inner = ' ' * (indent + 2)
    parts = [f"{inner}layers: {_stringify_background_sources(config.layers, indent + 2)}"]

    if config.opacity is not None:
        parts.append(f"{inner}opacity: {_scalar(config.opacity)}")
    if config.mix_blend_mode:
        parts.append(f"{inner}mixBlendMode: {_quote(config.mix_blend_mode)}")
    if config.filter:
        parts.append(f"{inner}filter: {_quote(config.filter)}")
    if config.mask:
        parts.append(f"{inner}mask: {_quote(config.mask)}")

    body = ',\n'.join(parts)
    return f"{{\n{body}\n{pad}}}"


def _stringify_layer(layer: ParallaxLayer) -> str:
    parts = []
    if layer.id is not None:
        parts.append(f"    id: {_scalar(layer.id)}")
    parts.append(f"    img: {_quote(layer.img)}")
    parts.append(f"    zHeight: {format_number(layer.z_height)}")
    if layer.mask:
        parts.append(f"    mask: {_quote(layer.mask)}")
    if layer.shine_effects is not None:
        parts.append(f"    shineEffects: {_stringify_effect_config(layer.shine_effects, 4)}")
    if layer.glare_effects is not None:
        parts.append(f"    glareEffects: {_stringify_effect_config(layer.glare_effects, 4)}")
    body = ',\n'.join(parts)
    return f"  {{\n{body}\n  }}"


def stringify_layers(layers: Sequence[ParallaxLayer]) -> str:
    """Render layers as a JS array literal."""
    items = ',\n'.join(_stringify_layer(layer) for layer in layers)
    return f"[\n{items}\n]"


def export_layers_to_ts(layers: Sequence[ParallaxLayer], card_width: Optional[str] = None) -> str:
    """
    Export layers as a TypeScript module.

    Args:
        layers: Render-ready layers
        card_width: Emitted as a ``cardWidth`` constant when non-empty

    Returns:
        TypeScript source text
    """
    lines = [TYPE_IMPORT, '']
    if card_width:
        lines.append(f"export const cardWidth = {_quote(card_width)}")
        lines.append('')
    lines.append(f"export const layers: ParallaxLayer[] = {stringify_layers(layers)}")
    return '\n'.join(lines)


def export_layers_to_vue(layers: Sequence[ParallaxLayer], card_width: Optional[str] = None) -> str:
    """
    Export layers as a runnable Vue single-file component.

    Args:
        layers: Render-ready layers
        card_width: Card width attribute (``300px`` if omitted)

    Returns:
        Vue SFC source text
    """
    width = card_width if card_width is not None else DEFAULT_CARD_WIDTH
    lines = [
        '<script setup lang="ts">',
        TYPE_IMPORT,
        '',
        'const isReady = ref(false)',
        '',
        f"const layers: ParallaxLayer[] = {stringify_layers(layers)}",
        '</script>',
        '',
        '<template>',
        '  <ShineCard',
        '    :layers="layers"',
        f'    width="{width}"',
        '    @ready="isReady = true"',
        '  />',
        '</template>',
    ]
    return '\n'.join(lines)
