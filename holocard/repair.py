"""
Validation and repair of untrusted documents.

``repair`` turns any JSON-like value into a structurally valid
``EditorPersistence``. Repair is additive: wrong-typed or missing fields are
replaced with minimal defaults, everything plausible is kept. Only entries
that are not objects at all are dropped (schemes, shared effects, effect
sources, background entries); layers are replaced instead.

Walk order (depth first):
    document -> schemes -> layers -> shine/glare effects -> sources
                        -> shared effects -> effect

Shared-effect references (string effect slots) are kept without an existence
check; dangling ids are resolved lazily (see ``holocard.effects.resolve``).

Nothing in this module raises for JSON-deserializable input.
"""

import logging
import math
import sys
from dataclasses import dataclass
from typing import Any, Callable, Optional

from holocard.defaults import (
    DEFAULT_CARD_WIDTH,
    DEFAULT_SCHEME_NAME,
    UNNAMED_EFFECT_NAME,
    UNTITLED_NAME,
    create_default_effect,
    create_default_layer,
    create_default_scheme,
    create_fresh_persistence,
)
from holocard.gradient import GRADIENT_TYPES, GradientConfig
from holocard.models import (
    BACKGROUND_TYPES,
    EditorGradientSource,
    EditorLayerEffect,
    EditorPersistence,
    EffectConfig,
    MaskMode,
    PosAxisConfig,
    generate_id,
    timestamp_id,
)

logger = logging.getLogger(__name__)

MASK_MODES = frozenset(m.value for m in MaskMode)
POS_AXIS_MODES = frozenset({'value', 'var', 'calc'})
SOURCE_TYPES = frozenset({'gradient', 'image'})
SIZE_MODES = frozenset({'keyword', 'split'})
POS_MODES = frozenset({'preset', 'split'})

_RENDER_OPTIONAL_TEXT = ('mask', 'filter', 'mixBlendMode')
_BACKGROUND_OPTIONAL_TEXT = ('size', 'position', 'repeat', 'blendMode')
_EFFECT_SLOTS = ('shine', 'glare')


@dataclass
class RepairResult:
    """Outcome of ``repair``."""

    data: EditorPersistence
    repaired: bool  # True if any substitution fired, at any depth


# Type predicates (JSON semantics: booleans are not numbers)

_FLOAT_MAX_INT = int(sys.float_info.max)


def is_number(value: Any) -> bool:
    """True for finite JSON numbers that convert to float without overflow."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return abs(value) <= _FLOAT_MAX_INT
    # NaN / Infinity cannot be written back as JSON numbers
    return isinstance(value, float) and math.isfinite(value)


def is_integer(value: Any) -> bool:
    """True for ints and integral floats."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and value != ''


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _one_of(choices: frozenset[str]) -> Callable[[Any], bool]:
    return lambda value: isinstance(value, str) and value in choices


def _dump(model) -> dict[str, Any]:
    return model.model_dump(by_alias=True, mode='json')


def _fix(obj: dict[str, Any], key: str, valid: Callable[[Any], bool], default: Any) -> bool:
    """
    Replace ``obj[key]`` with a default if it fails ``valid``.

    ``default`` may be a zero-argument callable producing a fresh value.

    Returns:
        True if the field was replaced
    """
    if valid(obj.get(key)):
        return False
    obj[key] = default() if callable(default) else default
    return True


# Gradients and sources

def _repair_stop(raw: Any, index: int) -> tuple[Optional[dict[str, Any]], bool]:
    if not isinstance(raw, dict):
        return None, True
    stop = dict(raw)
    repaired = False
    repaired |= _fix(stop, 'id', is_integer, index + 1)
    repaired |= _fix(stop, 'color', _is_text, '#FFFFFF')
    repaired |= _fix(stop, 'position', is_number, 0)
    repaired |= _fix(stop, 'alpha', is_number, 100)
    return stop, repaired


def _repair_gradient(raw: Any) -> tuple[dict[str, Any], bool]:
    if not isinstance(raw, dict):
        return _dump(EditorGradientSource().gradient_config), True

    config = dict(raw)
    repaired = False
    repaired |= _fix(config, 'type', _one_of(GRADIENT_TYPES), GradientConfig().type)
    repaired |= _fix(config, 'angle', is_number, 45)

    if not isinstance(config.get('stops'), list):
        config['stops'] = []
        repaired = True
    else:
        stops = []
        for index, item in enumerate(config['stops']):
            stop, fixed = _repair_stop(item, index)
            repaired |= fixed
            if stop is not None:
                stops.append(stop)
        config['stops'] = stops

    return config, repaired


def _repair_axis(raw: Any, variable: str) -> tuple[dict[str, Any], bool]:
    if not isinstance(raw, dict):
        return _dump(PosAxisConfig(mode='var', variable=variable)), True

    axis = dict(raw)
    repaired = False
    repaired |= _fix(axis, 'mode', _one_of(POS_AXIS_MODES), 'value')
    repaired |= _fix(axis, 'value', _is_text, '50%')
    repaired |= _fix(axis, 'variable', _is_text, variable)
    repaired |= _fix(axis, 'calcFactor', is_number, 1)
    return axis, repaired


def _repair_source(raw: Any) -> tuple[Optional[dict[str, Any]], bool]:
    if not isinstance(raw, dict):
        return None, True

    source = dict(raw)
    repaired = False
    repaired |= _fix(source, 'id', is_integer, timestamp_id)
    repaired |= _fix(source, 'sourceType', _one_of(SOURCE_TYPES), 'gradient')
    repaired |= _fix(source, 'imageUrl', _is_text, '')
    repaired |= _fix(source, 'sizeMode', _one_of(SIZE_MODES), 'keyword')
    repaired |= _fix(source, 'sizeKeyword', _is_text, 'cover')
    repaired |= _fix(source, 'sizeW', is_number, 100)
    repaired |= _fix(source, 'sizeH', is_number, 100)
    repaired |= _fix(source, 'posMode', _one_of(POS_MODES), 'split')
    repaired |= _fix(source, 'posPreset', _is_text, 'center')
    repaired |= _fix(source, 'repeat', _is_text, 'repeat')
    repaired |= _fix(source, 'blendMode', _is_text, 'normal')

    source['gradientConfig'], fixed = _repair_gradient(source.get('gradientConfig'))
    repaired |= fixed
    source['posX'], fixed = _repair_axis(source.get('posX'), '--pointer-x')
    repaired |= fixed
    source['posY'], fixed = _repair_axis(source.get('posY'), '--pointer-y')
    repaired |= fixed

    return source, repaired


# Effects

def _repair_background(raw: Any) -> tuple[Optional[dict[str, Any]], bool]:
    if not isinstance(raw, dict):
        return None, True
    if not _one_of(BACKGROUND_TYPES)(raw.get('type')) or not _is_text(raw.get('value')):
        return None, True

    background = dict(raw)
    repaired = False
    for key in _BACKGROUND_OPTIONAL_TEXT:
        if key in background and background[key] is not None and not _is_text(background[key]):
            del background[key]
            repaired = True
    return background, repaired


def _repair_render_config(raw: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """
    Keep a render-ready config as it is, apart from entries that could not be
    rendered at all (non-object or unknown-type backgrounds, wrong-typed
    optional fields).
    """
    config = dict(raw)
    config['_type'] = EffectConfig.TYPE_NAME
    repaired = False

    layers = []
    for item in config['layers']:
        background, fixed = _repair_background(item)
        repaired |= fixed
        if background is not None:
            layers.append(background)
    config['layers'] = layers

    opacity = config.get('opacity')
    if opacity is not None and not (is_number(opacity) or _is_text(opacity)):
        del config['opacity']
        repaired = True
    for key in _RENDER_OPTIONAL_TEXT:
        if key in config and config[key] is not None and not _is_text(config[key]):
            del config[key]
            repaired = True

    return config, repaired


def _repair_editor_effect(raw: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    effect = dict(raw)
    effect['_type'] = EditorLayerEffect.TYPE_NAME
    repaired = False

    repaired |= _fix(effect, 'enabled', _is_bool, False)
    if not isinstance(effect.get('sources'), list):
        effect['sources'] = []
        repaired = True
    else:
        sources = []
        for item in effect['sources']:
            source, fixed = _repair_source(item)
            repaired |= fixed
            if source is not None:
                sources.append(source)
        effect['sources'] = sources
    repaired |= _fix(effect, 'opacity', is_number, 80)
    repaired |= _fix(effect, 'mixBlendMode', _is_text, '')
    repaired |= _fix(effect, 'filter', _is_text, '')
    repaired |= _fix(effect, 'mask', _is_text, '')

    return effect, repaired


def repair_effect_object(raw: Any) -> tuple[dict[str, Any], bool]:
    """
    Repair an inline effect object.

    An object with a ``layers`` list is a render-ready config and is passed
    through; anything else is repaired field by field as an editable effect.

    Args:
        raw: Untrusted effect value

    Returns:
        (repaired effect dict, whether anything was substituted)
    """
    if not isinstance(raw, dict):
        return _dump(create_default_effect()), True
    if isinstance(raw.get('layers'), list):
        return _repair_render_config(raw)
    return _repair_editor_effect(raw)


# Layers, shared effects, schemes

def _repair_layer(raw: Any) -> tuple[dict[str, Any], bool]:
    if not isinstance(raw, dict):
        return _dump(create_default_layer()), True

    layer = dict(raw)
    repaired = False
    repaired |= _fix(layer, 'id', is_integer, timestamp_id)
    repaired |= _fix(layer, 'img', _is_text, '')
    repaired |= _fix(layer, 'zHeight', is_number, 0)
    repaired |= _fix(layer, 'maskMode', _one_of(MASK_MODES), MaskMode.AUTO.value)
    repaired |= _fix(layer, 'maskUrl', _is_text, '')
    repaired |= _fix(layer, 'visible', _is_bool, True)

    for key in _EFFECT_SLOTS:
        value = layer.get(key)
        if isinstance(value, str):
            # Shared reference, resolved lazily
            continue
        if isinstance(value, dict):
            layer[key], fixed = repair_effect_object(value)
            repaired |= fixed
        else:
            layer[key] = _dump(create_default_effect())
            repaired = True

    return layer, repaired


def _repair_shared_effect(raw: Any) -> tuple[Optional[dict[str, Any]], bool]:
    if not isinstance(raw, dict):
        return None, True

    shared = dict(raw)
    repaired = False
    repaired |= _fix(shared, 'id', _is_name, generate_id)
    repaired |= _fix(shared, 'name', _is_name, UNNAMED_EFFECT_NAME)

    effect = shared.get('effect')
    if not isinstance(effect, dict) or isinstance(effect.get('layers'), list):
        # Shared effects are always editable, never render-ready or references
        shared['effect'] = _dump(create_default_effect())
        repaired = True
    else:
        shared['effect'], fixed = _repair_editor_effect(effect)
        repaired |= fixed

    return shared, repaired


def repair_scheme(raw: Any) -> tuple[Optional[dict[str, Any]], bool]:
    """
    Repair a single scheme.

    Args:
        raw: Untrusted scheme value

    Returns:
        (repaired scheme dict or None if ``raw`` is not an object,
        whether anything was substituted)
    """
    if not isinstance(raw, dict):
        return None, True

    scheme = dict(raw)
    repaired = False
    repaired |= _fix(scheme, 'id', _is_name, generate_id)
    repaired |= _fix(scheme, 'name', _is_name, UNTITLED_NAME)
    repaired |= _fix(scheme, 'cardWidth', _is_name, DEFAULT_CARD_WIDTH)

    layers = scheme.get('layers')
    if not isinstance(layers, list) or not layers:
        scheme['layers'] = [_dump(create_default_layer(1))]
        repaired = True
    else:
        fixed_layers = []
        for item in layers:
            layer, fixed = _repair_layer(item)
            repaired |= fixed
            fixed_layers.append(layer)
        scheme['layers'] = fixed_layers

    shared_effects = scheme.get('sharedEffects')
    if not isinstance(shared_effects, list):
        scheme['sharedEffects'] = []
        repaired = True
    else:
        valid = []
        seen: set[str] = set()
        for item in shared_effects:
            shared, fixed = _repair_shared_effect(item)
            repaired |= fixed
            if shared is None:
                continue
            if shared['id'] in seen:
                shared['id'] = generate_id()
                repaired = True
            seen.add(shared['id'])
            valid.append(shared)
        scheme['sharedEffects'] = valid

    return scheme, repaired


def repair(raw: Any) -> RepairResult:
    """
    Validate and repair a document.

    Args:
        raw: Anything JSON-deserializable, or an ``EditorPersistence``

    Returns:
        RepairResult with a valid document and whether anything was repaired
    """
    if isinstance(raw, EditorPersistence):
        raw = raw.to_api_dict()
    if not isinstance(raw, dict):
        return RepairResult(data=create_fresh_persistence(), repaired=True)

    repaired = False
    schemes: list[dict[str, Any]] = []

    raw_schemes = raw.get('schemes')
    if isinstance(raw_schemes, list):
        for item in raw_schemes:
            scheme, fixed = repair_scheme(item)
            repaired |= fixed
            if scheme is not None:
                schemes.append(scheme)
    else:
        repaired = True

    if not schemes:
        schemes = [_dump(create_default_scheme(name=DEFAULT_SCHEME_NAME))]
        repaired = True

    seen: set[str] = set()
    for scheme in schemes:
        if scheme['id'] in seen:
            scheme['id'] = generate_id()
            repaired = True
        seen.add(scheme['id'])

    active_id = raw.get('activeSchemeId')
    if not isinstance(active_id, str) or active_id not in seen:
        active_id = schemes[0]['id']
        repaired = True

    default_id = raw.get('defaultSchemeId')
    if 'defaultSchemeId' not in raw:
        repaired = True
    elif default_id is not None and (not isinstance(default_id, str) or default_id not in seen):
        default_id = None
        repaired = True
    if not isinstance(default_id, str):
        default_id = None

    data = EditorPersistence.model_validate({
        'schemes': schemes,
        'defaultSchemeId': default_id,
        'activeSchemeId': active_id,
    })
    if repaired:
        logger.debug("Document repaired (%d schemes)", len(data.schemes))
    return RepairResult(data=data, repaired=repaired)
