"""
Transfer JSON: export of render-ready layers and scheme import.

Export shape (``export_layers_to_json``):
{
    "layers": [ParallaxLayer, ...],
    "cardWidth": "300px"
}

Import (``parse_scheme``) accepts two JSON shapes:

1. A full scheme: ``name`` is a string and ``layers`` is a list. It is
   repaired like stored data and gets a fresh id.
2. Transfer JSON: ``layers`` is a list (no scheme name). Each render-ready
   layer is converted back into an editor layer inside a new scheme named
   "Imported".
"""

import json
import logging
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from holocard.defaults import (
    DEFAULT_CARD_WIDTH,
    create_default_effect,
    create_default_layer,
    create_default_scheme,
)
from holocard.exceptions import SchemeImportError
from holocard.models import (
    CardScheme,
    EditorLayer,
    MaskMode,
    ParallaxLayer,
    generate_id,
)
from holocard.repair import is_integer, is_number, repair_effect_object, repair_scheme

logger = logging.getLogger(__name__)

IMPORTED_SCHEME_NAME = 'Imported'

INVALID_JSON = 'invalid_json'
INVALID_STRUCTURE = 'invalid_structure'
INVALID_SCHEME = 'invalid_scheme'


def export_layers_to_json(layers: Sequence[ParallaxLayer], card_width: Optional[str] = None) -> str:
    """
    Export render-ready layers as transfer JSON.

    Args:
        layers: Render-ready layers
        card_width: CSS card width, omitted when empty

    Returns:
        Pretty-printed JSON text (2-space indent)
    """
    payload: dict[str, Any] = {'layers': [layer.to_api_dict() for layer in layers]}
    if card_width:
        payload['cardWidth'] = card_width
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _mask_fields(mask: Any) -> tuple[str, str]:
    if mask == 'full':
        return MaskMode.FULL.value, ''
    if isinstance(mask, str) and mask:
        return MaskMode.CUSTOM.value, mask
    return MaskMode.AUTO.value, ''


def _effect_from_transfer(value: Any):
    if isinstance(value, dict):
        effect, _ = repair_effect_object(value)
        return effect
    return create_default_effect()


def transfer_layer_to_editor(raw: Any, index: int) -> EditorLayer:
    """
    Convert one render-ready layer record into an editor layer.

    The ``mask`` field splits into mode and URL: ``"full"`` selects full
    mode, any other non-empty string a custom mask with that URL, and an
    absent mask automatic mode.

    Args:
        raw: Transfer layer record (untrusted)
        index: Position in the layer list, used for missing ids

    Returns:
        EditorLayer
    """
    if not isinstance(raw, dict):
        raw = {}
    mask_mode, mask_url = _mask_fields(raw.get('mask'))
    layer_id = raw.get('id')
    z_height = raw.get('zHeight')
    img = raw.get('img')
    return EditorLayer.model_validate({
        'id': layer_id if is_integer(layer_id) else index + 1,
        'img': img if isinstance(img, str) else '',
        'zHeight': z_height if is_number(z_height) else 0,
        'maskMode': mask_mode,
        'maskUrl': mask_url,
        'visible': True,
        'shine': _effect_from_transfer(raw.get('shineEffects')),
        'glare': _effect_from_transfer(raw.get('glareEffects')),
    })


def parse_scheme(text: str) -> CardScheme:
    """
    Parse import text into a new scheme.

    Args:
        text: JSON text in one of the two accepted shapes

    Returns:
        New CardScheme with a fresh id

    Raises:
        SchemeImportError: with code ``invalid_json``, ``invalid_structure``
            or ``invalid_scheme``
    """
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError, RecursionError) as exc:
        raise SchemeImportError(INVALID_JSON, f"Import text is not valid JSON: {exc}") from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get('layers'), list):
        raise SchemeImportError(INVALID_STRUCTURE, "Expected an object with a 'layers' list")

    # Shape 1: full scheme
    if isinstance(parsed.get('name'), str):
        data, _ = repair_scheme(parsed)
        if data is None:
            raise SchemeImportError(INVALID_SCHEME)
        try:
            scheme = CardScheme.model_validate(data)
        except ValidationError as exc:
            raise SchemeImportError(INVALID_SCHEME, str(exc)) from exc
        scheme.id = generate_id()
        logger.debug("Parsed full scheme '%s'", scheme.name)
        return scheme

    # Shape 2: transfer JSON
    card_width = parsed.get('cardWidth')
    if not isinstance(card_width, str) or not card_width:
        card_width = DEFAULT_CARD_WIDTH
    layers = [transfer_layer_to_editor(item, index) for index, item in enumerate(parsed['layers'])]
    if not layers:
        layers = [create_default_layer(1)]
    logger.debug("Parsed transfer JSON with %d layers", len(layers))
    return create_default_scheme(name=IMPORTED_SCHEME_NAME, card_width=card_width, layers=layers)
