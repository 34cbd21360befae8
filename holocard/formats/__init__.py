"""Holocard import/export formats.

Three export targets share the render-ready layer list:

- ``json``: transfer JSON, the only format that can be imported again
- ``ts``: TypeScript module
- ``vue``: Vue single-file component
"""

from enum import Enum
from typing import Optional, Sequence, Union

from holocard.models import ParallaxLayer

from .source import export_layers_to_ts, export_layers_to_vue, stringify_layers
from .transfer import (
    IMPORTED_SCHEME_NAME,
    INVALID_JSON,
    INVALID_SCHEME,
    INVALID_STRUCTURE,
    export_layers_to_json,
    parse_scheme,
    transfer_layer_to_editor,
)


class ExportFormat(str, Enum):
    """Export target tags."""
    JSON = "json"
    TS = "ts"
    VUE = "vue"


_EXPORTERS = {
    ExportFormat.JSON: export_layers_to_json,
    ExportFormat.TS: export_layers_to_ts,
    ExportFormat.VUE: export_layers_to_vue,
}


def export_layers(
    layers: Sequence[ParallaxLayer],
    card_width: Optional[str] = None,
    fmt: Union[ExportFormat, str] = ExportFormat.TS,
) -> str:
    """
    Export render-ready layers in the given format.

    Raises:
        ValueError: If ``fmt`` is not a known format tag
    """
    return _EXPORTERS[ExportFormat(fmt)](layers, card_width)


__all__ = [
    'ExportFormat',
    'export_layers',
    # Transfer JSON
    'export_layers_to_json',
    'parse_scheme',
    'transfer_layer_to_editor',
    'IMPORTED_SCHEME_NAME',
    'INVALID_JSON',
    'INVALID_STRUCTURE',
    'INVALID_SCHEME',
    # Source emission
    'export_layers_to_ts',
    'export_layers_to_vue',
    'stringify_layers',
]
