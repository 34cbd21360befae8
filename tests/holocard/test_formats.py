"""Tests for the import/export codec."""

import json

import pytest

from holocard.effects import to_parallax_layers
from holocard.exceptions import SchemeImportError
from holocard.formats import (
    ExportFormat,
    export_layers,
    export_layers_to_json,
    export_layers_to_ts,
    export_layers_to_vue,
    parse_scheme,
)
from holocard.models import (
    BackgroundSource,
    EditorLayerEffect,
    EffectConfig,
    ParallaxLayer,
)


@pytest.fixture
def parallax_layers(sample_scheme):
    return to_parallax_layers(sample_scheme)


class TestJsonExport:
    """Tests for transfer JSON export."""

    def test_payload(self, parallax_layers):
        data = json.loads(export_layers_to_json(parallax_layers, '320px'))
        assert data['cardWidth'] == '320px'
        assert [layer['id'] for layer in data['layers']] == [1, 2]
        first = data['layers'][0]
        assert first['mask'] == 'full'
        assert first['shineEffects']['opacity'] == 0.75
        assert '_type' not in first['shineEffects']
        assert 'glareEffects' not in first

    def test_card_width_omitted(self, parallax_layers):
        assert 'cardWidth' not in json.loads(export_layers_to_json(parallax_layers))

    def test_pretty_printed(self, parallax_layers):
        text = export_layers_to_json(parallax_layers)
        assert text.startswith('{\n  "layers": [')

    def test_non_ascii_kept(self):
        text = export_layers_to_json([ParallaxLayer(id=1, img='卡片.png')])
        assert '卡片.png' in text


class TestSourceExport:
    """Tests for TypeScript and Vue SFC export."""

    def test_ts(self, parallax_layers):
        text = export_layers_to_ts(parallax_layers, '320px')
        lines = text.split('\n')
        assert lines[0] == "import type { ParallaxLayer } from '#layers/shine-card/app/utils/shine-card-types'"
        assert 'export const cardWidth = "320px"' in lines
        assert 'export const layers: ParallaxLayer[] = [' in lines
        assert '    id: 1' in text
        assert '    zHeight: 120' in text
        assert '    mask: "full"' in text
        assert '      opacity: 0.75' in text
        assert '      filter: "contrast(2)"' in text
        assert '        type: "linear-gradient"' in text
        assert text.endswith(']')

    def test_ts_without_card_width(self, parallax_layers):
        assert 'cardWidth' not in export_layers_to_ts(parallax_layers)

    def test_vue(self, parallax_layers):
        text = export_layers_to_vue(parallax_layers, '320px')
        assert text.startswith('<script setup lang="ts">')
        assert 'const isReady = ref(false)' in text
        assert 'const layers: ParallaxLayer[] = [' in text
        assert '    width="320px"' in text
        assert '    @ready="isReady = true"' in text
        assert text.endswith('</template>')

    def test_vue_default_width(self):
        assert 'width="300px"' in export_layers_to_vue([])

    def test_same_layer_literal(self, parallax_layers):
        """Both source formats embed the identical layer literal."""
        ts = export_layers_to_ts(parallax_layers)
        vue = export_layers_to_vue(parallax_layers)
        literal = ts.split('export const layers: ParallaxLayer[] = ', 1)[1]
        assert literal in vue

    def test_multiline_value_uses_template_literal(self):
        config = EffectConfig(layers=[BackgroundSource(type='linear-gradient', value='45deg,\nred 0%')])
        text = export_layers_to_ts([ParallaxLayer(id=1, img='a.png', shine_effects=config)])
        assert 'value: `\n45deg,\nred 0%\n        `' in text

    def test_template_literal_escaping(self):
        config = EffectConfig(layers=[BackgroundSource(type='image', value='a`b\n${x}')])
        text = export_layers_to_ts([ParallaxLayer(id=1, img='a.png', shine_effects=config)])
        assert 'a\\`b' in text
        assert '\\${x}' in text

    def test_string_opacity_quoted(self):
        config = EffectConfig(layers=[BackgroundSource(type='image', value='x.png')], opacity='var(--o)')
        text = export_layers_to_ts([ParallaxLayer(img='a.png', shine_effects=config)])
        assert 'opacity: "var(--o)"' in text
        assert 'id:' not in text

    def test_empty_effect_layers(self):
        config = EffectConfig(layers=[], filter='none')
        text = export_layers_to_ts([ParallaxLayer(id=1, shine_effects=config)])
        assert '      layers: []' in text


class TestExportDispatch:

    @pytest.mark.parametrize('fmt, exporter', [
        (ExportFormat.JSON, export_layers_to_json),
        ('ts', export_layers_to_ts),
        ('vue', export_layers_to_vue),
    ])
    def test_dispatch(self, parallax_layers, fmt, exporter):
        assert export_layers(parallax_layers, '300px', fmt) == exporter(parallax_layers, '300px')

    def test_unknown_format(self, parallax_layers):
        with pytest.raises(ValueError):
            export_layers(parallax_layers, None, 'xml')


class TestParseScheme:
    """Tests for scheme import."""

    @pytest.mark.parametrize('text, code', [
        ('{oops', 'invalid_json'),
        ('', 'invalid_json'),
        ('null', 'invalid_structure'),
        ('[]', 'invalid_structure'),
        ('42', 'invalid_structure'),
        ('{"name": "x"}', 'invalid_structure'),
        ('{"layers": "x"}', 'invalid_structure'),
    ])
    def test_errors(self, text, code):
        with pytest.raises(SchemeImportError) as exc_info:
            parse_scheme(text)
        assert exc_info.value.code == code

    def test_transfer_shape(self):
        """Transfer JSON becomes a new scheme named 'Imported'."""
        scheme = parse_scheme('{"layers":[{"img":"x.png","zHeight":10,"mask":"full"}]}')
        assert scheme.name == 'Imported'
        assert scheme.card_width == '300px'
        assert len(scheme.layers) == 1
        layer = scheme.layers[0]
        assert layer.mask_mode == 'full'
        assert layer.mask_url == ''
        assert layer.visible is True
        assert layer.img == 'x.png'
        assert layer.z_height == 10
        assert layer.id == 1

    def test_transfer_mask_modes(self):
        scheme = parse_scheme(json.dumps({'layers': [
            {'img': 'a.png', 'mask': 'm.png'},
            {'img': 'b.png'},
            {'img': 'c.png', 'mask': ''},
        ]}))
        assert [(layer.mask_mode, layer.mask_url) for layer in scheme.layers] == [
            ('custom', 'm.png'), ('auto', ''), ('auto', ''),
        ]

    def test_transfer_card_width_and_ids(self):
        scheme = parse_scheme(json.dumps({'cardWidth': '250px', 'layers': [{'id': 9}, {}, 'junk']}))
        assert scheme.card_width == '250px'
        assert [layer.id for layer in scheme.layers] == [9, 2, 3]

    def test_transfer_effects(self):
        scheme = parse_scheme(json.dumps({'layers': [{
            'img': 'a.png',
            'shineEffects': {'layers': [{'type': 'image', 'value': 'foil.png'}], 'opacity': 0.5},
            'glareEffects': 'bogus',
        }]}))
        layer = scheme.layers[0]
        assert isinstance(layer.shine, EffectConfig)
        assert layer.shine.opacity == 0.5
        assert isinstance(layer.glare, EditorLayerEffect)
        assert layer.glare.enabled is False

    def test_transfer_empty_layers(self):
        scheme = parse_scheme('{"layers": []}')
        assert len(scheme.layers) == 1

    def test_full_scheme_shape(self, sample_scheme):
        scheme = parse_scheme(json.dumps(sample_scheme.to_api_dict()))
        assert scheme.id != sample_scheme.id
        assert scheme.name == 'Sample'
        assert scheme.card_width == '320px'
        assert scheme.layers == sample_scheme.layers
        assert scheme.shared_effects == sample_scheme.shared_effects

    def test_full_scheme_repaired(self):
        scheme = parse_scheme('{"name": "", "layers": [null, {"maskMode": "odd"}]}')
        assert scheme.name == 'Untitled'
        assert [layer.mask_mode for layer in scheme.layers] == ['auto', 'auto']


class TestRoundTrip:

    def test_export_then_import(self, sample_scheme):
        """Re-imported transfer JSON resolves to the same render-ready layers."""
        original = to_parallax_layers(sample_scheme)
        text = export_layers_to_json(original, sample_scheme.card_width)
        imported = parse_scheme(text)
        assert imported.card_width == sample_scheme.card_width
        assert to_parallax_layers(imported) == original
