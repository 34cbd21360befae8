"""Tests for the document models and the tagged effect union."""

import pytest

from holocard.defaults import create_fresh_persistence, system_default_scheme
from holocard.models import (
    CardScheme,
    EditorLayer,
    EditorLayerEffect,
    EffectConfig,
    EffectKind,
    ParallaxLayer,
    effect_kind,
)


class TestEffectKind:
    """Tests for effect variant classification."""

    @pytest.mark.parametrize('value, kind', [
        ('shared-id', EffectKind.SHARED),
        (EditorLayerEffect(), EffectKind.EDITOR),
        (EffectConfig(), EffectKind.RENDER),
        ({'_type': 'EditorLayerEffect', 'layers': []}, EffectKind.EDITOR),
        ({'_type': 'EffectConfig'}, EffectKind.RENDER),
        ({'layers': []}, EffectKind.RENDER),
        ({'sources': []}, EffectKind.EDITOR),
        ({'layers': {}, 'sources': []}, EffectKind.EDITOR),
    ])
    def test_classification(self, value, kind):
        assert effect_kind(value) == kind

    @pytest.mark.parametrize('value', [None, 5, [], {'opacity': 1}])
    def test_unclassifiable(self, value):
        assert effect_kind(value) is None


class TestLayerEffectValue:
    """Tests for the effect slot union on EditorLayer."""

    def test_validates_each_variant(self):
        layer = EditorLayer.model_validate({
            'id': 1,
            'shine': {'layers': [{'type': 'image', 'value': 'x.png'}]},
            'glare': 'fx-1',
        })
        assert isinstance(layer.shine, EffectConfig)
        assert layer.glare == 'fx-1'

    def test_type_marker_written(self):
        data = EditorLayer(id=1, shine=EffectConfig(layers=[])).model_dump(by_alias=True)
        assert data['shine']['_type'] == 'EffectConfig'
        assert data['glare']['_type'] == 'EditorLayerEffect'

    def test_marker_survives_round_trip(self):
        layer = EditorLayer(id=1, shine=EffectConfig(layers=[], filter='none'))
        restored = EditorLayer.model_validate(layer.model_dump(by_alias=True, mode='json'))
        assert isinstance(restored.shine, EffectConfig)
        assert restored.shine.filter == 'none'

    def test_get_set_effect(self):
        layer = EditorLayer(id=1)
        layer.set_effect('glare', 'fx')
        assert layer.get_effect('glare') == 'fx'
        with pytest.raises(ValueError):
            layer.get_effect('sparkle')


class TestSerialization:
    """Tests for camelCase aliases and omitted optionals."""

    def test_aliases(self):
        data = EditorLayer(id=3, z_height=20, mask_mode='custom', mask_url='m.png').model_dump(by_alias=True)
        assert data['zHeight'] == 20
        assert data['maskMode'] == 'custom'
        assert data['maskUrl'] == 'm.png'

    def test_populate_by_name_and_alias(self):
        assert EditorLayer(zHeight=5).z_height == 5
        assert EditorLayer(z_height=5).z_height == 5

    def test_unset_optionals_omitted(self):
        record = ParallaxLayer(id=1, img='a.png').to_api_dict()
        assert record == {'id': 1, 'img': 'a.png', 'zHeight': 0}


class TestDocument:

    def test_fresh_persistence(self):
        doc = create_fresh_persistence()
        assert len(doc.schemes) == 1
        assert doc.active_scheme_id == doc.schemes[0].id
        assert doc.default_scheme_id is None
        assert doc.get_scheme(doc.active_scheme_id) is doc.schemes[0]
        assert doc.get_scheme(None) is None

    def test_scheme_lookup(self, sample_scheme):
        assert sample_scheme.get_layer(2).img == 'b.png'
        assert sample_scheme.get_layer(99) is None
        assert sample_scheme.get_shared_effect('shared-1').name == 'Holo'

    def test_default_scheme_shape(self):
        assert CardScheme().layers[0].id == 1

    def test_system_default_scheme(self):
        scheme = system_default_scheme()
        assert [layer.z_height for layer in scheme.layers] == [120, 50, 80, 80, 150]
        assert all(isinstance(layer.shine, EffectConfig) for layer in scheme.layers)
        assert scheme.layers[1].glare.mix_blend_mode == 'overlay'
