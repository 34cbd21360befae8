"""
Editable document models.

The persisted document is a tree of schemes:

    EditorPersistence
    └── schemes: [CardScheme, ...]
        ├── layers: [EditorLayer, ...]
        │   ├── shine: LayerEffectValue
        │   └── glare: LayerEffectValue
        └── sharedEffects: [SharedEffect, ...]

A layer's effect slot holds one of three variants (``LayerEffectValue``):

- ``EditorLayerEffect``: inline and fully editable
- ``EffectConfig``: inline, render-ready only (cannot be decomposed)
- ``str``: the id of a ``SharedEffect`` of the owning scheme

Object variants carry a ``_type`` marker. Untagged data (older documents,
imports) is classified by shape, see ``effect_kind``.

Uses Pydantic v2 with camelCase aliases for JSON compatibility with the
stored format.
"""

import time
import uuid
from enum import Enum
from typing import Annotated, Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from holocard.gradient import GradientConfig, GradientStop, GradientType
from holocard.models.render import EffectConfig


def generate_id() -> str:
    """Generate a unique string id for schemes and shared effects."""
    return str(uuid.uuid4())


def timestamp_id() -> int:
    """Generate a numeric id from the current time in milliseconds."""
    return int(time.time() * 1000)


class EffectKind(str, Enum):
    """Variant tags of ``LayerEffectValue``."""
    EDITOR = "editor"
    RENDER = "render"
    SHARED = "shared"


class EffectSlot(str, Enum):
    """The two effect slots of a layer."""
    SHINE = "shine"
    GLARE = "glare"


class MaskMode(str, Enum):
    """How a layer's mask is determined."""
    AUTO = "auto"
    FULL = "full"
    CUSTOM = "custom"


class PosAxisMode(str, Enum):
    VALUE = "value"
    VAR = "var"
    CALC = "calc"


class _EditorModel(BaseModel):
    model_config = ConfigDict(
        # Allow both snake_case and camelCase input
        populate_by_name=True,
        # Editing mutates fields in place
        validate_assignment=False,
        # Unknown keys from other versions are ignored
        extra='ignore',
        use_enum_values=True,
    )


class PosAxisConfig(_EditorModel):
    """
    One axis of a background position.

    ``value`` mode uses the literal value, ``var`` reads a CSS variable and
    ``calc`` scales the variable by ``calcFactor``.
    """
    mode: PosAxisMode = Field(default=PosAxisMode.VALUE.value)
    value: str = Field(default='50%')
    variable: str = Field(default='--pointer-x')
    calc_factor: Union[int, float] = Field(default=1, alias='calcFactor')


def _default_gradient() -> GradientConfig:
    return GradientConfig(
        type=GradientType.LINEAR,
        angle=45,
        stops=[
            GradientStop(id=1, color='#FFFFFF', position=0, alpha=0),
            GradientStop(id=2, color='#FFFFFF', position=50, alpha=80),
            GradientStop(id=3, color='#FFFFFF', position=100, alpha=0),
        ],
    )


class EditorGradientSource(_EditorModel):
    """
    Editable background source.

    Keeps how each CSS value is authored (keyword vs. split size, preset vs.
    per-axis position, variable-driven axes) so the editor can reconstruct
    the authoring intent, not just the final string.
    """
    id: int = Field(default_factory=timestamp_id)
    source_type: str = Field(default='gradient', alias='sourceType')  # 'gradient' | 'image'
    gradient_config: GradientConfig = Field(
        default_factory=_default_gradient, alias='gradientConfig'
    )
    image_url: str = Field(default='', alias='imageUrl')

    # Size
    size_mode: str = Field(default='keyword', alias='sizeMode')  # 'keyword' | 'split'
    size_keyword: str = Field(default='cover', alias='sizeKeyword')
    size_w: Union[int, float] = Field(default=100, alias='sizeW')
    size_h: Union[int, float] = Field(default=100, alias='sizeH')

    # Position
    pos_mode: str = Field(default='split', alias='posMode')  # 'preset' | 'split'
    pos_preset: str = Field(default='center', alias='posPreset')
    pos_x: PosAxisConfig = Field(
        default_factory=lambda: PosAxisConfig(mode='var', variable='--pointer-x'),
        alias='posX',
    )
    pos_y: PosAxisConfig = Field(
        default_factory=lambda: PosAxisConfig(mode='var', variable='--pointer-y'),
        alias='posY',
    )

    repeat: str = Field(default='repeat')
    blend_mode: str = Field(default='normal', alias='blendMode')


class EditorLayerEffect(_EditorModel):
    """
    Editable effect.

    Serialization format:
    {
        "_type": "EditorLayerEffect",
        "enabled": false,
        "sources": [],
        "opacity": 80,
        "mixBlendMode": "",
        "filter": "",
        "mask": ""
    }

    ``opacity`` is a 0-100 percentage; empty strings mean "not set".
    """

    TYPE_NAME: ClassVar[str] = 'EditorLayerEffect'

    type_name: str = Field(default='EditorLayerEffect', alias='_type')
    enabled: bool = Field(default=False)
    sources: list[EditorGradientSource] = Field(default_factory=list)
    opacity: Union[int, float] = Field(default=80)
    mix_blend_mode: str = Field(default='', alias='mixBlendMode')
    filter: str = Field(default='')
    mask: str = Field(default='')

    def model_post_init(self, __context: Any) -> None:
        """Set type_name to EditorLayerEffect."""
        self.type_name = self.TYPE_NAME

    def to_api_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')


def effect_kind(value: Any) -> Optional[EffectKind]:
    """
    Classify an effect slot value.

    Model instances report their own variant. Raw dicts use the ``_type``
    marker when present, otherwise their shape: a ``layers`` list means a
    render-ready config, a ``sources`` field means an editable effect.

    Args:
        value: Model instance, raw dict or string

    Returns:
        EffectKind, or None if the value matches no variant
    """
    if isinstance(value, str):
        return EffectKind.SHARED
    if isinstance(value, EditorLayerEffect):
        return EffectKind.EDITOR
    if isinstance(value, EffectConfig):
        return EffectKind.RENDER
    if isinstance(value, dict):
        marker = value.get('_type')
        if marker == EditorLayerEffect.TYPE_NAME:
            return EffectKind.EDITOR
        if marker == EffectConfig.TYPE_NAME:
            return EffectKind.RENDER
        if isinstance(value.get('layers'), list):
            return EffectKind.RENDER
        if 'sources' in value:
            return EffectKind.EDITOR
    return None


def _effect_tag(value: Any) -> Optional[str]:
    kind = effect_kind(value)
    return kind.value if kind is not None else None


LayerEffectValue = Annotated[
    Union[
        Annotated[EditorLayerEffect, Tag(EffectKind.EDITOR.value)],
        Annotated[EffectConfig, Tag(EffectKind.RENDER.value)],
        Annotated[str, Tag(EffectKind.SHARED.value)],
    ],
    Discriminator(_effect_tag),
]


class SharedEffect(_EditorModel):
    """A named effect stored once per scheme and referenced by id."""
    id: str = Field(default_factory=generate_id)
    name: str = Field(default='Unnamed Effect')
    effect: EditorLayerEffect = Field(default_factory=EditorLayerEffect)


class EditorLayer(_EditorModel):
    """
    One card layer.

    Serialization format:
    {
        "id": 1,
        "img": "https://.../0.png",
        "zHeight": 120,
        "maskMode": "auto",
        "maskUrl": "",
        "visible": true,
        "shine": {...} | "shared-effect-id",
        "glare": {...} | "shared-effect-id"
    }
    """
    id: int = Field(default_factory=timestamp_id)
    img: str = Field(default='')
    z_height: Union[int, float] = Field(default=0, alias='zHeight')  # Parallax depth
    mask_mode: MaskMode = Field(default=MaskMode.AUTO.value, alias='maskMode')
    mask_url: str = Field(default='', alias='maskUrl')
    visible: bool = Field(default=True)
    shine: LayerEffectValue = Field(default_factory=EditorLayerEffect)
    glare: LayerEffectValue = Field(default_factory=EditorLayerEffect)

    def get_effect(self, slot: Union[EffectSlot, str]) -> Union[EditorLayerEffect, EffectConfig, str]:
        return getattr(self, EffectSlot(slot).value)

    def set_effect(self, slot: Union[EffectSlot, str], value: Union[EditorLayerEffect, EffectConfig, str]) -> None:
        setattr(self, EffectSlot(slot).value, value)


class CardScheme(_EditorModel):
    """One complete named card design."""
    id: str = Field(default_factory=generate_id)
    name: str = Field(default='Untitled')
    card_width: str = Field(default='300px', alias='cardWidth')
    layers: list[EditorLayer] = Field(default_factory=lambda: [EditorLayer(id=1)])
    shared_effects: list[SharedEffect] = Field(default_factory=list, alias='sharedEffects')

    def get_layer(self, layer_id: int) -> Optional[EditorLayer]:
        """
        Get a layer by ID.

        Args:
            layer_id: Layer ID to find

        Returns:
            Layer or None if not found
        """
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def next_layer_id(self) -> int:
        """Millisecond timestamp id, bumped past the largest id in use."""
        new_id = timestamp_id()
        if self.layers:
            new_id = max(new_id, max(layer.id for layer in self.layers) + 1)
        return new_id

    def get_shared_effect(self, effect_id: str) -> Optional[SharedEffect]:
        """
        Get a shared effect by ID.

        Args:
            effect_id: Shared effect ID to find

        Returns:
            SharedEffect or None if not found
        """
        for shared in self.shared_effects:
            if shared.id == effect_id:
                return shared
        return None

    def to_api_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')


class EditorPersistence(_EditorModel):
    """
    Root document.

    Invariants (established by ``holocard.repair`` and kept by the store):
    ``schemes`` is never empty and its ids are unique, ``activeSchemeId``
    names a member, ``defaultSchemeId`` is None or names a member.
    """
    schemes: list[CardScheme] = Field(default_factory=list)
    default_scheme_id: Optional[str] = Field(default=None, alias='defaultSchemeId')
    active_scheme_id: str = Field(default='', alias='activeSchemeId')

    def get_scheme(self, scheme_id: Optional[str]) -> Optional[CardScheme]:
        if scheme_id is None:
            return None
        for scheme in self.schemes:
            if scheme.id == scheme_id:
                return scheme
        return None

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to the stored JSON structure (camelCase keys)."""
        return self.model_dump(by_alias=True, mode='json')
