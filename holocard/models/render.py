"""
Render-ready models.

These are the flattened, CSS-paint-ready structures consumed by the card
renderer. They carry no editing metadata:

    ParallaxLayer
    ├── shineEffects: EffectConfig
    │   └── layers: [BackgroundSource, ...]
    └── glareEffects: EffectConfig

Optional fields that are unset are omitted on serialization rather than
written as null, matching the transfer JSON format.
"""

from enum import Enum
from typing import Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from holocard.gradient import GradientType


class BackgroundType(str, Enum):
    """Paint kinds of a background source."""
    IMAGE = "image"
    LINEAR = GradientType.LINEAR.value
    RADIAL = GradientType.RADIAL.value
    CONIC = GradientType.CONIC.value
    REPEATING_LINEAR = GradientType.REPEATING_LINEAR.value
    REPEATING_RADIAL = GradientType.REPEATING_RADIAL.value
    REPEATING_CONIC = GradientType.REPEATING_CONIC.value


BACKGROUND_TYPES: frozenset[str] = frozenset(t.value for t in BackgroundType)


class _RenderModel(BaseModel):
    """Shared config: camelCase aliases, unset optionals dropped on dump."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=False,
        extra='ignore',
        use_enum_values=True,
    )

    @model_serializer(mode='wrap')
    def _drop_none(self, handler) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class BackgroundSource(_RenderModel):
    """
    One paint layer of an effect.

    Serialization format:
    {
        "type": "repeating-linear-gradient",
        "value": "45deg, rgba(253, 71, 65, 1.00) 0%, ...",
        "size": "500% 500%",
        "position": "0% calc(var(--pointer-y) * 1)",
        "repeat": "repeat",
        "blendMode": "soft-light"
    }

    ``value`` is an image URL for ``image`` sources and the gradient
    parameter list otherwise.
    """
    type: BackgroundType = Field(default=BackgroundType.IMAGE.value)
    value: str = Field(default='')
    size: Optional[str] = Field(default=None)
    position: Optional[str] = Field(default=None)
    repeat: Optional[str] = Field(default=None)
    blend_mode: Optional[str] = Field(default=None, alias='blendMode')


class EffectConfig(_RenderModel):
    """
    Render-ready effect (a stack of background sources plus compositing).

    Serialization format:
    {
        "_type": "EffectConfig",
        "layers": [...],
        "opacity": 0.8,
        "mask": "...",
        "filter": "contrast(2)",
        "mixBlendMode": "overlay"
    }

    The ``_type`` marker tags the variant inside a layer's effect slot; it is
    not part of the exported formats (see ``to_api_dict``).
    """

    TYPE_NAME: ClassVar[str] = 'EffectConfig'

    type_name: str = Field(default='EffectConfig', alias='_type')
    layers: list[BackgroundSource] = Field(default_factory=list)
    opacity: Optional[Union[int, float, str]] = Field(default=None)
    mask: Optional[str] = Field(default=None)
    filter: Optional[str] = Field(default=None)
    mix_blend_mode: Optional[str] = Field(default=None, alias='mixBlendMode')

    def model_post_init(self, __context: Any) -> None:
        """Set type_name to EffectConfig."""
        self.type_name = self.TYPE_NAME

    def to_api_dict(self, *, include_type: bool = True) -> dict[str, Any]:
        """
        Convert to a JSON-compatible dict.

        Args:
            include_type: If False, omits the ``_type`` variant marker

        Returns:
            Dict with camelCase keys, unset optionals omitted
        """
        data = self.model_dump(by_alias=True, mode='json')
        if not include_type:
            data.pop('_type', None)
        return data


class ParallaxLayer(_RenderModel):
    """
    Render-ready card layer, the sole handoff to the renderer.

    Serialization format:
    {
        "id": 1,
        "img": "https://.../0.png",
        "zHeight": 120,
        "mask": "full",
        "shineEffects": {...},
        "glareEffects": {...}
    }
    """
    id: Optional[Union[int, str]] = Field(default=None)
    img: str = Field(default='')
    z_height: Union[int, float] = Field(default=0, alias='zHeight')
    mask: Optional[str] = Field(default=None)
    shine_effects: Optional[EffectConfig] = Field(default=None, alias='shineEffects')
    glare_effects: Optional[EffectConfig] = Field(default=None, alias='glareEffects')

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to the transfer JSON layer record (no variant markers)."""
        data = self.model_dump(by_alias=True, mode='json')
        for key in ('shineEffects', 'glareEffects'):
            if key in data:
                data[key].pop('_type', None)
        return data
