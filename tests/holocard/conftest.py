"""Test fixtures for holocard."""

import pytest

from holocard.gradient import GradientConfig, GradientStop
from holocard.history import HistoryManager
from holocard.models import (
    CardScheme,
    EditorGradientSource,
    EditorLayer,
    EditorLayerEffect,
    SharedEffect,
)
from holocard.storage import MemoryStorage
from holocard.store import SchemeStore


class FakeClock:
    """Manually advanced clock for coalescing tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage) -> SchemeStore:
    """Loaded store on empty in-memory storage."""
    scheme_store = SchemeStore(storage, key='test-doc', autosave=True)
    scheme_store.load()
    return scheme_store


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def history(store, clock) -> HistoryManager:
    manager = HistoryManager(store, limit=50, coalesce_seconds=0, clock=clock)
    yield manager
    manager.close()


@pytest.fixture
def enabled_effect() -> EditorLayerEffect:
    """Enabled effect with one linear gradient source."""
    return EditorLayerEffect(
        enabled=True,
        opacity=75,
        filter='contrast(2)',
        sources=[
            EditorGradientSource(
                id=11,
                gradient_config=GradientConfig(
                    type='linear-gradient',
                    angle=90,
                    stops=[
                        GradientStop(id=1, color='#FF0000', position=0, alpha=100),
                        GradientStop(id=2, color='#0000FF', position=100, alpha=50),
                    ],
                ),
                size_mode='split',
                size_w=200,
                size_h=150,
                blend_mode='overlay',
            )
        ],
    )


@pytest.fixture
def sample_scheme(enabled_effect) -> CardScheme:
    """
    Scheme with three layers:
    1. inline enabled shine, full mask
    2. shared shine reference, custom mask
    3. hidden layer
    """
    shared = SharedEffect(id='shared-1', name='Holo', effect=enabled_effect.model_copy(deep=True))
    return CardScheme(
        id='scheme-1',
        name='Sample',
        card_width='320px',
        layers=[
            EditorLayer(id=1, img='a.png', z_height=120, mask_mode='full', shine=enabled_effect),
            EditorLayer(id=2, img='b.png', z_height=40, mask_mode='custom', mask_url='mask.png', shine='shared-1'),
            EditorLayer(id=3, img='c.png', z_height=10, visible=False),
        ],
        shared_effects=[shared],
    )
