"""
Holocard - persistence, effect resolution and undo history for layered holographic card designs
"""

from .config import Settings, settings
from .exceptions import HolocardError, SchemeImportError, StorageError
from .gradient import GradientConfig, GradientStop, GradientType, compile_function, compile_params
from .models import (
    BackgroundSource,
    CardScheme,
    EditorGradientSource,
    EditorLayer,
    EditorLayerEffect,
    EditorPersistence,
    EffectConfig,
    EffectSlot,
    ParallaxLayer,
    SharedEffect,
)
from .defaults import create_default_scheme, create_fresh_persistence, system_default_scheme
from .repair import RepairResult, repair
from .storage import FileStorage, MemoryStorage, StorageBackend
from .formats import ExportFormat, export_layers, parse_scheme
from .store import ImportResult, SchemeStore
from .history import HistoryManager

__all__ = [
    # Configuration
    "Settings",
    "settings",
    # Errors
    "HolocardError",
    "SchemeImportError",
    "StorageError",
    # Gradients
    "GradientConfig",
    "GradientStop",
    "GradientType",
    "compile_function",
    "compile_params",
    # Document model
    "BackgroundSource",
    "CardScheme",
    "EditorGradientSource",
    "EditorLayer",
    "EditorLayerEffect",
    "EditorPersistence",
    "EffectConfig",
    "EffectSlot",
    "ParallaxLayer",
    "SharedEffect",
    "create_default_scheme",
    "create_fresh_persistence",
    "system_default_scheme",
    # Repair
    "RepairResult",
    "repair",
    # Storage
    "FileStorage",
    "MemoryStorage",
    "StorageBackend",
    # Formats
    "ExportFormat",
    "export_layers",
    "parse_scheme",
    # Store and history
    "ImportResult",
    "SchemeStore",
    "HistoryManager",
]
