"""
Scheme store: the single writer of the persisted document.

The store owns one ``EditorPersistence`` document, loaded from and saved to
an injected storage backend under one key.

Lifecycle:
1. ``SchemeStore(storage)`` starts with a fresh in-memory document
2. ``load()`` reads the stored text, repairs it and writes a repaired
   document back immediately
3. Load subscribers (``subscribe_load``) are told the document was
   replaced; change subscribers are not
4. Every mutating operation saves (when autosave is on) and notifies
   subscribers; direct edits to model objects are published with
   ``commit()``

Operations that would break a document invariant (removing the last scheme
or the last layer of a scheme) are silently ignored. Callers check
``can_remove_scheme`` / ``can_remove_layer`` beforehand.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from holocard.config import settings
from holocard.defaults import (
    DEFAULT_SCHEME_NAME,
    UNNAMED_EFFECT_NAME,
    UNTITLED_NAME,
    create_default_effect,
    create_default_layer,
    create_default_scheme,
    create_fresh_persistence,
    system_default_scheme,
)
from holocard.effects import (
    clone_preset_effect,
    get_preset,
    resolve_editable,
    resolve_reference,
    to_parallax_layers,
)
from holocard.exceptions import SchemeImportError
from holocard.formats import ExportFormat, export_layers, parse_scheme
from holocard.models import (
    CardScheme,
    EditorLayer,
    EditorLayerEffect,
    EditorPersistence,
    EffectConfig,
    EffectSlot,
    ParallaxLayer,
    SharedEffect,
    generate_id,
)
from holocard.repair import repair
from holocard.storage import StorageBackend

logger = logging.getLogger(__name__)

Listener = Callable[['SchemeStore'], None]
EffectValue = Union[EditorLayerEffect, EffectConfig, str]


def _add_listener(listeners: list[Listener], listener: Listener) -> Callable[[], None]:
    listeners.append(listener)

    def unsubscribe() -> None:
        if listener in listeners:
            listeners.remove(listener)

    return unsubscribe


@dataclass
class ImportResult:
    """Outcome of ``SchemeStore.import_scheme``."""

    success: bool
    error: Optional[str] = None
    scheme: Optional[CardScheme] = None


class SchemeStore:
    """Persisted collection of card schemes."""

    def __init__(
        self,
        storage: StorageBackend,
        key: Optional[str] = None,
        autosave: Optional[bool] = None,
    ):
        self.storage = storage
        self.key = key or settings.STORAGE_KEY
        self.autosave = settings.AUTOSAVE if autosave is None else autosave
        self._document = create_fresh_persistence()
        self._listeners: list[Listener] = []
        self._load_listeners: list[Listener] = []

    # ==================== Lifecycle ====================

    @property
    def document(self) -> EditorPersistence:
        return self._document

    def load(self) -> bool:
        """
        Load the document from storage.

        Missing data starts a fresh document. Unparseable or malformed data
        is repaired and the repaired document is written back at once.
        Change subscribers are not notified; load subscribers are.

        Returns:
            True if the stored data had to be repaired
        """
        text = self.storage.read(self.key)
        if text is None:
            logger.debug("No document stored under '%s', starting fresh", self.key)
            self._document = create_fresh_persistence()
            if self.autosave:
                self.save()
            self._loaded()
            return False

        try:
            raw = json.loads(text)
        except (ValueError, RecursionError):
            logger.warning("Stored document '%s' is not valid JSON", self.key)
            raw = None

        result = repair(raw)
        self._document = result.data
        if result.repaired:
            logger.warning("Stored document '%s' was corrupted and has been repaired", self.key)
            self.save()
        self._loaded()
        return result.repaired

    def save(self) -> None:
        """Write the full document to storage."""
        self.storage.write(self.key, self.dump_json())

    def dump_json(self) -> str:
        """Serialize the document in its stored form."""
        return json.dumps(self._document.to_api_dict(), ensure_ascii=False)

    def restore(self, document: Union[EditorPersistence, dict[str, Any], str]) -> None:
        """
        Replace the whole document.

        Args:
            document: Document model, stored-form dict or JSON text; it is
                passed through repair before use
        """
        if isinstance(document, str):
            document = json.loads(document)
        self._document = repair(document).data
        self._changed()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Function that removes the listener again
        """
        return _add_listener(self._listeners, listener)

    def subscribe_load(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after ``load()`` replaced the document."""
        return _add_listener(self._load_listeners, listener)

    def commit(self) -> None:
        """Publish direct edits made to document model objects."""
        self._changed()

    def _changed(self) -> None:
        if self.autosave:
            self.save()
        for listener in list(self._listeners):
            listener(self)

    def _loaded(self) -> None:
        for listener in list(self._load_listeners):
            listener(self)

    # ==================== Schemes ====================

    @property
    def schemes(self) -> list[CardScheme]:
        return self._document.schemes

    @property
    def active_scheme_id(self) -> str:
        return self._document.active_scheme_id

    @property
    def active_scheme(self) -> CardScheme:
        scheme = self._document.get_scheme(self._document.active_scheme_id)
        return scheme if scheme is not None else self._document.schemes[0]

    @property
    def default_scheme_id(self) -> Optional[str]:
        return self._document.default_scheme_id

    @property
    def default_scheme(self) -> CardScheme:
        """The scheme marked as default, or the built-in system default."""
        scheme = self._document.get_scheme(self._document.default_scheme_id)
        return scheme if scheme is not None else system_default_scheme()

    @property
    def can_remove_scheme(self) -> bool:
        return len(self._document.schemes) > 1

    def get_scheme(self, scheme_id: str) -> Optional[CardScheme]:
        return self._document.get_scheme(scheme_id)

    def _target(self, scheme: Optional[CardScheme]) -> CardScheme:
        return scheme if scheme is not None else self.active_scheme

    def add_scheme(self, name: str = UNTITLED_NAME) -> CardScheme:
        """Append a scheme with one default layer and make it active."""
        scheme = create_default_scheme(name=name.strip() or UNTITLED_NAME)
        self._document.schemes.append(scheme)
        self._document.active_scheme_id = scheme.id
        self._changed()
        return scheme

    def duplicate_scheme(self, scheme_id: str) -> Optional[CardScheme]:
        """
        Append a deep copy of a scheme under a new id and activate it.

        Returns:
            The copy, or None if no scheme has this id
        """
        source = self._document.get_scheme(scheme_id)
        if source is None:
            return None
        clone = source.model_copy(deep=True)
        clone.id = generate_id()
        clone.name = f"{source.name} (Copy)"
        self._document.schemes.append(clone)
        self._document.active_scheme_id = clone.id
        self._changed()
        return clone

    def remove_scheme(self, scheme_id: str) -> None:
        """Remove a scheme unless it is the only one."""
        if not self.can_remove_scheme or self._document.get_scheme(scheme_id) is None:
            return
        doc = self._document
        doc.schemes = [s for s in doc.schemes if s.id != scheme_id]
        if doc.default_scheme_id == scheme_id:
            doc.default_scheme_id = None
        if doc.active_scheme_id == scheme_id:
            doc.active_scheme_id = doc.schemes[0].id
        self._changed()

    def rename_scheme(self, scheme_id: str, name: str) -> None:
        """Rename a scheme; blank names are ignored."""
        scheme = self._document.get_scheme(scheme_id)
        name = name.strip()
        if scheme is None or not name:
            return
        scheme.name = name
        self._changed()

    def reset_scheme(self, scheme_id: str) -> None:
        """Replace a scheme's contents with defaults, keeping its id and name."""
        scheme = self._document.get_scheme(scheme_id)
        if scheme is None:
            return
        fresh = create_default_scheme(id=scheme.id, name=scheme.name)
        scheme.card_width = fresh.card_width
        scheme.layers = fresh.layers
        scheme.shared_effects = fresh.shared_effects
        self._changed()

    def reset_all(self) -> None:
        """Replace the whole document with one fresh scheme."""
        self._document = create_fresh_persistence()
        logger.info("Reset all schemes to a fresh '%s'", DEFAULT_SCHEME_NAME)
        self._changed()

    def set_active_scheme(self, scheme_id: str) -> None:
        if self._document.get_scheme(scheme_id) is None:
            return
        self._document.active_scheme_id = scheme_id
        self._changed()

    def set_default_scheme(self, scheme_id: Optional[str]) -> None:
        """Mark a scheme as default, or clear the mark with None."""
        if scheme_id is not None and self._document.get_scheme(scheme_id) is None:
            return
        self._document.default_scheme_id = scheme_id
        self._changed()

    def toggle_default_scheme(self, scheme_id: str) -> None:
        """Mark a scheme as default, or clear the mark if it already is."""
        if self._document.default_scheme_id == scheme_id:
            self.set_default_scheme(None)
        else:
            self.set_default_scheme(scheme_id)

    # ==================== Shared effects ====================

    def add_shared_effect(self, scheme: Optional[CardScheme] = None, name: str = UNNAMED_EFFECT_NAME) -> SharedEffect:
        """Append a disabled default shared effect under a new id."""
        scheme = self._target(scheme)
        shared = SharedEffect(id=generate_id(), name=name or UNNAMED_EFFECT_NAME, effect=create_default_effect())
        scheme.shared_effects.append(shared)
        self._changed()
        return shared

    def remove_shared_effect(self, scheme: Optional[CardScheme], effect_id: str) -> None:
        """
        Remove a shared effect.

        Layer slots that referenced it get an inline default effect, so no
        reference is left dangling.
        """
        scheme = self._target(scheme)
        scheme.shared_effects = [e for e in scheme.shared_effects if e.id != effect_id]
        for layer in scheme.layers:
            for slot in EffectSlot:
                if layer.get_effect(slot) == effect_id:
                    layer.set_effect(slot, create_default_effect())
        self._changed()

    def rename_shared_effect(self, scheme: Optional[CardScheme], effect_id: str, name: str) -> None:
        scheme = self._target(scheme)
        shared = scheme.get_shared_effect(effect_id)
        name = name.strip()
        if shared is None or not name:
            return
        shared.name = name
        self._changed()

    # ==================== Layers ====================

    def can_remove_layer(self, scheme: Optional[CardScheme] = None) -> bool:
        scheme = self._target(scheme)
        return len(scheme.layers) > 1

    def add_layer(self, scheme: Optional[CardScheme] = None) -> EditorLayer:
        """Append an empty layer."""
        scheme = self._target(scheme)
        layer = create_default_layer(scheme.next_layer_id())
        scheme.layers.append(layer)
        self._changed()
        return layer

    def remove_layer(self, index: int, scheme: Optional[CardScheme] = None) -> None:
        """Remove the layer at ``index`` unless it is the last one."""
        scheme = self._target(scheme)
        if not self.can_remove_layer(scheme) or not 0 <= index < len(scheme.layers):
            return
        del scheme.layers[index]
        self._changed()

    def duplicate_layer(self, index: int, scheme: Optional[CardScheme] = None) -> Optional[EditorLayer]:
        """Insert a deep copy with a new id right after the layer at ``index``."""
        scheme = self._target(scheme)
        if not 0 <= index < len(scheme.layers):
            return None
        clone = scheme.layers[index].model_copy(deep=True)
        clone.id = scheme.next_layer_id()
        scheme.layers.insert(index + 1, clone)
        self._changed()
        return clone

    def toggle_layer_visibility(self, index: int, scheme: Optional[CardScheme] = None) -> None:
        scheme = self._target(scheme)
        if not 0 <= index < len(scheme.layers):
            return
        layer = scheme.layers[index]
        layer.visible = not layer.visible
        self._changed()

    # ==================== Effect binding ====================

    @staticmethod
    def effect_mode(value: EffectValue) -> str:
        """``'shared'`` for a shared-effect reference, else ``'inline'``."""
        return 'shared' if isinstance(value, str) else 'inline'

    def shared_effect_options(self, scheme: Optional[CardScheme] = None) -> list[dict[str, str]]:
        """Selectable shared effects as ``{'label', 'value'}`` pairs."""
        scheme = self._target(scheme)
        return [{'label': e.name, 'value': e.id} for e in scheme.shared_effects]

    def set_layer_effect_shared(self, layer: EditorLayer, slot: Union[EffectSlot, str], effect_id: str) -> None:
        """Bind a layer slot to a shared effect."""
        layer.set_effect(slot, effect_id)
        self._changed()

    def set_layer_effect_inline(
        self,
        layer: EditorLayer,
        slot: Union[EffectSlot, str],
        scheme: Optional[CardScheme] = None,
    ) -> None:
        """
        Detach a shared reference into an inline copy of the shared effect.

        Inline slots are left unchanged.
        """
        value = layer.get_effect(slot)
        if not isinstance(value, str):
            return
        scheme = self._target(scheme)
        layer.set_effect(slot, resolve_editable(value, scheme).model_copy(deep=True))
        self._changed()

    def editable_effect(
        self,
        layer: EditorLayer,
        slot: Union[EffectSlot, str],
        scheme: Optional[CardScheme] = None,
    ) -> EditorLayerEffect:
        """The editable effect behind a layer slot (shared or inline)."""
        return resolve_editable(layer.get_effect(slot), self._target(scheme))

    def apply_preset(self, layer: EditorLayer, slot: Union[EffectSlot, str], preset_id: str) -> Optional[EditorLayerEffect]:
        """
        Put a copy of a preset effect inline into a layer slot.

        Returns:
            The applied effect, or None if the preset is unknown
        """
        preset = get_preset(preset_id)
        if preset is None:
            logger.debug("Unknown effect preset '%s'", preset_id)
            return None
        effect = clone_preset_effect(preset)
        layer.set_effect(slot, effect)
        self._changed()
        return effect

    # ==================== Resolution ====================

    def resolve_effect(self, value: EffectValue, scheme: Optional[CardScheme] = None) -> Union[EditorLayerEffect, EffectConfig]:
        return resolve_reference(value, self._target(scheme))

    def resolve_editable_effect(self, value: EffectValue, scheme: Optional[CardScheme] = None) -> EditorLayerEffect:
        return resolve_editable(value, self._target(scheme))

    def computed_layers(self, scheme: Optional[CardScheme] = None) -> list[ParallaxLayer]:
        """Render-ready layers of a scheme (the active one by default)."""
        return to_parallax_layers(self._target(scheme))

    # ==================== Import / Export ====================

    def export_config(
        self,
        fmt: Union[ExportFormat, str] = ExportFormat.TS,
        scheme: Optional[CardScheme] = None,
    ) -> str:
        """Export a scheme's render-ready layers as text."""
        scheme = self._target(scheme)
        return export_layers(self.computed_layers(scheme), scheme.card_width, fmt)

    def import_scheme(self, text: str) -> ImportResult:
        """
        Import a scheme from JSON text and make it active.

        Never raises; on failure the document is left unchanged.

        Returns:
            ImportResult with ``error`` set to ``invalid_json``,
            ``invalid_structure`` or ``invalid_scheme`` on failure
        """
        try:
            scheme = parse_scheme(text)
        except SchemeImportError as exc:
            logger.info("Import rejected (%s): %s", exc.code, exc)
            return ImportResult(success=False, error=exc.code)

        self._document.schemes.append(scheme)
        self._document.active_scheme_id = scheme.id
        self._changed()
        logger.info("Imported scheme '%s' with %d layers", scheme.name, len(scheme.layers))
        return ImportResult(success=True, scheme=scheme)
