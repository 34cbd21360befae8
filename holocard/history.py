"""
Undo/redo history for a SchemeStore.

The history subscribes to the store. After every completed store mutation it
compares the document against the last recorded snapshot; if it differs,
the previous snapshot is pushed onto the undo stack and the redo stack is
cleared.

Snapshots are full JSON dumps of the document, not diffs. Both stacks are
capped (oldest entries dropped first). A ``load()`` on the store clears
both stacks and takes the loaded document as the new baseline.

Coalescing:
- ``transaction()`` groups any number of store operations into one entry
- ``coalesce_seconds`` folds a change made within that many seconds of the
  previously recorded change into the same entry (0 disables it)

Usage:
    store = SchemeStore(MemoryStorage())
    history = HistoryManager(store)

    store.add_layer()
    history.undo()
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from holocard.config import settings
from holocard.store import SchemeStore

logger = logging.getLogger(__name__)


class HistoryManager:
    """Snapshot-based undo/redo bound to one store."""

    def __init__(
        self,
        store: SchemeStore,
        limit: Optional[int] = None,
        coalesce_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.limit = settings.HISTORY_LIMIT if limit is None else limit
        self.coalesce_seconds = (
            settings.HISTORY_COALESCE_SECONDS if coalesce_seconds is None else coalesce_seconds
        )
        self._clock = clock
        self._undo: list[str] = []
        self._redo: list[str] = []
        self._last_snapshot = store.dump_json()
        self._last_change_at: Optional[float] = None
        self._restoring = False
        self._transaction_depth = 0
        self._unsubscribe = store.subscribe(self._on_change)
        self._unsubscribe_load = store.subscribe_load(self._on_load)

    @property
    def can_undo(self) -> bool:
        return len(self._undo) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._redo) > 0

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def close(self) -> None:
        """Stop observing the store."""
        self._unsubscribe()
        self._unsubscribe_load()

    def clear(self) -> None:
        """Drop both stacks and take the current document as the baseline."""
        self._undo.clear()
        self._redo.clear()
        self._last_snapshot = self.store.dump_json()
        self._last_change_at = None

    def _on_load(self, store: SchemeStore) -> None:
        # A loaded document is a new baseline, not an edit
        self.clear()

    def _on_change(self, store: SchemeStore) -> None:
        if self._restoring or self._transaction_depth:
            return
        self.record_if_changed()

    def _push(self, stack: list[str], snapshot: str) -> None:
        stack.append(snapshot)
        if len(stack) > self.limit:
            del stack[:len(stack) - self.limit]

    def record_if_changed(self) -> bool:
        """
        Record the previous snapshot if the document changed since.

        Returns:
            True if the document differed from the last recorded snapshot
        """
        current = self.store.dump_json()
        if current == self._last_snapshot:
            return False

        now = self._clock()
        coalesce = (
            self.coalesce_seconds > 0
            and self._last_change_at is not None
            and self._undo
            and now - self._last_change_at < self.coalesce_seconds
        )
        if not coalesce:
            self._push(self._undo, self._last_snapshot)
        self._redo.clear()
        self._last_snapshot = current
        self._last_change_at = now
        return True

    @contextmanager
    def transaction(self) -> Iterator['HistoryManager']:
        """
        Group store operations into a single undo entry.

        Transactions nest; the entry is recorded when the outermost one
        exits.
        """
        self._transaction_depth += 1
        try:
            yield self
        finally:
            self._transaction_depth -= 1
            if self._transaction_depth == 0:
                self.record_if_changed()

    def _restore(self, snapshot: str) -> None:
        self._restoring = True
        try:
            self.store.restore(snapshot)
        finally:
            self._restoring = False
        self._last_snapshot = self.store.dump_json()
        self._last_change_at = None

    def undo(self) -> bool:
        """
        Restore the state before the last recorded change.

        Returns:
            False if there was nothing to undo
        """
        if not self._undo:
            return False
        self._push(self._redo, self.store.dump_json())
        self._restore(self._undo.pop())
        logger.debug("Undo (%d left)", len(self._undo))
        return True

    def redo(self) -> bool:
        """
        Re-apply the last undone change.

        Returns:
            False if there was nothing to redo
        """
        if not self._redo:
            return False
        self._push(self._undo, self.store.dump_json())
        self._restore(self._redo.pop())
        logger.debug("Redo (%d left)", len(self._redo))
        return True
