"""Debounced write-through of the review state to a backing store.

The engine does not know which backend it writes to: it is handed a
``save(property_id, blob) -> bool`` callable. The CLI wires that to a
BaseStore from sectionreview_store.

Nothing here runs in the background. A caller that owns an event loop calls
poll() periodically; one-shot callers (the CLI) call flush() on exit. A newer
schedule() simply replaces the pending blob, so superseded writes never reach
the backend.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0

SaveFn = Callable[[str, dict], bool]


class DebouncedPersister:
    def __init__(
        self,
        property_id: str,
        save: SaveFn,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        on_saved: Callable[[dict], None] | None = None,
    ):
        self.property_id = property_id
        self.delay = delay
        self._save = save
        self._clock = clock
        self._on_saved = on_saved
        self._pending: dict | None = None
        self._deadline: float | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, blob: dict) -> None:
        """Queue ``blob`` for writing once no further change arrives for ``delay`` seconds."""
        self._pending = blob
        self._deadline = self._clock() + self.delay

    def poll(self) -> bool | None:
        """Write the pending blob if its quiet period has elapsed.

        Returns None when nothing was written, otherwise the save result.
        """
        if self._pending is None or self._clock() < self._deadline:
            return None
        return self.flush()

    def flush(self) -> bool | None:
        """Write the pending blob now, regardless of the deadline."""
        if self._pending is None:
            return None
        blob = self._pending
        self._pending = None
        self._deadline = None
        return self._write(blob)

    def save_now(self, blob: dict) -> bool:
        """Write ``blob`` synchronously, discarding any pending debounced write."""
        self._pending = None
        self._deadline = None
        return self._write(blob)

    def _write(self, blob: dict) -> bool:
        try:
            ok = bool(self._save(self.property_id, blob))
        except Exception as e:
            # No retry: the in-memory state stays ahead of the backend until
            # the next successful write.
            logger.warning("Failed to save review state for %s (%s): %s", self.property_id, type(e).__name__, e)
            return False
        if not ok:
            logger.warning("Backend rejected review state for %s", self.property_id)
            return False
        logger.debug("Saved review state for %s", self.property_id)
        if self._on_saved is not None:
            self._on_saved(blob)
        return True


def noop_save(property_id: str, blob: dict[str, Any]) -> bool:
    return True
