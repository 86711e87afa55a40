"""Synchronous in-process event bus.

Dependents (status badges, kanban cards) subscribe here instead of
re-fetching the property after every change.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

# Fired after every in-memory mutation of the review state.
REVIEWS_CHANGED = "reviews-changed"
# Fired after every successful persist.
PROPERTY_UPDATED = "property-updated"
REVIEWS_UPDATED = "reviews-updated"

Handler = Callable[[dict[str, Any]], None]


class EventBus:
    def __init__(self):
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> None:
        self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        try:
            self._handlers[event].remove(handler)
        except ValueError:
            pass

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        """Call every handler for ``event`` in subscription order.

        A failing handler is logged and skipped; the remaining handlers still run
        and the caller never sees the exception.
        """
        handlers = list(self._handlers.get(event, ()))
        logger.debug("Emitting %s to %d handler(s)", event, len(handlers))
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                logger.exception("Handler for %s failed", event)
