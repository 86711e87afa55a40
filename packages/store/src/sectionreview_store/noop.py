"""No-op store — the default when no store is configured.

Nothing is persisted, but the engine can still be exercised end to end:
using a NoOpStore rather than None lets the CLI always call the store
without conditional checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sectionreview_store.base import BaseStore

if TYPE_CHECKING:
    from sectionreview_store.models import PropertyRecord


class NoOpStore(BaseStore):
    """Silently discards all writes — zero configuration required."""

    def load(self, property_id: str) -> PropertyRecord | None:
        return None

    def save_review_state(self, property_id: str, blob: dict) -> bool:
        return True  # intentional no-op

    def save_fields(self, property_id: str, fields: dict[str, Any]) -> bool:
        return True
