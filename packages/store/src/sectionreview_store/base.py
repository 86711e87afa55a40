"""Abstract store interface.

Any storage backend (Gist, SQLite, Postgres, S3) implements this interface.
The CLI depends on BaseStore, not on a concrete backend, so backends are
swappable without touching CLI or engine code.

The review engine only ever sees the load/save pair for its blob:
``load_review_state(property_id)`` and ``save_review_state(property_id, blob)``.
Field values are stored alongside so the form layer has somewhere to write.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sectionreview_store.models import PropertyRecord


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaseStore(ABC):
    """Pluggable persistence layer for property fields and review state.

    save_* methods report failure by returning False rather than raising, so
    a backend outage never aborts a reviewer action. The caller decides what
    to do about it (the engine logs and carries on).
    """

    @abstractmethod
    def load(self, property_id: str) -> PropertyRecord | None:
        """Return the stored property, or None if it has never been saved."""

    @abstractmethod
    def save_review_state(self, property_id: str, blob: dict) -> bool:
        """Replace the property's review blob. Last write wins."""

    @abstractmethod
    def save_fields(self, property_id: str, fields: dict[str, Any]) -> bool:
        """Merge ``fields`` into the property's stored field values."""

    def load_review_state(self, property_id: str) -> dict | None:
        record = self.load(property_id)
        return record.review_state if record is not None else None

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional. Subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
