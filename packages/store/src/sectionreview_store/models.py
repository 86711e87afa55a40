"""Property data as held by a storage backend.

Decoupled from sectionreview_core so the store layer can be used
independently: the review state travels as the opaque JSON blob the engine
produces, and the engine never sees a PropertyRecord.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class PropertyRecord:
    """One property: its live field values and its persisted review blob."""

    property_id: str
    fields: dict[str, Any] = field(default_factory=dict)
    review_state: dict | None = None
    updated_at: str = ""  # ISO-8601 UTC timestamp of the last write
