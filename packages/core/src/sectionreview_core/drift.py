"""Drift detection — reopen rejected sections whose data changed since rejection.

Only sections answered "No" that carry a snapshot are inspected. A section
drifts when any governed field's live value differs from the snapshot value.
Reopening is done by the state store (ReviewStateStore.check_drift); this
module only decides which sections qualify.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sectionreview_core.errors import UnknownSectionError
from sectionreview_core.models import Answer
from sectionreview_core.snapshot import values_differ

if TYPE_CHECKING:
    from sectionreview_core.models import ReviewRecord
    from sectionreview_core.sections import SectionRegistry

logger = logging.getLogger(__name__)


def section_drifted(fields: tuple[str, ...], snapshot: dict[str, Any], values: dict[str, Any]) -> bool:
    """Return True if any field's live value differs from its snapshot.

    A field whose comparison raises counts as unchanged, so an unexpected
    field shape never reopens a section on its own.
    """
    for name in fields:
        try:
            if values_differ(values.get(name), snapshot.get(name)):
                return True
        except Exception as e:
            logger.warning("Could not compare field %r against its snapshot (%s): %s", name, type(e).__name__, e)
    return False


def detect_drift(
    registry: SectionRegistry,
    records: dict[str, ReviewRecord],
    values: dict[str, Any],
) -> list[str]:
    """Return the ids of rejected sections whose data has drifted, in registry order."""
    drifted = []
    for section_id, record in _in_registry_order(registry, records):
        if record.answer is not Answer.NO or record.snapshot is None:
            continue
        try:
            section = registry.get(section_id)
        except UnknownSectionError:
            logger.debug("Skipping drift check for unregistered section %r", section_id)
            continue
        if section_drifted(section.fields, record.snapshot, values):
            drifted.append(section_id)
    return drifted


def _in_registry_order(registry: SectionRegistry, records: dict[str, ReviewRecord]):
    known = [(sid, records[sid]) for sid in registry.ids if sid in records]
    extra = [(sid, rec) for sid, rec in records.items() if sid not in registry]
    return known + extra
