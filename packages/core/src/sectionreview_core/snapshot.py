"""Field snapshots and value comparison.

A snapshot is a value copy of a section's governed fields taken when the
section is rejected. The drift detector later compares live values against
it with values_differ().
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from sectionreview_core.comments import is_empty
from sectionreview_core.models import Answer

if TYPE_CHECKING:
    from sectionreview_core.models import ReviewRecord
    from sectionreview_core.sections import Section


def take_snapshot(section: Section, values: dict[str, Any]) -> dict[str, Any]:
    """Copy the current value of every governed field (absent fields become None)."""
    return {name: copy.deepcopy(values.get(name)) for name in section.fields}


def values_differ(live: Any, snapshot: Any) -> bool:
    """Return True when a live value no longer matches its snapshot value.

    Lists are compared order-insensitively as sorted string values; a non-list
    on either side of a list comparison counts as an empty list. Scalars use
    plain equality with None standing in for "absent".
    """
    if isinstance(live, (list, tuple)) or isinstance(snapshot, (list, tuple)):
        live_items = sorted(str(v) for v in live) if isinstance(live, (list, tuple)) else []
        snapshot_items = sorted(str(v) for v in snapshot) if isinstance(snapshot, (list, tuple)) else []
        return live_items != snapshot_items
    return live != snapshot


def section_has_data(section: Section, values: dict[str, Any]) -> bool:
    """True when at least one governed field holds a non-empty value."""
    return any(not is_empty(values.get(name)) for name in section.fields)


def is_section_complete(section: Section, record: ReviewRecord | None, values: dict[str, Any]) -> bool:
    """A section is complete only with data present and an explicit Yes."""
    if not section_has_data(section, values):
        return False
    return record is not None and record.answer is Answer.YES


def fields_editable(record: ReviewRecord | None) -> bool:
    """Fields are locked until the section is answered, and again once it is approved."""
    if record is None:
        return False
    return record.answer is not Answer.YES
