"""Global status aggregation across required sections."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from sectionreview_core.models import Answer, GlobalStatus

if TYPE_CHECKING:
    from sectionreview_core.models import ReviewRecord


def section_answer(records: dict[str, ReviewRecord], section_id: str) -> Answer:
    """A missing record counts as unanswered."""
    record = records.get(section_id)
    return record.answer if record is not None else Answer.UNSET


def aggregate_status(records: dict[str, ReviewRecord], required_sections: Iterable[str]) -> GlobalStatus:
    """Collapse every required section's answer into one document-level status.

    Precedence: any unanswered section → PENDING_REVIEW (even when others are
    rejected); all approved → NONE; otherwise PENDING_INFORMATION.
    """
    answers = [section_answer(records, sid) for sid in required_sections]
    if any(a is Answer.UNSET for a in answers):
        return GlobalStatus.PENDING_REVIEW
    if all(a is Answer.YES for a in answers):
        return GlobalStatus.NONE
    return GlobalStatus.PENDING_INFORMATION
