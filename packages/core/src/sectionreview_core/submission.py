"""Submission of correction comments.

The only code path that writes ``submitted_comments`` or appends to the
submission history. A submit:

  1. re-validates (every required section answered, every rejection
     commented) and checks there is something new to submit,
  2. freezes the live comments of every rejected section,
  3. appends one history entry per frozen section, in registry order,
  4. flags the review as submitted (the first timestamp is kept forever),
  5. persists immediately, bypassing the debounce.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from sectionreview_core.models import Answer, SubmissionHistoryEntry
from sectionreview_core.snapshot import take_snapshot
from sectionreview_core.status import section_answer

if TYPE_CHECKING:
    from sectionreview_core.state import ReviewStateStore

logger = logging.getLogger(__name__)

MISSING_BOTH = "missing sections and comments"
MISSING_SECTIONS = "missing sections"
MISSING_COMMENTS = "missing comments"
NOTHING_TO_SUBMIT = "nothing to submit"

_MESSAGES = {
    MISSING_BOTH: "Answer every section and add comments to every section marked as incorrect before submitting.",
    MISSING_SECTIONS: "Answer every section before submitting.",
    MISSING_COMMENTS: "Add comments to every section marked as incorrect before submitting.",
    NOTHING_TO_SUBMIT: "There are no new comments to submit.",
}


@dataclass(frozen=True)
class SubmitCheck:
    ok: bool
    reason: str | None = None
    unanswered: tuple[str, ...] = ()
    uncommented: tuple[str, ...] = ()

    @property
    def message(self) -> str | None:
        return _MESSAGES.get(self.reason) if self.reason else None


@dataclass
class SubmitResult:
    ok: bool
    reason: str | None = None
    message: str | None = None
    entries: list[SubmissionHistoryEntry] = field(default_factory=list)
    persisted: bool = False


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _rejected_sections(store: ReviewStateStore) -> list[str]:
    return [sid for sid in store.registry.ids if sid in store.records and store.records[sid].answer is Answer.NO]


def can_submit(store: ReviewStateStore) -> SubmitCheck:
    """Validate that every required section is answered and every rejection has comments."""
    unanswered = tuple(sid for sid in store.required_sections if section_answer(store.records, sid) is Answer.UNSET)
    uncommented = tuple(sid for sid in _rejected_sections(store) if not store.records[sid].comments)

    if unanswered and uncommented:
        reason = MISSING_BOTH
    elif unanswered:
        reason = MISSING_SECTIONS
    elif uncommented:
        reason = MISSING_COMMENTS
    else:
        return SubmitCheck(ok=True)
    return SubmitCheck(ok=False, reason=reason, unanswered=unanswered, uncommented=uncommented)


def submit_available(store: ReviewStateStore) -> bool:
    """Whether the submit action should be offered at all.

    Requires at least one rejected section, and then either nothing was ever
    submitted, or some rejected section has comments that were never
    submitted or were edited since.
    """
    rejected = _rejected_sections(store)
    if not rejected:
        return False
    if not store.meta.comments_submitted:
        return True
    for sid in rejected:
        record = store.records[sid]
        if not record.submitted_comments or record.comments != record.submitted_comments:
            return True
    return False


def submit(store: ReviewStateStore, now: Callable[[], str] = _utc_now) -> SubmitResult:
    """Freeze the comments of every rejected section and record them in the history."""
    check = can_submit(store)
    if not check.ok:
        logger.info("Submission blocked for %s: %s", store.property_id, check.reason)
        return SubmitResult(ok=False, reason=check.reason, message=check.message)
    if not submit_available(store):
        return SubmitResult(ok=False, reason=NOTHING_TO_SUBMIT, message=_MESSAGES[NOTHING_TO_SUBMIT])

    submitted_at = now()
    entries = []
    for sid in _rejected_sections(store):
        record = store.records[sid]
        if not record.comments:
            continue
        section = store.registry.get(sid)
        record.submitted_comments = record.comments
        if record.snapshot is None:
            record.snapshot = take_snapshot(section, store.values)
        entries.append(
            SubmissionHistoryEntry(
                section_id=sid,
                section_title=section.title,
                comments=record.submitted_comments,
                submitted_at=submitted_at,
                field_values=copy.deepcopy(record.snapshot),
            )
        )

    store.meta.history.extend(entries)
    store.meta.comments_submitted = True
    if store.meta.comments_submitted_at is None:
        store.meta.comments_submitted_at = submitted_at

    persisted = store.persist_now()
    store.notify()
    logger.info("Submitted comments for %d section(s) on %s", len(entries), store.property_id)
    return SubmitResult(ok=True, entries=entries, persisted=persisted)
