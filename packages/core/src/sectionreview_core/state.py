"""Review state store — the authoritative per-section review records.

Every reviewer action and every live field change goes through this class.
Mutations are applied in memory first, then:
  - a debounced persist is scheduled (submission persists immediately;
    see sectionreview_core.submission),
  - a synchronous ``reviews-changed`` event is emitted.

Transition rules for set_answer():

    → No     keep non-empty comments, else generate "Falta ..." lines;
             snapshot the current field values; has_issue = True
    → Yes    drop the snapshot; comments are kept for a later re-rejection
    → Unset  drop comments; keep the snapshot for future drift checks

has_issue never goes back to False and submitted_comments is never touched
here.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Iterable

from sectionreview_core.codec import from_blob, to_blob
from sectionreview_core.comments import generate_missing_fields_comment
from sectionreview_core.drift import detect_drift
from sectionreview_core.events import PROPERTY_UPDATED, REVIEWS_CHANGED, REVIEWS_UPDATED, EventBus
from sectionreview_core.models import Answer, GlobalStatus, ReviewRecord, ReviewsMeta
from sectionreview_core.persistence import DEFAULT_DEBOUNCE_SECONDS, DebouncedPersister, noop_save
from sectionreview_core.sections import DEFAULT_REGISTRY, SectionRegistry
from sectionreview_core.snapshot import is_section_complete, section_has_data, take_snapshot
from sectionreview_core.status import aggregate_status

logger = logging.getLogger(__name__)


class ReviewStateStore:
    def __init__(
        self,
        property_id: str,
        registry: SectionRegistry = DEFAULT_REGISTRY,
        values: dict[str, Any] | None = None,
        records: dict[str, ReviewRecord] | None = None,
        meta: ReviewsMeta | None = None,
        save: Callable[[str, dict], bool] = noop_save,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        required_sections: Iterable[str] | None = None,
        events: EventBus | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.property_id = property_id
        self.registry = registry
        self.records: dict[str, ReviewRecord] = records if records is not None else {}
        self.meta = meta if meta is not None else ReviewsMeta()
        self.events = events if events is not None else EventBus()
        self.required_sections = list(required_sections) if required_sections is not None else registry.ids
        for section_id in self.required_sections:
            registry.get(section_id)
        self._values: dict[str, Any] = dict(values or {})
        persister_kwargs = {"clock": clock} if clock is not None else {}
        self.persister = DebouncedPersister(
            property_id, save, delay=debounce_seconds, on_saved=self._on_saved, **persister_kwargs
        )

    @classmethod
    def load(cls, property_id: str, blob: dict | str | None, values: dict[str, Any] | None = None, **kwargs):
        """Build a store from a persisted blob and run the initial drift check.

        The initial check catches field edits made elsewhere while the review
        was closed. It runs exactly once here; afterwards drift is only
        re-checked when update_values() reports a change.
        """
        records, meta = from_blob(blob)
        store = cls(property_id, values=values, records=records, meta=meta, **kwargs)
        store.repair_snapshots()
        store.check_drift()
        return store

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    def get(self, section_id: str) -> ReviewRecord | None:
        self.registry.get(section_id)
        return self.records.get(section_id)

    def record(self, section_id: str) -> ReviewRecord:
        """Return the section's record, creating an unanswered one on first access."""
        self.registry.get(section_id)
        if section_id not in self.records:
            self.records[section_id] = ReviewRecord()
        return self.records[section_id]

    def global_status(self) -> GlobalStatus:
        return aggregate_status(self.records, self.required_sections)

    def has_data(self, section_id: str) -> bool:
        return section_has_data(self.registry.get(section_id), self._values)

    def is_complete(self, section_id: str) -> bool:
        return is_section_complete(self.registry.get(section_id), self.records.get(section_id), self._values)

    def all_complete(self) -> bool:
        return all(self.is_complete(sid) for sid in self.required_sections)

    def to_blob(self) -> dict:
        return to_blob(self.records, self.meta)

    # ------------------------------------------------------------------ #
    # Reviewer actions                                                     #
    # ------------------------------------------------------------------ #

    def set_answer(self, section_id: str, answer: Answer | bool | None) -> ReviewRecord:
        """Apply a reviewer answer. The JSON forms True/False/None are accepted."""
        if not isinstance(answer, Answer):
            if answer is not None and not isinstance(answer, bool):
                raise TypeError(f"answer must be an Answer, a bool or None, got {type(answer).__name__}")
            answer = Answer.from_json(answer)
        record = self.record(section_id)
        self._apply_answer(section_id, record, answer)
        self._changed()
        return record

    def set_comments(self, section_id: str, text: str | None) -> ReviewRecord:
        """Edit the live comments. Never touches submitted_comments.

        Commenting on a section nobody has answered yet implies a rejection:
        the record is created as reviewed/No with its snapshot, but has_issue
        stays False until an explicit No.
        """
        self.registry.get(section_id)
        record = self.records.get(section_id)
        if record is None:
            section = self.registry.get(section_id)
            record = ReviewRecord(
                reviewed=True,
                answer=Answer.NO,
                has_issue=False,
                snapshot=take_snapshot(section, self._values),
            )
            self.records[section_id] = record
        record.comments = text or None
        self._changed()
        return record

    def mark_section_resolved(self, section_id: str) -> ReviewRecord:
        """The "save corrections" action: a rejected section becomes approved."""
        record = self.record(section_id)
        if record.answer is Answer.NO:
            self._apply_answer(section_id, record, Answer.YES)
        else:
            record.reviewed = True
        self._changed()
        return record

    def _apply_answer(self, section_id: str, record: ReviewRecord, answer: Answer) -> None:
        if answer is Answer.NO:
            if not record.comments:
                record.comments = generate_missing_fields_comment(self.registry, section_id, self._values)
            record.snapshot = take_snapshot(self.registry.get(section_id), self._values)
            record.has_issue = True
            record.reviewed = True
        elif answer is Answer.YES:
            record.snapshot = None
            record.reviewed = True
        else:
            record.comments = None
            record.reviewed = False
        record.answer = answer

    # ------------------------------------------------------------------ #
    # Live field values                                                    #
    # ------------------------------------------------------------------ #

    def update_values(self, changes: dict[str, Any]) -> list[str]:
        """Apply changed field values and reopen any rejected section they drift.

        Returns the ids of the sections that were reopened.
        """
        changed = {k: v for k, v in changes.items() if k not in self._values or self._values[k] != v}
        if not changed:
            return []
        self._values.update(copy.deepcopy(changed))
        return self.check_drift()

    def repair_snapshots(self) -> list[str]:
        """Restore "snapshot present iff No" on records read from storage.

        Legacy records rejected before snapshots existed get one taken from
        the current values; approved records lose any leftover snapshot.
        Unset records keep theirs. Returns the ids of the repaired sections.
        """
        repaired = []
        for section_id in self.registry.ids:
            record = self.records.get(section_id)
            if record is None:
                continue
            if record.answer is Answer.NO and record.snapshot is None:
                record.snapshot = take_snapshot(self.registry.get(section_id), self._values)
                repaired.append(section_id)
            elif record.answer is Answer.YES and record.snapshot is not None:
                record.snapshot = None
                repaired.append(section_id)
        if repaired:
            logger.info("Repaired snapshots on %s: %s", self.property_id, ", ".join(repaired))
            self._changed()
        return repaired

    def check_drift(self) -> list[str]:
        """Reopen every rejected section whose fields no longer match its snapshot.

        Idempotent: a reopened section is Unset afterwards, so a second run
        without new edits finds nothing.
        """
        drifted = detect_drift(self.registry, self.records, self._values)
        for section_id in drifted:
            record = self.records[section_id]
            record.answer = Answer.UNSET
            record.reviewed = False
            record.comments = None
        if drifted:
            logger.info("Reopened sections after data change on %s: %s", self.property_id, ", ".join(drifted))
            self._changed()
        return drifted

    # ------------------------------------------------------------------ #
    # Persistence / notification                                           #
    # ------------------------------------------------------------------ #

    def flush(self) -> bool | None:
        return self.persister.flush()

    def persist_now(self) -> bool:
        return self.persister.save_now(self.to_blob())

    def notify(self) -> None:
        self.events.emit(REVIEWS_CHANGED, self._payload(self.to_blob()))

    def _changed(self) -> None:
        blob = self.to_blob()
        self.persister.schedule(blob)
        self.events.emit(REVIEWS_CHANGED, self._payload(blob))

    def _on_saved(self, blob: dict) -> None:
        payload = self._payload(blob)
        self.events.emit(PROPERTY_UPDATED, payload)
        self.events.emit(REVIEWS_UPDATED, payload)

    def _payload(self, blob: dict) -> dict:
        return {"propertyId": self.property_id, "reviewBlob": blob}
