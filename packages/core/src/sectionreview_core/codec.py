"""Conversion between the in-memory review state and the persisted blob.

Persisted shape (one JSON document per property):

    {
      "<sectionId>": {"reviewed", "isCorrect", "comments", "hasIssue",
                      "submittedComments", "snapshot"},
      ...
      "_meta": {"commentsSubmitted", "commentsSubmittedAt",
                "commentSubmissionHistory": [...]}
    }

from_blob() never raises: legacy or malformed data is migrated where possible
and dropped (with a warning) where not.
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any

from sectionreview_core.models import Answer, ReviewRecord, ReviewsMeta, SubmissionHistoryEntry

logger = logging.getLogger(__name__)

META_KEY = "_meta"


def record_to_dict(record: ReviewRecord) -> dict:
    return {
        "reviewed": record.reviewed,
        "isCorrect": record.answer.to_json(),
        "comments": record.comments,
        "hasIssue": record.has_issue,
        "submittedComments": record.submitted_comments,
        "snapshot": copy.deepcopy(record.snapshot),
    }


def record_from_dict(d: dict) -> ReviewRecord:
    """Build a ReviewRecord, migrating the legacy ``completed`` shape.

    Records written before ``hasIssue`` existed derive it from the answer.
    """
    answer = Answer.from_json(d.get("isCorrect"))
    if "hasIssue" in d:
        has_issue = bool(d.get("hasIssue"))
    else:
        has_issue = answer is Answer.NO
    snapshot = d.get("snapshot")
    return ReviewRecord(
        reviewed=bool(d.get("reviewed", False)),
        answer=answer,
        comments=d.get("comments") or None,
        has_issue=has_issue,
        submitted_comments=d.get("submittedComments") or None,
        snapshot=dict(snapshot) if isinstance(snapshot, dict) else None,
    )


def _entry_to_dict(entry: SubmissionHistoryEntry) -> dict:
    return {
        "sectionId": entry.section_id,
        "sectionTitle": entry.section_title,
        "comments": entry.comments,
        "submittedAt": entry.submitted_at,
        "fieldValues": copy.deepcopy(entry.field_values),
    }


def _entry_from_dict(d: dict) -> SubmissionHistoryEntry:
    field_values = d.get("fieldValues")
    return SubmissionHistoryEntry(
        section_id=d.get("sectionId", ""),
        section_title=d.get("sectionTitle", ""),
        comments=d.get("comments", ""),
        submitted_at=d.get("submittedAt", ""),
        field_values=dict(field_values) if isinstance(field_values, dict) else {},
    )


def meta_to_dict(meta: ReviewsMeta) -> dict:
    d: dict[str, Any] = {"commentsSubmitted": meta.comments_submitted}
    if meta.comments_submitted_at is not None:
        d["commentsSubmittedAt"] = meta.comments_submitted_at
    d["commentSubmissionHistory"] = [_entry_to_dict(e) for e in meta.history]
    return d


def meta_from_dict(d: dict) -> ReviewsMeta:
    history = d.get("commentSubmissionHistory") or []
    return ReviewsMeta(
        comments_submitted=bool(d.get("commentsSubmitted", False)),
        comments_submitted_at=d.get("commentsSubmittedAt") or None,
        history=[_entry_from_dict(e) for e in history if isinstance(e, dict)],
    )


def to_blob(records: dict[str, ReviewRecord], meta: ReviewsMeta) -> dict:
    blob: dict[str, Any] = {sid: record_to_dict(r) for sid, r in records.items()}
    blob[META_KEY] = meta_to_dict(meta)
    return blob


def from_blob(blob: dict | str | None) -> tuple[dict[str, ReviewRecord], ReviewsMeta]:
    """Parse a persisted blob (dict or JSON text) into records and metadata.

    An unparseable blob yields an empty state. That loses whatever was stored,
    so it is logged as a warning rather than passed over quietly.
    """
    if blob is None or blob == "":
        return {}, ReviewsMeta()

    if isinstance(blob, str):
        try:
            blob = json.loads(blob)
        except json.JSONDecodeError as e:
            logger.warning("Discarding unparseable review state: %s", e)
            return {}, ReviewsMeta()

    if not isinstance(blob, dict):
        logger.warning("Discarding review state of unexpected type %s", type(blob).__name__)
        return {}, ReviewsMeta()

    records: dict[str, ReviewRecord] = {}
    for key, value in blob.items():
        if key == META_KEY:
            continue
        if not isinstance(value, dict):
            logger.warning("Dropping malformed review record for section %r", key)
            continue
        records[key] = record_from_dict(value)

    raw_meta = blob.get(META_KEY)
    meta = meta_from_dict(raw_meta) if isinstance(raw_meta, dict) else ReviewsMeta()
    return records, meta
