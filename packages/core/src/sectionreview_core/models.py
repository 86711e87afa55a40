"""Review state data models.

One ReviewRecord per section plus a single ReviewsMeta carrying the
submission metadata. These are the only mutable domain objects; everything
else in the engine is derived from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Answer(Enum):
    """Tri-state answer to "is this information correct?"."""

    YES = "yes"
    NO = "no"
    UNSET = "unset"

    @classmethod
    def from_json(cls, value) -> Answer:
        if value is True:
            return cls.YES
        if value is False:
            return cls.NO
        return cls.UNSET

    def to_json(self) -> bool | None:
        if self is Answer.YES:
            return True
        if self is Answer.NO:
            return False
        return None


class GlobalStatus(Enum):
    """Document-level status derived from every required section."""

    PENDING_REVIEW = "Pendiente de revisión"
    PENDING_INFORMATION = "Pendiente de información"
    NONE = None


@dataclass
class ReviewRecord:
    """Review state of one section.

    ``has_issue`` only ever goes from False to True. ``submitted_comments``
    is written by the submission commit and nothing else.
    """

    reviewed: bool = False
    answer: Answer = Answer.UNSET
    comments: str | None = None
    has_issue: bool = False
    submitted_comments: str | None = None
    snapshot: dict[str, Any] | None = None


@dataclass(frozen=True)
class SubmissionHistoryEntry:
    """One section's comments as they were at a submission."""

    section_id: str
    section_title: str
    comments: str
    submitted_at: str  # ISO-8601 UTC timestamp
    field_values: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReviewsMeta:
    comments_submitted: bool = False
    comments_submitted_at: str | None = None  # first submission only
    history: list[SubmissionHistoryEntry] = field(default_factory=list)
