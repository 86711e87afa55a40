"""Exceptions raised by the review engine."""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for review engine errors."""


class UnknownSectionError(ReviewError, KeyError):
    """Raised when a section id is not present in the registry."""

    def __init__(self, section_id: str):
        self.section_id = section_id
        super().__init__(section_id)

    def __str__(self) -> str:
        return f"Unknown section: {self.section_id!r}"
