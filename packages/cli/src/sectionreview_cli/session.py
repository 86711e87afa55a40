"""Wiring between a configured BaseStore and a ReviewStateStore.

The CLI owns this mapping: sectionreview_core has no store knowledge and
sectionreview_store has no engine knowledge. The CLI bridges the two.
"""

from __future__ import annotations

import click

from sectionreview_core.errors import UnknownSectionError
from sectionreview_core.form import PropertyForm
from sectionreview_core.sections import build_registry
from sectionreview_core.state import ReviewStateStore


def open_session(ctx: click.Context, property_id: str) -> tuple[ReviewStateStore, PropertyForm]:
    """Load a property and its review state; pending writes are flushed on exit.

    Loading runs the drift check once, so edits made outside this tool since
    the last review reopen the affected sections straight away.
    """
    obj = ctx.obj or {}
    store = obj.get("store")
    config = obj.get("config") or {}
    if store is None:
        raise click.UsageError("No store available.")

    try:
        registry = build_registry(config)
    except ValueError as e:
        raise click.UsageError(str(e))

    record = store.load(property_id)
    fields = record.fields if record is not None else {}
    blob = record.review_state if record is not None else None

    try:
        review = ReviewStateStore.load(
            property_id,
            blob,
            values=fields,
            registry=registry,
            save=store.save_review_state,
            debounce_seconds=config.get("debounce_seconds", 1.0),
            required_sections=config.get("required_sections"),
        )
    except UnknownSectionError as e:
        raise click.UsageError(f"required_sections: {e}")

    ctx.call_on_close(review.flush)
    return review, PropertyForm(fields)


def check_section(review: ReviewStateStore, section_id: str) -> None:
    if section_id not in review.registry:
        known = ", ".join(review.registry.ids)
        raise click.BadParameter(f"Unknown section {section_id!r}. Known sections: {known}", param_hint="SECTION")
