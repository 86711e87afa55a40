"""Missing-field comment generation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sectionreview_core.sections import Section, SectionRegistry

_MISSING_PREFIX = "Falta"


def is_empty(value: Any) -> bool:
    """Return True for None, blank strings and empty lists."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False


def missing_fields(section: Section, values: dict[str, Any]) -> list[str]:
    """Return the section's governed fields that are empty, in section order."""
    return [name for name in section.fields if is_empty(values.get(name))]


def generate_missing_fields_comment(
    registry: SectionRegistry, section_id: str, values: dict[str, Any]
) -> str | None:
    """Build the auto-generated correction comment for a rejected section.

    One ``Falta <label>`` line per empty field. Returns None when nothing is
    missing so the caller can leave the comment absent.
    """
    section = registry.get(section_id)
    lines = [f"{_MISSING_PREFIX} {registry.label(name)}" for name in missing_fields(section, values)]
    return "\n".join(lines) or None
