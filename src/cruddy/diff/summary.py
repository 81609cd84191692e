"""Human-readable summaries of change lists."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from cruddy.core.errors import InternalError
from cruddy.model.changes import (
    CHANGE_TYPES,
    Change,
    EntityAdded,
    EntityRemoved,
    FieldAdded,
    FieldModified,
    FieldRemoved,
)


@dataclass
class ChangeSummary:
    """Change counts by type."""

    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def __str__(self) -> str:
        parts = [f"{count} {kind}" for kind, count in self.counts.items() if count]
        return ", ".join(parts) if parts else "no changes"


def summarize_changes(changes: list[Change]) -> ChangeSummary:
    counter = Counter(change.type for change in changes)
    return ChangeSummary(counts={kind: counter.get(kind, 0) for kind in CHANGE_TYPES})


def _member_label(change: FieldAdded | FieldRemoved | FieldModified) -> str:
    return "Relationship" if change.member == "relationship" else "Field"


def describe_change(change: Change) -> tuple[str, str]:
    """Return (style, one-line description) for a change.

    Styles are "added", "removed" or "modified".
    """
    match change:
        case EntityAdded():
            count = len(change.entity.properties)
            return "added", f"Entity added: {change.entity_name} ({count} properties)"
        case EntityRemoved():
            return "removed", f"Entity removed: {change.entity_name}"
        case FieldAdded():
            label = _member_label(change)
            return "added", f"{label} added: {change.entity_name}.{change.field_name}"
        case FieldRemoved():
            label = _member_label(change)
            return "removed", f"{label} removed: {change.entity_name}.{change.field_name}"
        case FieldModified():
            label = _member_label(change)
            return "modified", f"{label} modified: {change.entity_name}.{change.field_name}"
    raise InternalError.unexpected("unknown change type", change_type=type(change).__name__)


def describe_attribute_changes(change: FieldModified, *, limit: int = 3) -> list[str]:
    """Lines like ``maxLength: 255 → 300``; extra changes are collapsed."""
    items = list(change.changed_attributes.items())
    lines = [f"{name}: {value.old} → {value.new}" for name, value in items[:limit]]
    if len(items) > limit:
        lines.append(f"... and {len(items) - limit} more changes")
    return lines
