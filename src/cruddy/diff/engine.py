"""Pure metadata diff engine.

Compares two full entity states (previous snapshot vs. current resolved
state) and classifies changes. No file access, purely functional.

Emission order is deterministic:
- EntityAdded for every new entity, sorted by name
- EntityRemoved for every dropped entity, sorted by name
- for each entity present on both sides, sorted by name:
  added / removed / modified properties (each group sorted by name),
  then added / removed / modified relationships in the same shape

A field present on both sides with no tracked difference emits nothing.
Malformed input raises before anything is returned.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

import structlog

from cruddy.core.errors import DuplicateEntityError, InvalidEntityError
from cruddy.model.changes import (
    AttributeChange,
    Change,
    EntityAdded,
    EntityRemoved,
    FieldAdded,
    FieldModified,
    FieldRemoved,
    MemberKind,
)
from cruddy.model.metadata import (
    EntityDescriptor,
    MetadataModel,
    PropertyDescriptor,
    RelationshipDescriptor,
    wire_name,
)

log = structlog.get_logger(__name__)

TRACKED_PROPERTY_ATTRIBUTES: tuple[str, ...] = (
    "display_name",
    "help_text",
    "placeholder",
    "field_type",
    "format",
    "is_required",
    "is_read_only",
    "is_unique",
    "min_length",
    "max_length",
    "min_value",
    "max_value",
    "show_in_list",
    "show_in_form",
    "show_in_detail",
    "required_message",
    "validation_pattern",
    "validation_message",
)

TRACKED_RELATIONSHIP_ATTRIBUTES: tuple[str, ...] = (
    "target_entity_name",
    "foreign_key_name",
    "inverse_property_name",
    "join_table_name",
    "kind",
    "is_required",
    "show_in_list",
    "show_in_form",
)

_M = TypeVar("_M", PropertyDescriptor, RelationshipDescriptor)


def compute_diff(
    previous: Sequence[EntityDescriptor],
    current: Sequence[EntityDescriptor],
) -> list[Change]:
    """Compute the ordered change list that turns ``previous`` into ``current``.

    Args:
        previous: entities recorded in the last snapshot
        current: freshly resolved entities

    Returns:
        Changes in deterministic order; empty when both states match.

    Raises:
        InvalidEntityError: an entity has an empty name.
        DuplicateEntityError: an entity name, or a member name within one
            entity, appears twice.
    """
    before = _index_entities(previous)
    after = _index_entities(current)

    changes: list[Change] = []

    for name in sorted(after.keys() - before.keys()):
        changes.append(EntityAdded(entity_name=name, entity=after[name]))

    for name in sorted(before.keys() - after.keys()):
        changes.append(EntityRemoved(entity_name=name))

    for name in sorted(after.keys() & before.keys()):
        changes.extend(_diff_entity(before[name], after[name]))

    log.debug(
        "diff_computed",
        previous=len(before),
        current=len(after),
        changes=len(changes),
    )
    return changes


def _index_entities(entities: Sequence[EntityDescriptor]) -> dict[str, EntityDescriptor]:
    index: dict[str, EntityDescriptor] = {}
    for position, entity in enumerate(entities):
        if not entity.name:
            raise InvalidEntityError.missing_name(position)
        if entity.name in index:
            raise DuplicateEntityError.duplicate_entity(entity.name)
        # Checked for every entity, including ones only added or removed
        _index_members(entity.name, entity.properties)
        _index_members(entity.name, entity.relationships)
        index[entity.name] = entity
    return index


def _index_members(entity_name: str, members: Sequence[_M]) -> dict[str, _M]:
    index: dict[str, _M] = {}
    for member in members:
        if member.name in index:
            raise DuplicateEntityError.duplicate_member(entity_name, member.name)
        index[member.name] = member
    return index


def _diff_entity(before: EntityDescriptor, after: EntityDescriptor) -> list[Change]:
    """Field-level diff for one entity present in both states."""
    name = after.name
    changes = _diff_members(
        name,
        "property",
        _index_members(name, before.properties),
        _index_members(name, after.properties),
        TRACKED_PROPERTY_ATTRIBUTES,
    )
    changes.extend(
        _diff_members(
            name,
            "relationship",
            _index_members(name, before.relationships),
            _index_members(name, after.relationships),
            TRACKED_RELATIONSHIP_ATTRIBUTES,
        )
    )
    return changes


def _diff_members(
    entity_name: str,
    member: MemberKind,
    before: dict[str, _M],
    after: dict[str, _M],
    tracked: tuple[str, ...],
) -> list[Change]:
    changes: list[Change] = []

    for name in sorted(after.keys() - before.keys()):
        changes.append(FieldAdded(entity_name=entity_name, member=member, field=after[name]))

    for name in sorted(before.keys() - after.keys()):
        changes.append(FieldRemoved(entity_name=entity_name, member=member, field_name=name))

    for name in sorted(after.keys() & before.keys()):
        changed = changed_attributes(before[name], after[name], tracked)
        if changed:
            changes.append(
                FieldModified(
                    entity_name=entity_name,
                    member=member,
                    field_name=name,
                    changed_attributes=changed,
                )
            )

    return changes


def changed_attributes(
    old: MetadataModel,
    new: MetadataModel,
    tracked: tuple[str, ...],
) -> dict[str, AttributeChange]:
    """Pairwise value comparison of the tracked attributes.

    Keys are wire (camelCase) names, in tracked order.
    """
    result: dict[str, AttributeChange] = {}
    for attribute in tracked:
        old_value: Any = getattr(old, attribute)
        new_value: Any = getattr(new, attribute)
        if old_value != new_value:
            result[wire_name(type(new), attribute)] = AttributeChange(old=old_value, new=new_value)
    return result
