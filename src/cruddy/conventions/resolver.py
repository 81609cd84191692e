"""Convention resolver: fills unset entity metadata with defaults.

Pure function of (partially configured entity, declared members). Explicit
configuration always wins; a convention only fills a value that is still
unset (empty string, None, or a False flag).

Rules:
- Entity display name defaults to the entity name, plural name to name + "s".
- Every declared member not ignored gets exactly one property descriptor.
- String members: "Email" -> field type "email", otherwise "text";
  max length 255.
- Date/time members: format "date"; *CreatedAt / *UpdatedAt become read-only.
- Field type falls back to "text" for every property.

Pluralization is a bare "s" suffix. Irregular plurals ("Person") must be set
explicitly with has_plural_name().
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog

from cruddy.config.constants import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_FIELD_TYPE,
    DEFAULT_STRING_MAX_LENGTH,
    EMAIL_FIELD_TYPE,
    PLURAL_SUFFIX,
    READ_ONLY_TIMESTAMP_SUFFIXES,
)
from cruddy.core.errors import DuplicateEntityError
from cruddy.model.members import DeclaredMember, SemanticType
from cruddy.model.metadata import EntityDescriptor, PropertyDescriptor

log = structlog.get_logger(__name__)


def resolve(entity: EntityDescriptor, declared_members: Iterable[DeclaredMember]) -> EntityDescriptor:
    """Return a copy of ``entity`` with conventions applied.

    Configured properties keep their order; properties synthesized for
    unconfigured members follow in declaration order.

    Raises:
        DuplicateEntityError: if two configured properties share a name.
    """
    ignored = set(entity.ignored_property_names)
    members: dict[str, DeclaredMember] = {}
    for member in declared_members:
        if member.name not in ignored:
            members.setdefault(member.name, member)

    configured: set[str] = set()
    properties: list[PropertyDescriptor] = []
    for prop in entity.properties:
        if prop.name in configured:
            raise DuplicateEntityError.duplicate_member(entity.name, prop.name)
        configured.add(prop.name)
        properties.append(_apply_property_conventions(prop, members.get(prop.name)))

    synthesized = 0
    for name, member in members.items():
        if name in configured:
            continue
        prop = PropertyDescriptor(name=name, display_name=name)
        properties.append(_apply_property_conventions(prop, member))
        synthesized += 1

    if synthesized:
        log.debug("conventions_synthesized", entity=entity.name, count=synthesized)

    return entity.model_copy(
        update={
            "display_name": entity.display_name or entity.name,
            "plural_name": entity.plural_name or entity.name + PLURAL_SUFFIX,
            "properties": properties,
        }
    )


def _semantic_type(prop: PropertyDescriptor, member: DeclaredMember | None) -> SemanticType | None:
    if member is not None:
        return member.semantic_type
    if prop.declared_type:
        try:
            return SemanticType(prop.declared_type)
        except ValueError:
            return None
    return None


def _apply_property_conventions(
    prop: PropertyDescriptor, member: DeclaredMember | None
) -> PropertyDescriptor:
    semantic = _semantic_type(prop, member)
    updates: dict[str, Any] = {}

    if not prop.display_name:
        updates["display_name"] = prop.name
    if prop.declared_type is None and semantic is not None:
        updates["declared_type"] = semantic.value

    field_type = prop.field_type
    if semantic is SemanticType.STRING and not field_type:
        field_type = EMAIL_FIELD_TYPE if prop.name.lower() == "email" else DEFAULT_FIELD_TYPE

    if semantic is not None and semantic.is_temporal and not prop.format:
        updates["format"] = DEFAULT_DATE_FORMAT
        if not prop.is_read_only and prop.name.lower().endswith(READ_ONLY_TIMESTAMP_SUFFIXES):
            updates["is_read_only"] = True

    if semantic is SemanticType.STRING and prop.max_length is None:
        updates["max_length"] = DEFAULT_STRING_MAX_LENGTH

    field_type = field_type or DEFAULT_FIELD_TYPE
    if field_type != prop.field_type:
        updates["field_type"] = field_type

    return prop.model_copy(update=updates) if updates else prop
