"""Fluent builders behind EntityConfig.

Each builder records only what was explicitly configured. Everything left
unset is filled later by the convention resolver.
"""

from __future__ import annotations

from typing import Any, Self, TypeVar

from cruddy.introspection.members import declared_members
from cruddy.model.members import DeclaredMember, DiscoveredEntity
from cruddy.model.metadata import (
    EntityDescriptor,
    PropertyDescriptor,
    RelationKind,
    RelationshipDescriptor,
    SortConfiguration,
)

Target = type | str


def _target_name(target: Target) -> str:
    return target if isinstance(target, str) else target.__name__


class PropertyBuilder:
    """Configures one property. Display name defaults to the property name."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._values: dict[str, Any] = {"name": name, "display_name": name}

    def has_display_name(self, display_name: str) -> Self:
        self._values["display_name"] = display_name
        return self

    def has_placeholder(self, placeholder: str) -> Self:
        self._values["placeholder"] = placeholder
        return self

    def has_help_text(self, help_text: str) -> Self:
        self._values["help_text"] = help_text
        return self

    def is_required(self, message: str | None = None) -> Self:
        self._values["is_required"] = True
        self._values["required_message"] = message
        return self

    def has_min_length(self, length: int) -> Self:
        self._values["min_length"] = length
        return self

    def has_max_length(self, length: int) -> Self:
        self._values["max_length"] = length
        return self

    def has_range(self, minimum: float | None = None, maximum: float | None = None) -> Self:
        self._values["min_value"] = minimum
        self._values["max_value"] = maximum
        return self

    def matches(self, pattern: str, message: str | None = None) -> Self:
        self._values["validation_pattern"] = pattern
        self._values["validation_message"] = message
        return self

    def is_unique(self) -> Self:
        self._values["is_unique"] = True
        return self

    def show_in_list(self, order: int | None = None) -> Self:
        self._values["show_in_list"] = True
        self._values["list_order"] = order
        return self

    def show_in_form(self, order: int | None = None) -> Self:
        self._values["show_in_form"] = True
        self._values["form_order"] = order
        return self

    def show_in_detail(self) -> Self:
        self._values["show_in_detail"] = True
        return self

    def is_read_only(self) -> Self:
        self._values["is_read_only"] = True
        return self

    def is_hidden(self) -> Self:
        self._values["is_hidden"] = True
        return self

    def has_field_type(self, field_type: str) -> Self:
        self._values["field_type"] = field_type
        return self

    def has_format(self, fmt: str) -> Self:
        self._values["format"] = fmt
        return self

    def build(self) -> PropertyDescriptor:
        return PropertyDescriptor(**self._values)


class _RelationshipBuilderBase:
    def __init__(self, name: str, target: Target, kind: RelationKind, owner: EntityBuilder) -> None:
        self.name = name
        self._owner = owner
        self._values: dict[str, Any] = {
            "name": name,
            "target_entity_name": _target_name(target),
            "kind": kind,
        }

    def has_display_name(self, display_name: str) -> Self:
        self._values["display_name"] = display_name
        return self

    def has_description(self, description: str) -> Self:
        self._values["description"] = description
        return self

    def show_in_list(self) -> Self:
        self._values["show_in_list"] = True
        return self

    def show_in_form(self) -> Self:
        self._values["show_in_form"] = True
        return self

    def and_(self) -> EntityBuilder:
        """Return to the owning entity builder."""
        return self._owner

    def build(self) -> RelationshipDescriptor:
        return RelationshipDescriptor(**self._values)


class RelationshipBuilder(_RelationshipBuilderBase):
    """One-to-many, many-to-one and one-to-one relationships."""

    def with_foreign_key(self, name: str) -> Self:
        self._values["foreign_key_name"] = name
        return self

    def with_inverse(self, name: str) -> Self:
        self._values["inverse_property_name"] = name
        return self

    def is_required(self) -> Self:
        self._values["is_required"] = True
        return self

    def is_hidden(self) -> Self:
        self._values["is_hidden"] = True
        return self


class ManyToManyRelationshipBuilder(_RelationshipBuilderBase):
    def using_join_table(self, table_name: str) -> Self:
        self._values["join_table_name"] = table_name
        return self

    def with_inverse(self, name: str) -> Self:
        self._values["inverse_property_name"] = name
        return self


_B = TypeVar("_B", bound=_RelationshipBuilderBase)


class EntityBuilder:
    """Entity-level configuration plus the property and relationship builders.

    Builders are keyed by member name; asking twice for the same member
    returns the same builder, so configuration accumulates.
    """

    def __init__(self, entity_type: type) -> None:
        self.entity_type = entity_type
        self.members: tuple[DeclaredMember, ...] = tuple(declared_members(entity_type))
        self._member_names = {m.name for m in self.members}
        self._values: dict[str, Any] = {}
        self._properties: dict[str, PropertyBuilder] = {}
        self._relationships: dict[str, _RelationshipBuilderBase] = {}
        self._ignored: list[str] = []

    def _require_member(self, name: str) -> None:
        if name not in self._member_names:
            raise ValueError(f"Property {name} not found on type {self.entity_type.__name__}")

    def has_display_name(self, display_name: str) -> Self:
        self._values["display_name"] = display_name
        return self

    def has_plural_name(self, plural_name: str) -> Self:
        self._values["plural_name"] = plural_name
        return self

    def has_description(self, description: str) -> Self:
        self._values["description"] = description
        return self

    def has_icon(self, icon: str) -> Self:
        self._values["icon"] = icon
        return self

    def has_default_sort(self, field: str, descending: bool = False) -> Self:
        self._require_member(field)
        self._values["default_sort"] = SortConfiguration(field=field, descending=descending)
        return self

    def has_many(self, name: str, target: Target) -> RelationshipBuilder:
        return self._register(RelationshipBuilder(name, target, RelationKind.ONE_TO_MANY, self))

    def has_one(self, name: str, target: Target) -> RelationshipBuilder:
        return self._register(RelationshipBuilder(name, target, RelationKind.MANY_TO_ONE, self))

    def has_one_to_one(self, name: str, target: Target) -> RelationshipBuilder:
        return self._register(RelationshipBuilder(name, target, RelationKind.ONE_TO_ONE, self))

    def has_many_to_many(self, name: str, target: Target) -> ManyToManyRelationshipBuilder:
        return self._register(
            ManyToManyRelationshipBuilder(name, target, RelationKind.MANY_TO_MANY, self)
        )

    def _register(self, builder: _B) -> _B:
        # Redeclaring a relationship replaces the earlier one.
        self._require_member(builder.name)
        self._relationships[builder.name] = builder
        return builder

    def for_property(self, name: str) -> PropertyBuilder:
        self._require_member(name)
        if name not in self._properties:
            self._properties[name] = PropertyBuilder(name)
        return self._properties[name]

    def ignore(self, name: str) -> None:
        self._require_member(name)
        if name not in self._ignored:
            self._ignored.append(name)

    def build(self) -> DiscoveredEntity:
        entity = EntityDescriptor(
            name=self.entity_type.__name__,
            type_identity=self.entity_type,
            properties=[b.build() for b in self._properties.values()],
            relationships=[b.build() for b in self._relationships.values()],
            ignored_property_names=list(self._ignored),
            **self._values,
        )
        return DiscoveredEntity(entity=entity, members=self.members)
