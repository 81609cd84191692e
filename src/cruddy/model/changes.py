"""Migration change records.

``Change`` is a closed union of five variants discriminated by ``type``,
matching the migration file format. Relationship changes reuse the field
variants with ``member="relationship"``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import Field, TypeAdapter, model_validator

from cruddy.model.metadata import (
    EntityDescriptor,
    MetadataModel,
    PropertyDescriptor,
    RelationshipDescriptor,
)

MemberKind = Literal["property", "relationship"]


class AttributeChange(MetadataModel):
    """Old and new value of one tracked attribute."""

    old: Any = None
    new: Any = None


class EntityAdded(MetadataModel):
    type: Literal["EntityAdded"] = "EntityAdded"
    entity_name: str
    entity: EntityDescriptor


class EntityRemoved(MetadataModel):
    type: Literal["EntityRemoved"] = "EntityRemoved"
    entity_name: str


class FieldAdded(MetadataModel):
    type: Literal["FieldAdded"] = "FieldAdded"
    entity_name: str
    member: MemberKind = "property"
    # Relationship first: a relationship record would also validate as a property.
    field: Annotated[
        RelationshipDescriptor | PropertyDescriptor,
        Field(union_mode="left_to_right"),
    ]

    @property
    def field_name(self) -> str:
        return self.field.name


class FieldRemoved(MetadataModel):
    type: Literal["FieldRemoved"] = "FieldRemoved"
    entity_name: str
    member: MemberKind = "property"
    field_name: str


class FieldModified(MetadataModel):
    type: Literal["FieldModified"] = "FieldModified"
    entity_name: str
    member: MemberKind = "property"
    field_name: str
    changed_attributes: dict[str, AttributeChange]

    @model_validator(mode="after")
    def _require_changes(self) -> FieldModified:
        if not self.changed_attributes:
            raise ValueError("FieldModified requires at least one changed attribute")
        return self


Change = Annotated[
    EntityAdded | EntityRemoved | FieldAdded | FieldRemoved | FieldModified,
    Field(discriminator="type"),
]

CHANGE_TYPES = ("EntityAdded", "EntityRemoved", "FieldAdded", "FieldRemoved", "FieldModified")

_change_list_adapter: TypeAdapter[list[Change]] = TypeAdapter(list[Change])


def parse_changes(data: Any) -> list[Change]:
    """Validate a list of raw change dicts (wire names)."""
    return _change_list_adapter.validate_python(data)


def dump_changes(changes: list[Change]) -> list[dict[str, Any]]:
    return _change_list_adapter.dump_python(changes, mode="json", by_alias=True)
