"""Entity metadata value types.

Python attributes are snake_case; serialized records use the camelCase names
(``displayName``, ``maxLength``...) produced by the alias generator. All models
are frozen: derive new values with ``model_copy(update=...)``.

"Unset" is ``""`` for strings, ``None`` for nullable values and ``False`` for
flags. Convention resolution only ever fills unset values.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MetadataModel(BaseModel):
    """Base for all serialized metadata records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump with wire names and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)


class RelationKind(StrEnum):
    ONE_TO_ONE = "OneToOne"
    ONE_TO_MANY = "OneToMany"
    MANY_TO_ONE = "ManyToOne"
    MANY_TO_MANY = "ManyToMany"


class SortConfiguration(MetadataModel):
    field: str
    descending: bool = False


class PropertyDescriptor(MetadataModel):
    """One entity field and its UI/validation metadata."""

    name: str = Field(min_length=1)
    declared_type: str | None = None  # semantic type tag, see introspection.members
    display_name: str = ""
    placeholder: str = ""
    help_text: str = ""

    # Validation
    is_required: bool = False
    required_message: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    min_value: float | None = None
    max_value: float | None = None
    validation_pattern: str | None = None
    validation_message: str | None = None
    is_unique: bool = False

    # UI behavior
    show_in_list: bool = False
    list_order: int | None = None
    show_in_form: bool = False
    form_order: int | None = None
    show_in_detail: bool = False
    is_read_only: bool = False
    is_hidden: bool = False

    # Rendering; field_type is always set once conventions have run
    field_type: str | None = None
    format: str = ""


class RelationshipDescriptor(MetadataModel):
    """One navigation relationship from an entity to another."""

    name: str = Field(min_length=1)
    target_entity_name: str
    kind: RelationKind
    foreign_key_name: str | None = None
    inverse_property_name: str | None = None
    join_table_name: str | None = None  # many-to-many only
    display_name: str | None = None
    description: str | None = None
    is_required: bool = False
    show_in_list: bool = False
    show_in_form: bool = False
    is_hidden: bool = False


class EntityDescriptor(MetadataModel):
    """The recorded shape of one entity.

    ``type_identity`` points at the declared Python class. It is only used by
    the introspection layer: it is never serialized and never compared.
    """

    name: str
    type_identity: Any = Field(default=None, exclude=True, repr=False)
    display_name: str = ""
    plural_name: str = ""
    description: str = ""
    icon: str = ""
    default_sort: SortConfiguration | None = None
    properties: list[PropertyDescriptor] = Field(default_factory=list)
    relationships: list[RelationshipDescriptor] = Field(default_factory=list)
    ignored_property_names: list[str] = Field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityDescriptor):
            return NotImplemented
        return self.model_dump() == other.model_dump()

    __hash__ = None  # type: ignore[assignment]

    def get_property(self, name: str) -> PropertyDescriptor | None:
        return next((p for p in self.properties if p.name == name), None)

    def get_relationship(self, name: str) -> RelationshipDescriptor | None:
        return next((r for r in self.relationships if r.name == name), None)


def wire_name(model: type[BaseModel], attribute: str) -> str:
    """Serialized (camelCase) name of a model attribute."""
    return model.model_fields[attribute].alias or attribute
