"""Entity metadata model: descriptors, change records, migrations and snapshots."""

from cruddy.model.changes import (
    CHANGE_TYPES,
    AttributeChange,
    Change,
    EntityAdded,
    EntityRemoved,
    FieldAdded,
    FieldModified,
    FieldRemoved,
    dump_changes,
    parse_changes,
)
from cruddy.model.metadata import (
    EntityDescriptor,
    PropertyDescriptor,
    RelationKind,
    RelationshipDescriptor,
    SortConfiguration,
    wire_name,
)
from cruddy.model.members import DeclaredMember, DiscoveredEntity, SemanticType
from cruddy.model.records import Migration, Snapshot

__all__ = [
    "CHANGE_TYPES",
    "AttributeChange",
    "Change",
    "DeclaredMember",
    "DiscoveredEntity",
    "EntityAdded",
    "EntityDescriptor",
    "EntityRemoved",
    "FieldAdded",
    "FieldModified",
    "FieldRemoved",
    "Migration",
    "PropertyDescriptor",
    "RelationKind",
    "RelationshipDescriptor",
    "SemanticType",
    "Snapshot",
    "SortConfiguration",
    "dump_changes",
    "parse_changes",
    "wire_name",
]
