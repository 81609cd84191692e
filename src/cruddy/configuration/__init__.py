"""Fluent entity configuration API used by backend modules."""

from cruddy.configuration.builders import (
    EntityBuilder,
    ManyToManyRelationshipBuilder,
    PropertyBuilder,
    RelationshipBuilder,
)
from cruddy.configuration.entity_config import EntityConfig

__all__ = [
    "EntityBuilder",
    "EntityConfig",
    "ManyToManyRelationshipBuilder",
    "PropertyBuilder",
    "RelationshipBuilder",
]
