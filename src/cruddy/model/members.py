"""Declared members of an entity type, as reported by introspection.

Plain frozen dataclasses, no I/O. This is the contract between the
introspection layer and the convention resolver.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from cruddy.model.metadata import EntityDescriptor


class SemanticType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    ENUM = "enum"
    UUID = "uuid"
    COLLECTION = "collection"
    OBJECT = "object"

    @property
    def is_temporal(self) -> bool:
        return self in (SemanticType.DATE, SemanticType.DATETIME, SemanticType.TIME)


@dataclass(frozen=True, slots=True)
class DeclaredMember:
    """One public member of an entity type."""

    name: str
    semantic_type: SemanticType


@dataclass(frozen=True, slots=True)
class DiscoveredEntity:
    """A raw (unresolved) entity descriptor plus its type's declared members."""

    entity: EntityDescriptor
    members: tuple[DeclaredMember, ...]
