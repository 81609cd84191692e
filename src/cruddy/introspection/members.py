"""Declared members of Python entity classes.

Supports pydantic models, dataclasses and plain annotated classes. Only
public, non-ClassVar annotations count as members; order is declaration
order (base classes first, as Python's MRO annotation merge gives it).
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import enum
import types
import typing
import uuid
from collections.abc import Iterable
from decimal import Decimal
from typing import Annotated, Any, ClassVar, Literal, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from cruddy.model.members import DeclaredMember, SemanticType

_COLLECTION_ORIGINS: tuple[type, ...] = (list, tuple, set, frozenset, dict)


def declared_members(cls: type) -> list[DeclaredMember]:
    """Public members of ``cls`` with their semantic types."""
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return [
            DeclaredMember(name, semantic_type_of(info.annotation))
            for name, info in cls.model_fields.items()
            if not name.startswith("_")
        ]

    hints = _type_hints(cls)
    if dataclasses.is_dataclass(cls):
        return [
            DeclaredMember(f.name, semantic_type_of(hints.get(f.name, f.type)))
            for f in dataclasses.fields(cls)
            if not f.name.startswith("_")
        ]

    return [
        DeclaredMember(name, semantic_type_of(annotation))
        for name, annotation in hints.items()
        if not name.startswith("_") and get_origin(annotation) is not ClassVar and annotation is not ClassVar
    ]


def _type_hints(cls: type) -> dict[str, Any]:
    # Unresolvable forward references fall back to the raw annotations,
    # which then map to OBJECT.
    try:
        return get_type_hints(cls)
    except (NameError, TypeError):
        merged: dict[str, Any] = {}
        for base in reversed(cls.__mro__):
            merged.update(getattr(base, "__annotations__", {}))
        return merged


def semantic_type_of(annotation: Any) -> SemanticType:
    """Map a type annotation onto the small semantic type vocabulary.

    ``Optional[X]`` and ``Annotated[X, ...]`` are unwrapped first. Unknown
    or unresolved annotations are OBJECT.
    """
    annotation = _unwrap(annotation)
    origin = get_origin(annotation)

    if origin is Literal:
        return SemanticType.ENUM
    if origin is not None:
        if isinstance(origin, type) and issubclass(origin, Iterable):
            return SemanticType.COLLECTION
        return SemanticType.OBJECT

    if not isinstance(annotation, type):
        return SemanticType.OBJECT

    # bool subclasses int and datetime subclasses date: order matters.
    if issubclass(annotation, enum.Enum):
        return SemanticType.ENUM
    if issubclass(annotation, bool):
        return SemanticType.BOOLEAN
    if issubclass(annotation, str):
        return SemanticType.STRING
    if issubclass(annotation, (int, float, Decimal)):
        return SemanticType.NUMBER
    if issubclass(annotation, dt.datetime):
        return SemanticType.DATETIME
    if issubclass(annotation, dt.date):
        return SemanticType.DATE
    if issubclass(annotation, dt.time):
        return SemanticType.TIME
    if issubclass(annotation, uuid.UUID):
        return SemanticType.UUID
    if issubclass(annotation, _COLLECTION_ORIGINS):
        return SemanticType.COLLECTION
    return SemanticType.OBJECT


def _unwrap(annotation: Any) -> Any:
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation = get_args(annotation)[0]
            continue
        if origin is typing.Union or origin is types.UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            if len(args) == 1:
                annotation = args[0]
                continue
        return annotation
