"""Cruddy error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Metadata / diff input
- 4xxx: Migration store
- 5xxx: Introspection
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Stable numeric codes, grouped in ranges by area."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Metadata (3xxx)
    ENTITY_NAME_MISSING = 3001
    DUPLICATE_ENTITY = 3002
    DUPLICATE_MEMBER = 3003

    # Store (4xxx)
    NOT_INITIALIZED = 4001
    INVALID_MIGRATION_NAME = 4002
    DUPLICATE_MIGRATION_ID = 4003
    SERIALIZATION_ERROR = 4004

    # Introspection (5xxx)
    INTROSPECTION_FAILED = 5001
    MODULE_IMPORT_FAILED = 5002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class CruddyError(Exception):
    """Base of every error cruddy raises on purpose.

    The CLI turns these into a one-line message; ``details`` only goes to
    the debug log.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        return self.code.name

    def __str__(self) -> str:
        return f"{self.error_name} ({self.code.value}): {self.message}"


class ConfigError(CruddyError):
    """A config file or setting cruddy cannot use."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Bad setting {field}: {reason}",
            details={"field": field, "value": repr(value), "reason": reason},
        )


class InvalidEntityError(CruddyError):
    """Malformed entity metadata handed to a pure component."""

    @classmethod
    def missing_name(cls, position: int) -> "InvalidEntityError":
        return cls(
            code=ErrorCode.ENTITY_NAME_MISSING,
            message=f"Entity at position {position} has no name",
            details={"position": position},
        )


class DuplicateEntityError(CruddyError):
    """Two entities (or two members of one entity) share a name."""

    @classmethod
    def duplicate_entity(cls, name: str) -> "DuplicateEntityError":
        return cls(
            code=ErrorCode.DUPLICATE_ENTITY,
            message=f"Entity '{name}' appears more than once",
            details={"entity": name},
        )

    @classmethod
    def duplicate_member(cls, entity: str, member: str) -> "DuplicateEntityError":
        return cls(
            code=ErrorCode.DUPLICATE_MEMBER,
            message=f"Member '{member}' appears more than once on entity '{entity}'",
            details={"entity": entity, "member": member},
        )


class NotInitializedError(CruddyError):
    """The project has no .cruddy workspace."""

    @classmethod
    def missing_workspace(cls, path: str) -> "NotInitializedError":
        return cls(
            code=ErrorCode.NOT_INITIALIZED,
            message=f"Migration directory not initialized at {path}. Run 'cruddy init' first.",
            details={"path": path},
        )


class InvalidNameError(CruddyError):
    """Migration name fails the allowed-character check."""

    @classmethod
    def invalid_migration_name(cls, name: str) -> "InvalidNameError":
        return cls(
            code=ErrorCode.INVALID_MIGRATION_NAME,
            message=(
                f"Invalid migration name '{name}'. "
                "Use alphanumeric characters and underscores only."
            ),
            details={"name": name},
        )


class DuplicateMigrationIdError(CruddyError):
    """A migration file with the same id already exists."""

    @classmethod
    def already_exists(cls, migration_id: str, path: str) -> "DuplicateMigrationIdError":
        return cls(
            code=ErrorCode.DUPLICATE_MIGRATION_ID,
            message=f"Migration '{migration_id}' already exists at {path}",
            details={"migration_id": migration_id, "path": path},
        )


class SerializationError(CruddyError):
    """A stored migration or snapshot file does not match the format."""

    @classmethod
    def invalid_file(cls, path: str, reason: str) -> "SerializationError":
        return cls(
            code=ErrorCode.SERIALIZATION_ERROR,
            message=f"Invalid record at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class IntrospectionError(CruddyError):
    """Failure reported by the entity introspection collaborator."""

    @classmethod
    def import_failed(cls, module: str, reason: str) -> "IntrospectionError":
        return cls(
            code=ErrorCode.MODULE_IMPORT_FAILED,
            message=f"Could not import module '{module}': {reason}",
            details={"module": module, "reason": reason},
        )

    @classmethod
    def scan_failed(cls, module: str, config: str, reason: str) -> "IntrospectionError":
        return cls(
            code=ErrorCode.INTROSPECTION_FAILED,
            message=f"Could not build entity configuration {config} in '{module}': {reason}",
            details={"module": module, "config": config, "reason": reason},
        )


class InternalError(CruddyError):
    """A state the code should never reach."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Bug in cruddy: {reason}",
            details=details,
        )
