"""Core module exports."""

from cruddy.core.errors import (
    ConfigError,
    CruddyError,
    DuplicateEntityError,
    DuplicateMigrationIdError,
    ErrorCode,
    InternalError,
    IntrospectionError,
    InvalidEntityError,
    InvalidNameError,
    NotInitializedError,
    SerializationError,
)
from cruddy.core.logging import (
    clear_invocation_id,
    configure_logging,
    get_invocation_id,
    get_logger,
    set_invocation_id,
)
from cruddy.core.progress import header, pluralize, status

__all__ = [
    # Errors
    "ConfigError",
    "CruddyError",
    "DuplicateEntityError",
    "DuplicateMigrationIdError",
    "ErrorCode",
    "InternalError",
    "IntrospectionError",
    "InvalidEntityError",
    "InvalidNameError",
    "NotInitializedError",
    "SerializationError",
    # Logging
    "clear_invocation_id",
    "configure_logging",
    "get_invocation_id",
    "get_logger",
    "set_invocation_id",
    # Progress
    "header",
    "pluralize",
    "status",
]
