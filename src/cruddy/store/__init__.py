"""Migration persistence and the service layer on top of it."""

from cruddy.store.migrations import (
    MigrationStore,
    advance_snapshot,
    is_valid_migration_name,
    next_migration_id,
    retreat_snapshot,
    utc_now,
    validate_migration_name,
)
from cruddy.store.service import MigrationService

__all__ = [
    "MigrationService",
    "MigrationStore",
    "advance_snapshot",
    "is_valid_migration_name",
    "next_migration_id",
    "retreat_snapshot",
    "utc_now",
    "validate_migration_name",
]
