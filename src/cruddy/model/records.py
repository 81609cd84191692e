"""Persisted records: one immutable Migration per diff, one cumulative Snapshot."""

from __future__ import annotations

from pydantic import Field

from cruddy.config.constants import SCHEMA_VERSION
from cruddy.model.changes import Change
from cruddy.model.metadata import EntityDescriptor, MetadataModel


class Migration(MetadataModel):
    """Immutable record of the difference between two successive snapshots."""

    schema_version: str = Field(default=SCHEMA_VERSION, alias="version")
    timestamp: str
    name: str
    migration_id: str
    changes: list[Change] = Field(default_factory=list)


class Snapshot(MetadataModel):
    """Cumulative recorded state: all entities plus migration history."""

    schema_version: str = Field(default=SCHEMA_VERSION, alias="version")
    last_migration_id: str | None = Field(default=None, alias="lastMigration")
    applied_migration_ids: list[str] = Field(default_factory=list, alias="appliedMigrations")
    entities: list[EntityDescriptor] = Field(default_factory=list)
