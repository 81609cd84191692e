"""Migration service: the operations the CLI calls.

Wires project config, module scanning, convention resolution, the diff
engine and the migration store into one read-modify-write cycle per call.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from cruddy.config.constants import WORKSPACE_DIR_NAME
from cruddy.config.loader import backend_root, load_config
from cruddy.config.models import CruddyConfig
from cruddy.conventions.resolver import resolve
from cruddy.diff.engine import compute_diff
from cruddy.introspection.scanner import ScanResult, scan_modules
from cruddy.model.changes import Change
from cruddy.model.metadata import EntityDescriptor
from cruddy.model.records import Migration, Snapshot
from cruddy.store.migrations import (
    Clock,
    MigrationStore,
    advance_snapshot,
    utc_now,
    validate_migration_name,
)

log = structlog.get_logger(__name__)

Scanner = Callable[[Sequence[str], Path | None], ScanResult]


class MigrationService:
    """Migration operations for one project directory.

    Args:
        project_root: Directory holding ``.cruddy/``.
        config: Project config; loaded from ``.cruddy/config.yaml`` when omitted.
        scanner: Produces discovered entities from module names. Tests pass a
            fake to avoid importing real modules.
        clock: Source of migration timestamps.
    """

    def __init__(
        self,
        project_root: Path,
        config: CruddyConfig | None = None,
        scanner: Scanner = scan_modules,
        clock: Clock = utc_now,
    ) -> None:
        self.project_root = project_root
        self.config = config if config is not None else load_config(project_root)
        self.scanner = scanner
        self.clock = clock
        self.store = MigrationStore(project_root / WORKSPACE_DIR_NAME)

    def initialize(self) -> Snapshot:
        """Create the workspace with an empty snapshot (existing one kept)."""
        return self.store.initialize()

    def is_initialized(self) -> bool:
        return self.store.is_initialized()

    def current_entities(self) -> list[EntityDescriptor]:
        """Scan the configured backend modules and resolve conventions."""
        result = self.scanner(
            list(self.config.backend.modules),
            backend_root(self.project_root, self.config),
        )
        entities = [resolve(found.entity, found.members) for found in result.entities]
        log.debug("entities_resolved", entities=len(entities), failures=len(result.failures))
        return entities

    def pending_changes(self) -> list[Change]:
        """Changes between the recorded snapshot and the current code. Writes nothing."""
        self.store.ensure_initialized()
        snapshot = self.store.load_snapshot()
        return compute_diff(snapshot.entities, self.current_entities())

    def create_migration(self, name: str) -> Path:
        """Record the current changes as a new migration and advance the snapshot.

        A migration is written even when nothing changed.

        Returns:
            Path of the new migration file.

        Raises:
            InvalidNameError: before any I/O, if the name is not valid.
            NotInitializedError: if the workspace does not exist.
            DuplicateMigrationIdError: same name within the same second.
        """
        validate_migration_name(name)
        self.store.ensure_initialized()

        snapshot = self.store.load_snapshot()
        current = self.current_entities()
        changes = compute_diff(snapshot.entities, current)

        # One clock reading for both the file and the snapshot entry.
        moment = self.clock()
        migration = self.store.create_migration(name, changes, clock=lambda: moment)

        self.store.save_snapshot(advance_snapshot(snapshot, migration.migration_id, current))
        return self.store.migration_path(migration.migration_id)

    def remove_last_migration(self) -> bool:
        """Delete the last applied migration. False when there is none."""
        self.store.ensure_initialized()
        return self.store.remove_last(self.store.load_snapshot())

    def list_migrations(self) -> list[Migration]:
        return self.store.list_migrations()

    def get_snapshot(self) -> Snapshot:
        self.store.ensure_initialized()
        return self.store.load_snapshot()
