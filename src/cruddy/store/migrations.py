"""Migration store: immutable migration files plus the cumulative snapshot.

Layout inside the workspace (.cruddy/):

    migrations/<migrationId>.json   one file per migration, never rewritten
    snapshot.json                   current recorded state + applied ids

Lifecycle: Uninitialized -> Initialized(empty snapshot) -> Initialized(k).
Only create_migration() and remove_last() move between initialized states,
and removal is last-in-first-out.

There is no locking: two concurrent invocations against one workspace can
lose an update. Each file write goes through a temp file + os.replace so an
interrupted write never leaves a truncated record behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from cruddy.config.constants import (
    MIGRATION_FILE_GLOB,
    MIGRATION_ID_TIME_FORMAT,
    MIGRATION_TIMESTAMP_FORMAT,
    MIGRATIONS_DIR_NAME,
    SCHEMA_VERSION,
    SNAPSHOT_FILE_NAME,
)
from cruddy.core.errors import (
    DuplicateMigrationIdError,
    InvalidNameError,
    NotInitializedError,
    SerializationError,
)
from cruddy.model.changes import Change
from cruddy.model.metadata import EntityDescriptor
from cruddy.model.records import Migration, Snapshot

log = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def _as_utc(moment: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def is_valid_migration_name(name: str) -> bool:
    """Letters, digits and underscores only; not blank."""
    return bool(name.strip()) and all(c.isalnum() or c == "_" for c in name)


def validate_migration_name(name: str) -> None:
    if not is_valid_migration_name(name):
        raise InvalidNameError.invalid_migration_name(name)


def next_migration_id(name: str, clock: Clock = utc_now) -> str:
    """``YYYYMMDDHHMMSS_<name>``: fixed width, sorts by creation second."""
    return f"{_as_utc(clock()).strftime(MIGRATION_ID_TIME_FORMAT)}_{name}"


def advance_snapshot(
    snapshot: Snapshot,
    migration_id: str,
    entities: Sequence[EntityDescriptor],
) -> Snapshot:
    """Record ``migration_id`` as applied and replace the entity list wholesale."""
    return snapshot.model_copy(
        update={
            "last_migration_id": migration_id,
            "applied_migration_ids": [*snapshot.applied_migration_ids, migration_id],
            "entities": list(entities),
        }
    )


def retreat_snapshot(snapshot: Snapshot) -> Snapshot:
    """Drop the most recent applied id. Entities are left as recorded."""
    remaining = snapshot.applied_migration_ids[:-1]
    return snapshot.model_copy(
        update={
            "applied_migration_ids": remaining,
            "last_migration_id": remaining[-1] if remaining else None,
        }
    )


def _atomic_write_text(path: Path, content: str) -> None:
    """Write via a temp file in the same directory, then rename over ``path``."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _to_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class MigrationStore:
    """Reads and writes migration records and the snapshot of one workspace."""

    def __init__(self, workspace: Path) -> None:
        self.workspace = workspace

    @property
    def migrations_dir(self) -> Path:
        return self.workspace / MIGRATIONS_DIR_NAME

    @property
    def snapshot_path(self) -> Path:
        return self.workspace / SNAPSHOT_FILE_NAME

    def migration_path(self, migration_id: str) -> Path:
        return self.migrations_dir / f"{migration_id}.json"

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def is_initialized(self) -> bool:
        return self.migrations_dir.is_dir()

    def ensure_initialized(self) -> None:
        if not self.is_initialized():
            raise NotInitializedError.missing_workspace(str(self.workspace))

    def initialize(self, entities: Sequence[EntityDescriptor] = ()) -> Snapshot:
        """Create the workspace layout and an initial snapshot.

        An existing snapshot is kept as-is.
        """
        self.migrations_dir.mkdir(parents=True, exist_ok=True)
        if self.snapshot_path.exists():
            return self.load_snapshot()
        snapshot = Snapshot(entities=list(entities))
        self.save_snapshot(snapshot)
        log.info("workspace_initialized", workspace=str(self.workspace), entities=len(entities))
        return snapshot

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def load_snapshot(self) -> Snapshot:
        """Load the snapshot; a missing file means an empty snapshot.

        Raises:
            SerializationError: the file exists but is not a valid snapshot.
        """
        if not self.snapshot_path.exists():
            return Snapshot()
        data = self._read_json(self.snapshot_path)
        try:
            return Snapshot.model_validate(data)
        except ValidationError as e:
            raise SerializationError.invalid_file(str(self.snapshot_path), str(e)) from e

    def save_snapshot(self, snapshot: Snapshot) -> None:
        _atomic_write_text(self.snapshot_path, _to_json(snapshot.to_json_dict()))
        log.debug(
            "snapshot_saved",
            last_migration=snapshot.last_migration_id,
            entities=len(snapshot.entities),
        )

    # ------------------------------------------------------------------
    # Migrations
    # ------------------------------------------------------------------

    def create_migration(
        self,
        name: str,
        changes: Sequence[Change],
        *,
        clock: Clock = utc_now,
    ) -> Migration:
        """Build a migration record and write it to a new file.

        Raises:
            InvalidNameError: the name is not letters, digits and underscores.
            NotInitializedError: the workspace does not exist.
            DuplicateMigrationIdError: a file with the same id exists.
        """
        validate_migration_name(name)
        self.ensure_initialized()

        moment = _as_utc(clock())
        migration_id = next_migration_id(name, lambda: moment)
        path = self.migration_path(migration_id)
        if path.exists():
            raise DuplicateMigrationIdError.already_exists(migration_id, str(path))

        migration = Migration(
            schema_version=SCHEMA_VERSION,
            timestamp=moment.strftime(MIGRATION_TIMESTAMP_FORMAT),
            name=name,
            migration_id=migration_id,
            changes=list(changes),
        )
        _atomic_write_text(path, _to_json(migration.to_json_dict()))
        log.info("migration_created", migration_id=migration_id, changes=len(changes))
        return migration

    def load_migration(self, path: Path) -> Migration:
        data = self._read_json(path)
        try:
            return Migration.model_validate(data)
        except ValidationError as e:
            raise SerializationError.invalid_file(str(path), str(e)) from e

    def list_migrations(self, *, strict: bool = False) -> list[Migration]:
        """All migration records, sorted by id.

        Invalid files are skipped with a warning unless ``strict`` is set.
        """
        self.ensure_initialized()

        migrations: list[Migration] = []
        for path in sorted(self.migrations_dir.glob(MIGRATION_FILE_GLOB)):
            try:
                migrations.append(self.load_migration(path))
            except SerializationError as e:
                if strict:
                    raise
                log.warning("migration_skipped", path=str(path), reason=e.details.get("reason"))
        return sorted(migrations, key=lambda m: m.migration_id)

    def remove_last(self, snapshot: Snapshot) -> bool:
        """Delete the most recently applied migration and persist the snapshot.

        Returns False, touching nothing, when no migration is applied.
        """
        self.ensure_initialized()

        if not snapshot.applied_migration_ids:
            return False

        migration_id = snapshot.applied_migration_ids[-1]
        path = self.migration_path(migration_id)
        if path.exists():
            path.unlink()
        else:
            log.warning("migration_file_missing", migration_id=migration_id, path=str(path))

        self.save_snapshot(retreat_snapshot(snapshot))
        log.info("migration_removed", migration_id=migration_id)
        return True

    # ------------------------------------------------------------------

    @staticmethod
    def _read_json(path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError as e:
            raise SerializationError.invalid_file(str(path), f"not UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise SerializationError.invalid_file(str(path), f"invalid JSON: {e}") from e
