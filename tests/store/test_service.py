"""Tests for MigrationService with a fake scanner."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from cruddy.config.models import BackendConfig, CruddyConfig
from cruddy.core.errors import (
    DuplicateMigrationIdError,
    InvalidNameError,
    NotInitializedError,
)
from cruddy.introspection.scanner import ScanResult
from cruddy.model.changes import EntityAdded, EntityRemoved, FieldModified
from cruddy.model.members import DeclaredMember, DiscoveredEntity, SemanticType
from cruddy.model.metadata import EntityDescriptor, PropertyDescriptor
from cruddy.store.migrations import is_valid_migration_name
from cruddy.store.service import MigrationService


class FakeScanner:
    """Returns whatever entities the test sets, records the calls."""

    def __init__(self) -> None:
        self.entities: list[DiscoveredEntity] = []
        self.calls: list[tuple[list[str], Path | None]] = []

    def __call__(self, modules: Sequence[str], search_path: Path | None) -> ScanResult:
        self.calls.append((list(modules), search_path))
        return ScanResult(entities=list(self.entities))


class SteppingClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


def _user(max_length: int | None = None) -> DiscoveredEntity:
    props = [PropertyDescriptor(name="Email", max_length=max_length)] if max_length else []
    return DiscoveredEntity(
        entity=EntityDescriptor(name="User", properties=props),
        members=(
            DeclaredMember("Email", SemanticType.STRING),
            DeclaredMember("CreatedAt", SemanticType.DATETIME),
        ),
    )


@pytest.fixture
def scanner() -> FakeScanner:
    return FakeScanner()


@pytest.fixture
def service(tmp_path: Path, scanner: FakeScanner) -> MigrationService:
    config = CruddyConfig(backend=BackendConfig(path="./api", modules=["app.cruddy"]))
    service = MigrationService(
        tmp_path,
        config=config,
        scanner=scanner,
        clock=SteppingClock(datetime(2025, 1, 1, tzinfo=UTC)),
    )
    service.initialize()
    return service


class TestMigrationNames:
    @pytest.mark.parametrize("name", ["Init", "add_users", "V2", "_x", "Ünïcode"])
    def test_valid(self, name: str) -> None:
        assert is_valid_migration_name(name)

    @pytest.mark.parametrize("name", ["", " ", "add users", "add-users", "a.b", "x/y"])
    def test_invalid(self, name: str) -> None:
        assert not is_valid_migration_name(name)

    def test_invalid_name_rejected_before_io(self, tmp_path: Path, scanner: FakeScanner) -> None:
        service = MigrationService(tmp_path, config=CruddyConfig(), scanner=scanner)

        with pytest.raises(InvalidNameError):
            service.create_migration("bad name")

        assert scanner.calls == []
        assert not (tmp_path / ".cruddy").exists()


class TestCreateMigration:
    def test_first_migration_adds_resolved_entity(
        self, service: MigrationService, scanner: FakeScanner, tmp_path: Path
    ) -> None:
        scanner.entities = [_user()]

        path = service.create_migration("Init")

        assert path == tmp_path / ".cruddy" / "migrations" / "20250101000000_Init.json"
        migration = service.store.load_migration(path)
        (change,) = migration.changes
        assert isinstance(change, EntityAdded)
        email = change.entity.get_property("Email")
        created = change.entity.get_property("CreatedAt")
        assert email is not None and email.field_type == "email"
        assert created is not None and created.is_read_only is True

    def test_snapshot_advanced(self, service: MigrationService, scanner: FakeScanner) -> None:
        scanner.entities = [_user()]

        service.create_migration("Init")

        snapshot = service.get_snapshot()
        assert snapshot.applied_migration_ids == ["20250101000000_Init"]
        assert snapshot.last_migration_id == "20250101000000_Init"
        assert [e.name for e in snapshot.entities] == ["User"]

    def test_scanner_gets_modules_and_backend_root(
        self, service: MigrationService, scanner: FakeScanner, tmp_path: Path
    ) -> None:
        service.create_migration("Init")

        assert scanner.calls == [(["app.cruddy"], (tmp_path / "api").resolve())]

    def test_second_migration_records_only_the_difference(
        self, service: MigrationService, scanner: FakeScanner
    ) -> None:
        scanner.entities = [_user()]
        service.create_migration("Init")
        scanner.entities = [_user(max_length=300)]

        path = service.create_migration("WidenEmail")

        (change,) = service.store.load_migration(path).changes
        assert isinstance(change, FieldModified)
        assert change.field_name == "Email"
        assert change.changed_attributes["maxLength"].old == 255
        assert change.changed_attributes["maxLength"].new == 300

    def test_unchanged_state_still_writes_empty_migration(
        self, service: MigrationService, scanner: FakeScanner
    ) -> None:
        scanner.entities = [_user()]
        service.create_migration("Init")

        path = service.create_migration("Nothing")

        assert json.loads(path.read_text())["changes"] == []
        assert len(service.get_snapshot().applied_migration_ids) == 2

    def test_entity_gone_is_removed(self, service: MigrationService, scanner: FakeScanner) -> None:
        scanner.entities = [_user()]
        service.create_migration("Init")
        scanner.entities = []

        path = service.create_migration("DropUser")

        assert service.store.load_migration(path).changes == [EntityRemoved(entity_name="User")]

    def test_requires_initialization(self, tmp_path: Path, scanner: FakeScanner) -> None:
        service = MigrationService(tmp_path, config=CruddyConfig(), scanner=scanner)

        with pytest.raises(NotInitializedError):
            service.create_migration("Init")

    def test_same_second_collision(self, tmp_path: Path, scanner: FakeScanner) -> None:
        moment = datetime(2025, 1, 1, tzinfo=UTC)
        service = MigrationService(
            tmp_path, config=CruddyConfig(), scanner=scanner, clock=lambda: moment
        )
        service.initialize()
        service.create_migration("Init")

        with pytest.raises(DuplicateMigrationIdError):
            service.create_migration("Init")

        assert service.get_snapshot().applied_migration_ids == ["20250101000000_Init"]


class TestPendingChanges:
    def test_reports_without_writing(self, service: MigrationService, scanner: FakeScanner) -> None:
        scanner.entities = [_user()]

        changes = service.pending_changes()

        assert [c.type for c in changes] == ["EntityAdded"]
        assert service.list_migrations() == []
        assert service.get_snapshot().applied_migration_ids == []

    def test_empty_after_migration(self, service: MigrationService, scanner: FakeScanner) -> None:
        scanner.entities = [_user()]
        service.create_migration("Init")

        assert service.pending_changes() == []


class TestRemoveAndList:
    def test_remove_last(self, service: MigrationService, scanner: FakeScanner) -> None:
        scanner.entities = [_user()]
        first = service.create_migration("Init")
        second = service.create_migration("Again")

        assert service.remove_last_migration() is True

        assert first.exists()
        assert not second.exists()
        assert service.get_snapshot().applied_migration_ids == [first.stem]

    def test_remove_on_empty(self, service: MigrationService) -> None:
        assert service.remove_last_migration() is False

    def test_list_sorted(self, service: MigrationService) -> None:
        service.create_migration("B")
        service.create_migration("A")

        assert [m.name for m in service.list_migrations()] == ["B", "A"]

    def test_get_snapshot_requires_initialization(self, tmp_path: Path) -> None:
        service = MigrationService(tmp_path, config=CruddyConfig(), scanner=FakeScanner())

        with pytest.raises(NotInitializedError):
            service.get_snapshot()
