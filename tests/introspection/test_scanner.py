"""Tests for module scanning.

Each test writes throwaway backend modules under tmp_path with unique
names so repeated imports never hit a cached module.
"""

from __future__ import annotations

import sys
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path
from uuid import uuid4

import pytest
from structlog.testing import capture_logs

from cruddy.core.errors import ErrorCode
from cruddy.introspection.scanner import ScanResult, scan_modules
from cruddy.model.members import SemanticType

ModuleWriter = Callable[[str], str]

USERS_MODULE = """
import datetime as dt
from dataclasses import dataclass

from cruddy.configuration import EntityConfig


@dataclass
class User:
    Email: str
    Name: str
    CreatedAt: dt.datetime


@dataclass
class Post:
    Title: str


class UserConfig(EntityConfig):
    entity = User

    def configure(self) -> None:
        self.for_entity().has_icon("user")
        self.for_property("Email").is_required("Email is required")


class PostConfig(EntityConfig):
    entity = Post


class AbstractConfig(EntityConfig):
    pass
"""


@pytest.fixture
def backend(tmp_path: Path) -> Generator[tuple[Path, ModuleWriter], None, None]:
    """Backend root plus a writer returning the unique module name it created."""
    root = tmp_path / "backend"
    root.mkdir()
    created: list[str] = []

    def write(source: str) -> str:
        name = f"cruddy_scan_{uuid4().hex[:10]}"
        (root / f"{name}.py").write_text(textwrap.dedent(source))
        created.append(name)
        return name

    yield root, write

    for name in created:
        sys.modules.pop(name, None)


class TestScanModules:
    def test_builds_configs_in_definition_order(self, backend: tuple[Path, ModuleWriter]) -> None:
        root, write = backend
        module = write(USERS_MODULE)

        result = scan_modules([module], root)

        assert result.ok
        assert [found.entity.name for found in result.entities] == ["User", "Post"]

        user = result.entities[0]
        assert user.entity.icon == "user"
        assert user.entity.type_identity is not None
        assert user.entity.type_identity.__name__ == "User"
        email = user.entity.get_property("Email")
        assert email is not None
        assert email.is_required is True
        assert email.required_message == "Email is required"
        assert [(m.name, m.semantic_type) for m in user.members] == [
            ("Email", SemanticType.STRING),
            ("Name", SemanticType.STRING),
            ("CreatedAt", SemanticType.DATETIME),
        ]

    def test_configs_imported_from_elsewhere_not_rebuilt(
        self, backend: tuple[Path, ModuleWriter]
    ) -> None:
        root, write = backend
        users = write(USERS_MODULE)
        reexport = write(f"from {users} import UserConfig, PostConfig\n")

        result = scan_modules([reexport], root)

        assert result.ok
        assert result.entities == []

    def test_import_failure_recorded_and_others_scanned(
        self, backend: tuple[Path, ModuleWriter]
    ) -> None:
        root, write = backend
        broken = write("raise RuntimeError('boom')\n")
        users = write(USERS_MODULE)

        with capture_logs() as logs:
            result = scan_modules([broken, users, "cruddy_scan_missing_module"], root)

        assert not result.ok
        assert [found.entity.name for found in result.entities] == ["User", "Post"]
        assert [f.code for f in result.failures] == [
            ErrorCode.MODULE_IMPORT_FAILED,
            ErrorCode.MODULE_IMPORT_FAILED,
        ]
        assert "RuntimeError: boom" in result.failures[0].details["reason"]

        warnings = [e for e in logs if e["event"] == "module_scan_failed"]
        assert len(warnings) == 2
        assert warnings[0]["log_level"] == "warning"
        assert warnings[0]["module"] == broken

    def test_failing_config_skipped(self, backend: tuple[Path, ModuleWriter]) -> None:
        root, write = backend
        module = write(
            """
            from dataclasses import dataclass

            from cruddy.configuration import EntityConfig


            @dataclass
            class Tag:
                Label: str


            class BrokenConfig(EntityConfig):
                entity = Tag

                def configure(self) -> None:
                    self.for_property("Missing").is_required()


            class TagConfig(EntityConfig):
                entity = Tag
            """
        )

        result = scan_modules([module], root)

        assert [found.entity.name for found in result.entities] == ["Tag"]
        (failure,) = result.failures
        assert failure.code == ErrorCode.INTROSPECTION_FAILED
        assert failure.details["config"] == "BrokenConfig"
        assert "Property Missing not found on type Tag" in failure.details["reason"]

    def test_search_path_restored(self, backend: tuple[Path, ModuleWriter]) -> None:
        root, write = backend
        module = write(USERS_MODULE)
        before = list(sys.path)

        scan_modules([module], root)

        assert sys.path == before

    def test_no_modules(self) -> None:
        assert scan_modules([]) == ScanResult()
