"""Shared fixtures for CLI tests."""

from __future__ import annotations

import functools
import os
import sys
import textwrap
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import uuid4

import pytest

from cruddy.store.service import MigrationService


class SteppingClock:
    """Each call returns a time one second after the previous one."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's global config and CRUDDY__ env vars out of CLI runs."""
    monkeypatch.setattr("cruddy.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    for name in list(os.environ):
        if name.startswith("CRUDDY__"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def stepping_clock(monkeypatch: pytest.MonkeyPatch) -> SteppingClock:
    """Give every migration created through the CLI its own second."""
    clock = SteppingClock(datetime(2025, 1, 1, tzinfo=UTC))
    monkeypatch.setattr(
        "cruddy.cli.utils.MigrationService", functools.partial(MigrationService, clock=clock)
    )
    return clock


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "api").mkdir(parents=True)
    return root


@pytest.fixture
def entities_module(project: Path) -> Generator[str, None, None]:
    """A backend module under project/api with a configured User entity."""
    name = f"cruddy_cli_{uuid4().hex[:10]}"
    (project / "api" / f"{name}.py").write_text(
        textwrap.dedent(
            """
            import datetime as dt
            from dataclasses import dataclass

            from cruddy.configuration import EntityConfig


            @dataclass
            class User:
                Email: str
                Name: str
                CreatedAt: dt.datetime


            class UserConfig(EntityConfig):
                entity = User

                def configure(self) -> None:
                    self.for_property("Name").is_required()
            """
        )
    )
    yield name
    sys.modules.pop(name, None)
