"""CLI utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import click
import structlog

from cruddy.config.constants import WORKSPACE_DIR_NAME
from cruddy.config.loader import load_config
from cruddy.core.errors import CruddyError
from cruddy.core.logging import configure_logging, get_log_file_path
from cruddy.store.service import MigrationService

log = structlog.get_logger(__name__)


@dataclass
class CliState:
    """Per-invocation state stored on the click context."""

    project_root: Path
    verbose: bool = False


def find_project_root(start_path: Path | None = None) -> Path:
    """Find the nearest directory at or above ``start_path`` holding .cruddy/.

    Falls back to ``start_path`` itself (default: the current directory) so
    that 'cruddy init' can create the workspace there.
    """
    start = (start_path or Path.cwd()).resolve()

    current = start
    while current != current.parent:
        if (current / WORKSPACE_DIR_NAME).is_dir():
            return current
        current = current.parent

    if (current / WORKSPACE_DIR_NAME).is_dir():
        return current
    return start


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn CruddyError into a ClickException (exit code 1).

    When logs go to a file the message points there for details.
    """
    try:
        yield
    except CruddyError as e:
        log.debug("command_failed", code=e.error_name, details=e.details)
        message = e.message
        if log_file := get_log_file_path():
            message = f"{message.rstrip('.')}. See {log_file} for details."
        raise click.ClickException(message) from e


def open_service(state: CliState) -> MigrationService:
    """Load project config, apply its logging section and build the service.

    With --verbose console outputs log at DEBUG whatever the config says.
    """
    with cli_errors():
        config = load_config(state.project_root)
    configure_logging(config=config.logging, console_level="DEBUG" if state.verbose else None)
    return MigrationService(state.project_root, config=config)
