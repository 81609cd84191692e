"""cruddy init command - set up the .cruddy workspace for a project."""

from pathlib import Path

import click
import questionary
from pydantic import ValidationError

from cruddy.cli.utils import CliState, cli_errors
from cruddy.config.constants import WORKSPACE_DIR_NAME
from cruddy.config.loader import config_path
from cruddy.config.models import BackendConfig, CruddyConfig, FrontendConfig
from cruddy.config.project_file import write_project_config
from cruddy.core.progress import get_console, status
from cruddy.store.migrations import MigrationStore


_PROMPT_STYLE = questionary.Style(
    [
        ("question", "bold"),
        ("highlighted", "fg:cyan bold"),
        ("selected", "fg:cyan"),
    ]
)


def _split_modules(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _ask(message: str, default: str = "") -> str:
    answer = questionary.text(message, default=default, style=_PROMPT_STYLE).ask()
    # ask() returns None on Ctrl-C
    if answer is None:
        raise click.Abort()
    return str(answer)


def _confirm_overwrite() -> bool:
    answer = questionary.select(
        "config.yaml already exists. Overwrite it?",
        choices=[
            questionary.Choice("No, keep it", value=False),
            questionary.Choice("Yes, overwrite config.yaml", value=True),
        ],
        style=_PROMPT_STYLE,
    ).ask()
    return bool(answer)


def _prompt_config(backend_path: str | None, modules: tuple[str, ...]) -> CruddyConfig:
    """Ask for each setting, offering the defaults."""
    defaults = CruddyConfig()
    backend = backend_path or _ask("Backend path", defaults.backend.path)
    module_list = list(modules) or _split_modules(
        _ask("Entity configuration modules (comma-separated)")
    )
    frontend_path = _ask("Frontend path", defaults.frontend.path)
    output_dir = _ask("Component output directory", defaults.frontend.output_dir)
    base_url = _ask("Base API URL", defaults.frontend.base_url)
    return CruddyConfig(
        backend=BackendConfig(path=backend, modules=module_list),
        frontend=FrontendConfig(path=frontend_path, output_dir=output_dir, base_url=base_url),
    )


def initialize_project(project_root: Path, config: CruddyConfig) -> None:
    """Write config.yaml, the migrations directory and an empty snapshot."""
    write_project_config(config_path(project_root), config)
    status(f"Wrote {config_path(project_root).relative_to(project_root)}", style="success")

    store = MigrationStore(project_root / WORKSPACE_DIR_NAME)
    existed = store.snapshot_path.exists()
    store.initialize()
    if existed:
        status("Kept existing snapshot", style="info")
    else:
        status(f"Created {WORKSPACE_DIR_NAME}/migrations/ and snapshot.json", style="success")


@click.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config.yaml")
@click.option("--backend-path", default=None, help="Backend source root")
@click.option(
    "--module",
    "modules",
    multiple=True,
    help="Module defining EntityConfig subclasses (repeatable)",
)
@click.option("--no-input", is_flag=True, help="Use defaults instead of prompting")
@click.pass_obj
def init_command(
    state: CliState,
    force: bool,
    backend_path: str | None,
    modules: tuple[str, ...],
    no_input: bool,
) -> None:
    """Initialize Cruddy in the project directory."""
    project_root = state.project_root
    console = get_console()

    status(f"Initializing Cruddy in {project_root}", style="none")
    console.print()

    if config_path(project_root).exists() and not force:
        if no_input or not _confirm_overwrite():
            status("Already initialized. Use --force to overwrite the config.", style="warning")
            return

    try:
        if no_input:
            config = CruddyConfig(
                backend=BackendConfig(path=backend_path or ".", modules=list(modules)),
            )
        else:
            config = _prompt_config(backend_path, modules)
    except ValidationError as e:
        raise click.UsageError(e.errors()[0]["msg"]) from e

    with cli_errors():
        initialize_project(project_root, config)

    console.print()
    status("Next steps:", style="none")
    status("1. Define EntityConfig subclasses in your backend modules", indent=2)
    status("2. Run 'cruddy migrations add <Name>' to record entity changes", indent=2)
