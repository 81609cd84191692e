"""Cruddy CLI - cruddy command."""

from pathlib import Path

import click

from cruddy.cli.init import init_command
from cruddy.cli.migrations import migrations_group
from cruddy.cli.snapshot import snapshot_command
from cruddy.cli.utils import CliState, find_project_root
from cruddy.core.logging import configure_logging, set_invocation_id


@click.group()
@click.version_option(version="0.1.0", prog_name="cruddy")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--project",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: nearest directory with .cruddy/, else cwd)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, project: Path | None) -> None:
    """Cruddy - track entity metadata changes as migrations."""
    set_invocation_id()
    project_root = project.resolve() if project is not None else find_project_root()
    ctx.obj = CliState(project_root=project_root, verbose=verbose)
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(init_command, name="init")
cli.add_command(migrations_group, name="migrations")
cli.add_command(snapshot_command, name="snapshot")


if __name__ == "__main__":
    cli()
