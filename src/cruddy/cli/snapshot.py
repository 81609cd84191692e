"""cruddy snapshot command - show the recorded entity state."""

import json

import click
from rich.table import Table

from cruddy.cli.utils import CliState, cli_errors, open_service
from cruddy.core.progress import get_console, pluralize, status


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def snapshot_command(state: CliState, as_json: bool) -> None:
    """Show the snapshot: applied migrations and recorded entities."""
    service = open_service(state)

    with cli_errors():
        snapshot = service.get_snapshot()

    if as_json:
        click.echo(json.dumps(snapshot.to_json_dict(), indent=2))
        return

    status(f"Last migration: {snapshot.last_migration_id or '(none)'}", style="none")
    status(f"Applied: {pluralize(len(snapshot.applied_migration_ids), 'migration')}", style="none")

    if not snapshot.entities:
        status("No entities recorded")
        return

    table = Table(title="Entities", show_lines=False)
    table.add_column("Entity")
    table.add_column("Display name")
    table.add_column("Properties", justify="right")
    table.add_column("Relationships", justify="right")
    for entity in snapshot.entities:
        table.add_row(
            entity.name,
            entity.display_name,
            str(len(entity.properties)),
            str(len(entity.relationships)),
        )
    get_console().print(table)
