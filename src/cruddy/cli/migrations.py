"""cruddy migrations commands - add, remove, list and status."""

import json

import click

from cruddy.cli.utils import CliState, cli_errors, open_service
from cruddy.core.progress import get_console, header, pluralize, status
from cruddy.diff.summary import describe_attribute_changes, describe_change, summarize_changes
from cruddy.model.changes import Change, FieldModified, dump_changes


def _print_changes(changes: list[Change]) -> None:
    """Print one line per change; modified fields show their first attribute changes."""
    for change in changes:
        style, text = describe_change(change)
        status(text, style=style)
        if isinstance(change, FieldModified):
            for line in describe_attribute_changes(change):
                status(line, indent=4, style="none")


@click.group()
def migrations_group() -> None:
    """Manage Cruddy migrations."""


@migrations_group.command("add")
@click.argument("name")
@click.pass_obj
def add_command(state: CliState, name: str) -> None:
    """Record current entity changes as migration NAME."""
    service = open_service(state)

    status(f"Creating migration: {name}")
    with cli_errors():
        path = service.create_migration(name)
        migration = service.store.load_migration(path)

    status(f"Migration created: {path.name}", style="success")
    status(f"Location: {path}")

    if not migration.changes:
        status("No changes detected", style="warning")
        return

    get_console().print()
    header("Changes Summary")
    _print_changes(migration.changes)
    get_console().print()
    status(f"Total changes: {len(migration.changes)}")


@migrations_group.command("remove")
@click.pass_obj
def remove_command(state: CliState) -> None:
    """Remove the last migration."""
    service = open_service(state)

    status("Removing last migration...")
    with cli_errors():
        removed = service.remove_last_migration()

    if removed:
        status("Last migration removed successfully", style="success")
    else:
        status("No migrations to remove", style="warning")


@migrations_group.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_command(state: CliState, as_json: bool) -> None:
    """List migrations, oldest first."""
    service = open_service(state)

    with cli_errors():
        migrations = service.list_migrations()

    if as_json:
        click.echo(json.dumps([m.to_json_dict() for m in migrations], indent=2))
        return

    if not migrations:
        status("No migrations found")
        return

    header("Migrations")
    for migration in migrations:
        status(migration.migration_id, style="none", indent=2)
        status(f"Name: {migration.name}", style="none", indent=4)
        status(f"Timestamp: {migration.timestamp}", style="none", indent=4)
        status(f"Changes: {len(migration.changes)}", style="none", indent=4)


@migrations_group.command("status")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def status_command(state: CliState, as_json: bool) -> None:
    """Show changes not yet recorded in a migration."""
    service = open_service(state)

    with cli_errors():
        changes = service.pending_changes()

    if as_json:
        click.echo(json.dumps(dump_changes(changes), indent=2))
        return

    if not changes:
        status("No pending changes", style="success")
        return

    header("Pending Changes")
    _print_changes(changes)
    get_console().print()
    status(f"{pluralize(len(changes), 'pending change')}: {summarize_changes(changes)}")
