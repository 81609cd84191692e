"""Console feedback for CLI commands.

Everything here goes to stderr through one rich console, so stdout stays
free for output that may be piped. Each message is also logged at DEBUG.

Usage::

    from cruddy.core.progress import status

    status("Scanning backend...")
    status("Migration created", style="success")  # ✓ Migration created
    status("Book", style="added")  # + Book
"""

from __future__ import annotations

from rich.console import Console
from rich.rule import Rule

_console = Console(stderr=True)

# Marker printed before a message, by style
_MARKERS: dict[str, str] = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    # change kinds, as listed by 'migrations add' and 'migrations list'
    "added": "[green]+[/green] ",
    "removed": "[red]-[/red] ",
    "modified": "[yellow]~[/yellow] ",
    "info": "  ",
    "none": "",
}


def get_console() -> Console:
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print one styled line to stderr."""
    marker = _MARKERS.get(style, "")
    _console.print(" " * indent + marker + message, highlight=False)

    # Imported here so the logger picks up the configuration active at call time
    from cruddy.core.logging import get_logger

    get_logger("progress").debug("status", message=message, style=style)


def header(title: str) -> None:
    _console.print(Rule(title, style="dim"))


def pluralize(count: int, noun: str, plural: str | None = None) -> str:
    """``pluralize(1, "change")`` is "1 change", ``pluralize(3, "change")``
    is "3 changes". Irregular nouns pass ``plural``."""
    word = noun if count == 1 else (plural or f"{noun}s")
    return f"{count} {word}"
