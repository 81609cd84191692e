"""Logging setup for the cruddy CLI.

structlog renders through stdlib logging, so every configured output
(stderr, stdout or a file) gets its own handler, level and renderer. Each
event is stamped with the id of the CLI run that produced it, which makes a
shared log file readable when several runs append to it.

The CLI configures logging twice per run: a bootstrap before the project is
known, then again from the project's ``logging`` section.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from cruddy.config.models import LoggingConfig, LogOutputConfig

_invocation_id: ContextVar[str | None] = ContextVar("invocation_id", default=None)

# First file output of the active configuration
_log_file_path: Path | None = None


def get_invocation_id() -> str | None:
    return _invocation_id.get()


def set_invocation_id(invocation_id: str | None = None) -> str:
    """Start a run: set (or generate) the id stamped on its events."""
    iid = invocation_id or uuid4().hex[:12]
    _invocation_id.set(iid)
    return iid


def clear_invocation_id() -> None:
    _invocation_id.set(None)


def get_log_file_path() -> Path | None:
    """Log file of the active configuration, if one of the outputs is a file.

    The CLI appends it to error messages so users know where the details are.
    """
    return _log_file_path


def _stamp_invocation(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if iid := _invocation_id.get():
        event_dict.setdefault("invocation_id", iid)
    return event_dict


_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
    _stamp_invocation,  # type: ignore[list-item]
]


def _to_level(name: str | None, fallback: int) -> int:
    if not name:
        return fallback
    return logging.getLevelNamesMapping().get(name.upper(), fallback)


def _console_stream(destination: str) -> TextIO | None:
    if destination == "stderr":
        return sys.stderr
    if destination == "stdout":
        return sys.stdout
    return None


def _build_handler(
    output: LogOutputConfig,
    default_level: int,
    console_level: str | None,
) -> logging.Handler:
    handler: logging.Handler
    stream = _console_stream(output.destination)
    if stream is not None:
        handler = logging.StreamHandler(stream)
        level_name = console_level or output.level
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        level_name = output.level

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=stream is not None and stream.isatty(),
            pad_event_to=0,
            pad_level=False,
        )

    handler.setLevel(_to_level(level_name, default_level))
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_SHARED_PROCESSORS)
    )
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
    console_level: str | None = None,
) -> None:
    """(Re)configure structlog and the root logger.

    Args:
        config: Logging section with one entry per output. When omitted a
            single stderr output is built from ``json_format`` and ``level``.
        json_format: Render the default output as JSON lines.
        level: Level of the default output.
        console_level: Forced on stderr/stdout outputs (``--verbose``); file
            outputs keep their configured level.
    """
    from cruddy.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    default_level = _to_level(config.level, logging.INFO)
    threshold = min(default_level, _to_level(console_level, default_level))
    handlers = [_build_handler(o, default_level, console_level) for o in config.outputs]

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Not cached: the CLI reconfigures once the project config is loaded
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
        existing.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(threshold)

    global _log_file_path
    _log_file_path = next(
        (Path(o.destination) for o in config.outputs if _console_stream(o.destination) is None),
        None,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
