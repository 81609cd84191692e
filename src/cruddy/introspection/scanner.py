"""Discover entity configurations in backend modules.

Each configured module is imported and every EntityConfig subclass defined in
it (with ``entity`` set) is built. Failures are collected per module or per
configuration class so one broken file does not hide the others.
"""

from __future__ import annotations

import importlib
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType

import structlog

from cruddy.configuration.entity_config import EntityConfig
from cruddy.core.errors import IntrospectionError
from cruddy.model.members import DiscoveredEntity

log = structlog.get_logger(__name__)


@dataclass
class ScanResult:
    entities: list[DiscoveredEntity] = field(default_factory=list)
    failures: list[IntrospectionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@contextmanager
def _search_path(path: Path | None) -> Iterator[None]:
    if path is None:
        yield
        return
    entry = str(path)
    added = entry not in sys.path
    if added:
        sys.path.insert(0, entry)
    try:
        yield
    finally:
        if added and entry in sys.path:
            sys.path.remove(entry)


def config_classes(module: ModuleType) -> list[type[EntityConfig]]:
    """EntityConfig subclasses defined in ``module``, in definition order."""
    return [
        obj
        for obj in vars(module).values()
        if isinstance(obj, type)
        and issubclass(obj, EntityConfig)
        and obj is not EntityConfig
        and obj.__module__ == module.__name__
        and obj.entity is not None
    ]


def _describe(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"


def scan_modules(modules: Sequence[str], search_path: Path | None = None) -> ScanResult:
    """Import ``modules`` and build every entity configuration they define.

    Args:
        modules: Dotted module names, imported in order.
        search_path: Directory put in front of ``sys.path`` for the duration
            of the scan (the backend root).
    """
    result = ScanResult()
    importlib.invalidate_caches()

    with _search_path(search_path):
        for module_name in modules:
            try:
                module = importlib.import_module(module_name)
            except Exception as e:
                _fail(result, IntrospectionError.import_failed(module_name, _describe(e)))
                continue

            for config_cls in config_classes(module):
                try:
                    result.entities.append(config_cls().build())
                except Exception as e:
                    _fail(
                        result,
                        IntrospectionError.scan_failed(module_name, config_cls.__name__, _describe(e)),
                    )

    log.debug(
        "modules_scanned",
        modules=len(modules),
        entities=len(result.entities),
        failures=len(result.failures),
    )
    return result


def _fail(result: ScanResult, error: IntrospectionError) -> None:
    log.warning("module_scan_failed", code=error.error_name, **error.details)
    result.failures.append(error)
