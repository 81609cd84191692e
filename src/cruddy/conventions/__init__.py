"""Convention-based defaults for unconfigured entity metadata."""

from cruddy.conventions.resolver import resolve

__all__ = ["resolve"]
