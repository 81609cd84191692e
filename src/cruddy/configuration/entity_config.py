"""Base class for per-entity configuration.

Usage::

    class UserConfig(EntityConfig):
        entity = User

        def configure(self) -> None:
            self.for_entity().has_display_name("Users").has_icon("user")
            self.for_property("email").is_required().has_max_length(320)
            self.ignore("password_hash")

The scanner finds subclasses like this in the configured backend modules.
"""

from __future__ import annotations

from typing import ClassVar

from cruddy.configuration.builders import EntityBuilder, PropertyBuilder
from cruddy.model.members import DiscoveredEntity


class EntityConfig:
    entity: ClassVar[type | None] = None

    def __init__(self) -> None:
        entity = self.entity
        if entity is None:
            raise TypeError(f"{type(self).__name__} does not set 'entity'")
        self._entity_type: type = entity
        self._builder = EntityBuilder(entity)

    def configure(self) -> None:
        """Override to configure the entity. The default configures nothing."""

    def for_entity(self) -> EntityBuilder:
        return self._builder

    def for_property(self, name: str) -> PropertyBuilder:
        return self._builder.for_property(name)

    def ignore(self, *names: str) -> None:
        for name in names:
            self._builder.ignore(name)

    def build(self) -> DiscoveredEntity:
        """Run configure() against a fresh builder and return the result."""
        self._builder = EntityBuilder(self._entity_type)
        self.configure()
        return self._builder.build()
