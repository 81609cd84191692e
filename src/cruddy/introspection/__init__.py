"""Python type introspection for entity classes.

Module scanning lives in ``cruddy.introspection.scanner``; it depends on
``cruddy.configuration``, which in turn depends on this package.
"""

from cruddy.introspection.members import declared_members, semantic_type_of

__all__ = ["declared_members", "semantic_type_of"]
