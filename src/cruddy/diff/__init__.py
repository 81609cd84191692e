"""Metadata diff package: structured change lists between entity states.

Public API re-exports for the diff subpackage.
"""

from cruddy.diff.engine import (
    TRACKED_PROPERTY_ATTRIBUTES,
    TRACKED_RELATIONSHIP_ATTRIBUTES,
    changed_attributes,
    compute_diff,
)
from cruddy.diff.summary import (
    ChangeSummary,
    describe_attribute_changes,
    describe_change,
    summarize_changes,
)

__all__ = [
    "TRACKED_PROPERTY_ATTRIBUTES",
    "TRACKED_RELATIONSHIP_ATTRIBUTES",
    "ChangeSummary",
    "changed_attributes",
    "compute_diff",
    "describe_attribute_changes",
    "describe_change",
    "summarize_changes",
]
