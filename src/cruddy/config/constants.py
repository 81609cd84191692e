"""Configuration constants.

This module contains values that should NOT be user-configurable: on-disk
layout, record format versions and convention defaults.

For configurable values, see models.py.
"""

# =============================================================================
# Workspace Layout
# =============================================================================

WORKSPACE_DIR_NAME = ".cruddy"
"""Per-project workspace directory, relative to the project root."""

MIGRATIONS_DIR_NAME = "migrations"
"""Migration records live in <workspace>/migrations/<migrationId>.json."""

SNAPSHOT_FILE_NAME = "snapshot.json"
"""Cumulative snapshot file, relative to the workspace."""

CONFIG_FILE_NAME = "config.yaml"
"""Project configuration file, relative to the workspace."""

MIGRATION_FILE_GLOB = "*.json"

# =============================================================================
# Record Format
# =============================================================================

SCHEMA_VERSION = "1.0.0"
"""Version stamped into every migration and snapshot record."""

MIGRATION_ID_TIME_FORMAT = "%Y%m%d%H%M%S"
"""Fixed-width, sortable, second resolution (UTC)."""

MIGRATION_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
"""Human-readable record timestamp (UTC)."""

# =============================================================================
# Convention Defaults
# =============================================================================

DEFAULT_FIELD_TYPE = "text"
EMAIL_FIELD_TYPE = "email"
DEFAULT_DATE_FORMAT = "date"
DEFAULT_STRING_MAX_LENGTH = 255
PLURAL_SUFFIX = "s"
READ_ONLY_TIMESTAMP_SUFFIXES = ("createdat", "updatedat")
