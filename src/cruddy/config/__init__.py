"""Config module exports."""

from cruddy.config.loader import backend_root, config_path, load_config
from cruddy.config.models import (
    BackendConfig,
    CruddyConfig,
    FrontendConfig,
    GenerateConfig,
    LoggingConfig,
    LogOutputConfig,
)
from cruddy.config.project_file import write_project_config

__all__ = [
    "backend_root",
    "config_path",
    "load_config",
    "write_project_config",
    "BackendConfig",
    "CruddyConfig",
    "FrontendConfig",
    "GenerateConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
