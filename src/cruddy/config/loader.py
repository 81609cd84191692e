"""Resolve the effective configuration of a project.

Layers, lowest to highest precedence:

    built-in defaults
    ~/.config/cruddy/config.yaml   (global, per user)
    .cruddy/config.yaml            (project, written by 'cruddy init')
    CRUDDY__SECTION__KEY env vars
    keyword overrides passed to load_config()

The two YAML files are folded into a single layer before pydantic-settings
sees them; env vars and overrides are applied by pydantic-settings itself.
"""

from contextvars import ContextVar
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cruddy.config.constants import CONFIG_FILE_NAME, WORKSPACE_DIR_NAME
from cruddy.config.models import (
    BackendConfig,
    CruddyConfig,
    FrontendConfig,
    GenerateConfig,
    LoggingConfig,
)
from cruddy.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/cruddy/config.yaml").expanduser()

# YAML layer of the load_config() call in progress
_file_layer: ContextVar[dict[str, Any]] = ContextVar("file_layer", default={})


def config_path(project_root: Path) -> Path:
    return project_root / WORKSPACE_DIR_NAME / CONFIG_FILE_NAME


def _load_yaml(path: Path) -> dict[str, Any]:
    """Parse one config file. A missing file is an empty mapping."""
    try:
        text = path.read_text()
    except FileNotFoundError:
        return {}
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


def _merge_layers(*layers: dict[str, Any]) -> dict[str, Any]:
    """Fold mappings left to right. Nested sections merge key by key;
    any other value in a later layer replaces the earlier one."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            below = merged.get(key)
            if isinstance(below, dict) and isinstance(value, dict):
                merged[key] = _merge_layers(below, value)
            else:
                merged[key] = value
    return merged


class _CruddySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CRUDDY__",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    backend: BackendConfig = BackendConfig()
    frontend: FrontendConfig = FrontendConfig()
    generate: GenerateConfig = GenerateConfig()
    customized: list[str] = []
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        files = InitSettingsSource(settings_cls, init_kwargs=_file_layer.get())
        return (init_settings, env_settings, files)


def load_config(project_root: Path | None = None, **kwargs: Any) -> CruddyConfig:
    """Load the configuration of ``project_root`` (default: the cwd).

    Raises:
        ConfigError: A config file is not valid YAML, or a value fails
            validation.
    """
    root = project_root or Path.cwd()
    layer = _merge_layers(_load_yaml(GLOBAL_CONFIG_PATH), _load_yaml(config_path(root)))

    token = _file_layer.set(layer)
    try:
        settings = _CruddySettings(**kwargs)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(field, first.get("input"), first["msg"]) from e
    finally:
        _file_layer.reset(token)
    return CruddyConfig.model_validate(settings.model_dump())


def backend_root(project_root: Path, config: CruddyConfig) -> Path:
    """Absolute backend source root for a project."""
    path = Path(config.backend.path).expanduser()
    if not path.is_absolute():
        path = project_root / path
    return path.resolve()
