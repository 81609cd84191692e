"""Configuration models for a cruddy project.

The same tree is read from YAML (global and project files), from
``CRUDDY__<SECTION>__<KEY>`` environment variables such as
``CRUDDY__BACKEND__PATH=./api``, and from keyword overrides; see
``cruddy.config.loader`` for how those layers combine. Field defaults here
are the bottom layer.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

Level = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_STREAMS = ("stderr", "stdout")


class LogOutputConfig(BaseModel):
    """One log destination: a console stream or an absolute file path."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"
    # None uses LoggingConfig.level
    level: Level | None = None

    @field_validator("destination")
    @classmethod
    def _stream_or_absolute_file(cls, v: str) -> str:
        if v in _STREAMS:
            return v
        file = Path(v).expanduser()
        if not file.is_absolute():
            raise ValueError(f"Log file must be an absolute path, got {v!r}")
        return str(file)


class LoggingConfig(BaseModel):
    """``logging`` section. By default only warnings reach stderr."""

    level: Level = Field(
        default="INFO",
        description="Root log level. DEBUG shows every scanned module and member.",
    )
    outputs: list[LogOutputConfig] = Field(
        default_factory=lambda: [LogOutputConfig(level="WARNING")]
    )


class BackendConfig(BaseModel):
    """Where entity configurations are discovered.

    Env vars:
        CRUDDY__BACKEND__PATH: Directory prepended to sys.path before scanning
        CRUDDY__BACKEND__MODULES: JSON list of modules to import
    """

    path: str = Field(
        default=".",
        description="Backend source root, relative to the project root.",
    )
    modules: list[str] = Field(
        default_factory=list,
        description="Importable modules that define EntityConfig subclasses.",
    )

    @field_validator("modules")
    @classmethod
    def validate_modules(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name or any(not part.isidentifier() for part in name.split(".")):
                raise ValueError(f"Not an importable module name: {name!r}")
        return v


class FrontendConfig(BaseModel):
    """Frontend locations recorded for the component generator."""

    path: str = "./client/src"
    output_dir: str = "./client/src/components"
    base_url: str = "/api"


class GenerateConfig(BaseModel):
    """Component generation settings."""

    extension: str = ".cruddy.tsx"
    template_path: str = "./.cruddy/templates/react-ts/"


class CruddyConfig(BaseModel):
    """Root of .cruddy/config.yaml."""

    backend: BackendConfig = Field(default_factory=BackendConfig)
    frontend: FrontendConfig = Field(default_factory=FrontendConfig)
    generate: GenerateConfig = Field(default_factory=GenerateConfig)
    customized: list[str] = Field(
        default_factory=list,
        description="Entities whose generated components were customized by hand.",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
