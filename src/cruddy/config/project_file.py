"""Project configuration file written by 'cruddy init'.

The file is stored in .cruddy/config.yaml next to the snapshot and the
migrations directory. It is meant to be committed and edited by hand.
"""

from pathlib import Path

import yaml

from cruddy.config.models import CruddyConfig

CONFIG_HEADER = """\
# Cruddy Configuration
#
# backend.path     Backend source root, added to sys.path before scanning
# backend.modules  Modules that define EntityConfig subclasses
# frontend.*       Locations used by the component generator
# logging.level    DEBUG, INFO, WARNING, ERROR, CRITICAL
#
# Any value can be overridden with CRUDDY__<SECTION>__<KEY> env vars.

"""


def write_project_config(path: Path, config: CruddyConfig | None = None) -> None:
    """Write the project config file with a commented header.

    Args:
        path: Path to write config.yaml
        config: Config values (uses defaults if None)
    """
    cfg = config or CruddyConfig()
    data = cfg.model_dump(mode="json", exclude={"logging"})
    if cfg.logging.level != "INFO":
        data["logging"] = {"level": cfg.logging.level}

    path.parent.mkdir(parents=True, exist_ok=True)
    content = CONFIG_HEADER + yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    path.write_text(content)
