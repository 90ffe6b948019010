"""YAML configuration loading for nsrouter.

Router configuration files are parsed with ``yaml.safe_load`` so that YAML
tags can never instantiate arbitrary Python objects. The result is a plain
dictionary; schema validation is the job of
[RouterConfig][nsrouter.resolvers.configs.RouterConfig].

Examples:
    ```python
    from nsrouter.core.yaml import load_yaml

    config = load_yaml("config/router.yaml")
    ```

See Also:
    [Router.from_yaml()][nsrouter.resolvers.router.Router.from_yaml]:
        Primary consumer of this loader.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError


def load_yaml(config_path: str | Path) -> dict[str, Any]:
    """Load and parse a YAML configuration file.

    Args:
        config_path: Path to the YAML file (absolute or relative).

    Returns:
        Parsed configuration as a dictionary. An empty file gives ``{}``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file is not valid YAML or its top level
            is not a mapping.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with path.open(encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping, got {type(data).__name__}"
        )
    return data
