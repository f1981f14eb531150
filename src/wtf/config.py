"""YAML configuration for wtf.

The file lives at ``$XDG_CONFIG_HOME/wtf/config.yaml`` (``~/.config`` when the
variable is unset) unless ``WTF_CONFIG`` points elsewhere. A missing file is
not an error: defaults apply. Example::

    binary_store_path: ~/.local/share/wtf/terraform-versions
    version_constraint_file_name: .terraform-version
    detect_syntax: true
    auto_install: false
    wrapper:
      script_template: |
        #!/bin/sh
        exec {{ command }}
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

import yaml

from wtf.common.paths import expand_path
from wtf.constants import Constants
from wtf.errors import ConfigError

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {
    "binary_store_path",
    "version_constraint_file_name",
    "detect_syntax",
    "auto_install",
    "wrapper",
}


def _xdg_dir(env_var: str, *fallback: str) -> str:
    base = os.environ.get(env_var, "").strip()
    if not base:
        base = os.path.join(os.path.expanduser("~"), *fallback)
    return base


def get_config_file() -> str:
    """Path of the configuration file."""
    override = os.environ.get(Constants.ENV_CONFIG_FILE, "").strip()
    if override:
        return expand_path(override)
    return os.path.join(
        _xdg_dir("XDG_CONFIG_HOME", ".config"), Constants.CONFIG_DIR_NAME, Constants.CONFIG_FILE_NAME
    )


def get_default_data_dir() -> str:
    """Default binary store location."""
    return os.path.join(
        _xdg_dir("XDG_DATA_HOME", ".local", "share"), Constants.CONFIG_DIR_NAME, Constants.STORE_DIR_NAME
    )


@dataclass
class WrapperSettings:
    script_template: str = ""


@dataclass
class Configuration:
    """Effective settings after merging the file over the defaults."""

    binary_store_path: str = field(default_factory=get_default_data_dir)
    version_constraint_file_name: str = Constants.DEFAULT_CONSTRAINT_FILE
    detect_syntax: bool = True
    auto_install: bool = False
    wrapper: WrapperSettings = field(default_factory=WrapperSettings)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "Configuration":
        """Build a configuration from a parsed YAML mapping.

        Raises:
            ConfigError: If a known key holds a value of the wrong type.
        """
        config = cls()
        for key in sorted(set(data) - _KNOWN_KEYS):
            logger.warning("Ignoring unknown configuration key: %s", key)

        for key in ("binary_store_path", "version_constraint_file_name"):
            if data.get(key) is not None:
                if not isinstance(data[key], str):
                    raise ConfigError(f"'{key}' must be a string")
                setattr(config, key, data[key])

        for key in ("detect_syntax", "auto_install"):
            if data.get(key) is not None:
                if not isinstance(data[key], bool):
                    raise ConfigError(f"'{key}' must be true or false")
                setattr(config, key, data[key])

        wrapper = data.get("wrapper")
        if wrapper is not None:
            if not isinstance(wrapper, dict):
                raise ConfigError("'wrapper' must be a mapping")
            template = wrapper.get("script_template")
            if template is not None and not isinstance(template, str):
                raise ConfigError("'wrapper.script_template' must be a string")
            config.wrapper = WrapperSettings(script_template=template or "")
        return config

    def to_yaml(self) -> str:
        return yaml.safe_dump(asdict(self), default_flow_style=False, sort_keys=False)


def load_configuration(path: Optional[str] = None) -> Configuration:
    """Load the configuration file, falling back to defaults when it is absent.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    path = path or get_config_file()
    if not os.path.isfile(path):
        logger.info("No config file '%s' found, using defaults", path)
        return Configuration()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"config file '{path}' could not be read: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"config file '{path}' is not valid YAML: {exc}") from exc

    if data is None:
        return Configuration()
    if not isinstance(data, dict):
        raise ConfigError(f"config file '{path}' must contain a mapping")
    logger.debug("Loaded configuration from %s", path)
    return Configuration.from_mapping(data)
