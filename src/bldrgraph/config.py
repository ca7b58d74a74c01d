"""Configuration file loading.

The configuration is a small TOML file::

    features_enabled = "builddeps"
    log_level = "info"

    [datastore]
    path = "/hab/svc/builder-graph/data/packages.json"

Every key is optional; ``Config()`` gives the defaults used when the tool is
started without a configuration file.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bldrgraph.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = "packages.json"


@dataclass
class DataStoreConfig:
    """Where the package list is read from."""

    path: Path = Path(DEFAULT_DATA_PATH)


@dataclass
class Config:
    """Top-level bldr-graph configuration.

    Attributes:
        datastore: Package store settings.
        features_enabled: Comma-separated feature names (e.g. ``"BUILDDEPS"``).
        log_level: Logging level name used when ``--log-level`` is not given.
    """

    datastore: DataStoreConfig = field(default_factory=DataStoreConfig)
    features_enabled: str = ""
    log_level: str = "warning"

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Load a configuration from a TOML file.

        A relative ``datastore.path`` is resolved against the directory of
        the configuration file.

        Raises:
            ConfigError: If the file cannot be read, is not valid TOML, or a
                key has the wrong type.
        """
        path = Path(path)
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as exc:
            raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

        config = cls.from_dict(data)
        if not config.datastore.path.is_absolute():
            config.datastore.path = path.parent / config.datastore.path
        logger.debug("Loaded config from %s", path)
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a configuration from parsed TOML data; unknown keys are ignored."""
        datastore = data.get("datastore", {})
        if not isinstance(datastore, dict):
            raise ConfigError("'datastore' must be a table")

        data_path = _expect_str(datastore, "path", DEFAULT_DATA_PATH)
        return cls(
            datastore=DataStoreConfig(path=Path(data_path)),
            features_enabled=_expect_str(data, "features_enabled", ""),
            log_level=_expect_str(data, "log_level", "warning"),
        )


def _expect_str(table: dict[str, Any], key: str, default: str) -> str:
    value = table.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string, got {type(value).__name__}")
    return value
