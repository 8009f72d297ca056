"""YAML configuration parser for gup.

The updater is driven by a single immutable ``UpdaterConfig`` built once at
startup. Its defaults describe the official Go distribution; an optional YAML
file can point gup at a mirror.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gup.core.exceptions import ConfigurationError

LATEST_SENTINEL = "latest"


@dataclass(frozen=True)
class UpdaterConfig:
    """Endpoints and naming rules for one update run."""

    latest_url: str = "https://golang.org/VERSION"
    download_url: str = "https://dl.google.com/go/"
    filename_prefix: str = "go"
    platform_suffix: str = ".linux-amd64.tar.gz"
    archive_root: str = "go"  # top-level directory inside the archive
    scratch_prefix: str = "gup"
    timeout: Optional[float] = None  # None keeps the HTTP client default

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UpdaterConfig":
        """
        Build a config from a mapping, rejecting unknown keys and bad types.

        Raises:
            ConfigurationError: If the mapping is invalid
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}"
            )

        for key, value in data.items():
            if key == "timeout":
                if value is not None and (
                    isinstance(value, bool) or not isinstance(value, (int, float))
                ):
                    raise ConfigurationError("timeout must be a number")
                if value is not None and value <= 0:
                    raise ConfigurationError("timeout must be positive")
            elif not isinstance(value, str):
                raise ConfigurationError(f"{key} must be a string")

        return cls(**data)


def load_config(config_path: Optional[Path] = None) -> UpdaterConfig:
    """
    Load an UpdaterConfig, optionally from a YAML file.

    Args:
        config_path: Path to YAML file (None returns the defaults)

    Returns:
        Parsed configuration

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    if config_path is None:
        return UpdaterConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e

    if data is None:
        return UpdaterConfig()

    return UpdaterConfig.from_dict(data)
