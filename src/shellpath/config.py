"""Configuration for command execution."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

__all__ = ["CONFIG_DIR", "CONFIG_FILE", "ShellConfig", "load_config"]

# Default configuration location
CONFIG_DIR = Path.home() / ".shellpath"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


class ShellConfig(BaseModel):
    """How commands are executed.

    Example ``config.yaml``::

        shell: [sudo, -n, sh, -c]
        argv_prefix: [sudo, -n]
        timeout: 10
    """

    model_config = ConfigDict(extra="forbid")

    shell: list[str] = Field(default_factory=lambda: ["sh", "-c"], min_length=1)
    argv_prefix: list[str] | None = None
    timeout: float | None = Field(default=30.0, gt=0)
    encoding: str = "utf-8"
    assume_privileged: bool | None = None

    @classmethod
    def from_file(cls, path: Path) -> ShellConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed ShellConfig. An empty file yields the defaults.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If the YAML or its content is invalid.
        """
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            data = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        return cls.model_validate(data)


def load_config(path: Path | None = None) -> ShellConfig:
    """Load configuration, falling back to defaults.

    Args:
        path: Config file. Defaults to ~/.shellpath/config.yaml.

    Returns:
        ShellConfig from the file, or the defaults if it does not exist.

    Raises:
        ValueError: If the file exists but is invalid.
    """
    config_file = path or CONFIG_FILE
    if not config_file.exists():
        return ShellConfig()
    return ShellConfig.from_file(config_file)
