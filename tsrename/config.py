"""
Configuration management for tsrename.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

import yaml

from .constants import PROGRAM, get_logger
from .errors import ConfigurationError


class TimestampStrategy(Enum):
    """Where a file's organizing date-time comes from."""
    FILENAME = "filename"
    METADATA = "metadata"


@dataclass(frozen=True)
class Settings:
    """Immutable run configuration, built once at start-up."""
    output_root: Path
    source_root: Optional[Path] = None
    name_prefix: Optional[str] = None
    delete_source: bool = False
    strategy: TimestampStrategy = TimestampStrategy.FILENAME
    dry_run: bool = False

    @classmethod
    def from_options(cls, source: Optional[str] = None, output: Optional[str] = None,
                     name: Optional[str] = None, delete: bool = False, exif: bool = False,
                     dry_run: bool = False) -> "Settings":
        """Validate raw option values and build settings.

        The output root defaults to the source root when walking a tree,
        and to the current working directory when reading from stdin.
        """
        source_root = None
        if source:
            source_root = Path(source).expanduser()
            if not source_root.exists():
                raise ConfigurationError(f"<source> {source_root} does not exist.")
            if not source_root.is_dir():
                raise ConfigurationError(f"<source> {source_root} is not a directory.")

        if output:
            output_root = Path(output).expanduser()
        elif source_root is not None:
            output_root = source_root
        else:
            output_root = Path(os.getcwd())

        strategy = TimestampStrategy.METADATA if exif else TimestampStrategy.FILENAME
        return cls(output_root=output_root, source_root=source_root,
                   name_prefix=name or None, delete_source=delete,
                   strategy=strategy, dry_run=dry_run)


class Config:
    """Optional YAML file holding default option values."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            get_logger().warning(f"[config] could not load {self.config_path}: {e}")
            return {}

        if not isinstance(data, dict):
            get_logger().warning(f"[config] ignoring {self.config_path}: not a mapping")
            return {}
        return data

    def _get_string(self, key: str) -> Optional[str]:
        value = self.data.get(key)
        if value is None or isinstance(value, str):
            return value
        get_logger().warning(f"[config] ignoring {key!r} in {self.config_path}: "
                             f"expected a string, got {value!r}")
        return None

    def get_output(self) -> Optional[str]:
        """Get the default destination directory."""
        return self._get_string('output')

    def get_name(self) -> Optional[str]:
        """Get the default filename prefix."""
        return self._get_string('name')

    def get_delete(self) -> bool:
        return bool(self.data.get('delete', False))

    def get_exif(self) -> bool:
        return bool(self.data.get('exif', False))

    def get_verbose(self) -> bool:
        return bool(self.data.get('verbose', False))
