"""
Destination path planning.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .constants import SIDECAR_SUFFIX


def sidecar_path(file_path: Path) -> Path:
    """Return ``<file>.json`` for a media file."""
    return file_path.with_name(file_path.name + SIDECAR_SUFFIX)


def file_extension(file_path: Path) -> str:
    """Text from the last dot of the base name on, leading dot included.

    Unlike ``Path.suffix`` a dotfile such as ``.profile`` is all extension.
    """
    name = file_path.name
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def is_sidecar(file_path: Path) -> bool:
    return file_extension(file_path) == SIDECAR_SUFFIX


@dataclass(frozen=True)
class TransferPlan:
    """Source file paired with its computed destination."""
    source: Path
    destination: Path

    @property
    def sidecar_source(self) -> Path:
        return sidecar_path(self.source)

    @property
    def sidecar_destination(self) -> Path:
        return sidecar_path(self.destination)

    @property
    def is_self_transfer(self) -> bool:
        """True when source and destination are the same absolute path."""
        return os.path.abspath(self.source) == os.path.abspath(self.destination)


def format_timestamp(timestamp: datetime) -> str:
    """``YYYY_MM_DD_HH_MM_SS``, zero-padded regardless of platform strftime."""
    return (f"{timestamp.year:04d}_{timestamp.month:02d}_{timestamp.day:02d}_"
            f"{timestamp.hour:02d}_{timestamp.minute:02d}_{timestamp.second:02d}")


def destination_directory(output_root: Path, timestamp: datetime) -> Path:
    """``output_root/YYYY/YYYY_MM/YYYY_MM_DD/YYYY_MM_DD_HH``"""
    year = f"{timestamp.year:04d}"
    month = f"{year}_{timestamp.month:02d}"
    day = f"{month}_{timestamp.day:02d}"
    hour = f"{day}_{timestamp.hour:02d}"
    return output_root / year / month / day / hour


def destination_filename(source: Path, timestamp: datetime, name_prefix=None) -> str:
    """Original base name, or ``{prefix}_{YYYY_MM_DD_HH_MM_SS}{ext}`` with a prefix."""
    if not name_prefix:
        return source.name
    return f"{name_prefix}_{format_timestamp(timestamp)}{file_extension(source)}"


def plan(source: Path, timestamp: datetime, settings) -> TransferPlan:
    """Compute where ``source`` goes for the given timestamp. Performs no I/O."""
    dest_dir = destination_directory(settings.output_root, timestamp)
    filename = destination_filename(source, timestamp, settings.name_prefix)
    return TransferPlan(source=source, destination=dest_dir / filename)
