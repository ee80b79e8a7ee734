"""Timestamp sources: filename patterns, EXIF tags and JSON sidecars."""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from PIL import Image, UnidentifiedImageError

from .config import TimestampStrategy
from .constants import (EXIF_DATETIME, EXIF_DATETIME_DIGITIZED, EXIF_DATETIME_FORMAT,
                        EXIF_DATETIME_ORIGINAL, EXIF_IFD_POINTER, SIDECAR_DATE_FIELDS,
                        TIMESTAMP_FORMAT, TIMESTAMP_PATTERN, get_logger)
from .errors import MalformedTimestamp, NoTimestampFound, SourceUnreadable
from .planner import sidecar_path


logger = get_logger("tsrename.timestamps")


class TimestampSource:
    """Resolves the organizing date-time of a file.

    Subclasses raise a :class:`~tsrename.errors.TimestampError` subclass when
    no usable timestamp exists.
    """

    name = "abstract"

    def resolve(self, file_path: Path) -> datetime:
        raise NotImplementedError


class FilenamePatternSource(TimestampSource):
    """Take the first ``YYYY_MM_DD_HH_MM_SS`` run found anywhere in the path."""

    name = "filename"

    def resolve(self, file_path: Path) -> datetime:
        match = TIMESTAMP_PATTERN.search(str(file_path))
        if not match:
            raise NoTimestampFound(f"no timestamp in filename {file_path}")

        try:
            return datetime.strptime(match.group(0), TIMESTAMP_FORMAT)
        except ValueError as e:
            raise MalformedTimestamp(f"bad timestamp {match.group(0)!r} in {file_path}: {e}")


class MetadataSource(TimestampSource):
    """Read the date-time from a JSON sidecar, or from the file's EXIF tags.

    When a sidecar exists it is authoritative: a sidecar that cannot be read
    or parsed fails the file rather than falling through to EXIF.
    """

    name = "metadata"

    def resolve(self, file_path: Path) -> datetime:
        sidecar = sidecar_path(file_path)
        if sidecar.exists():
            datetime_string = self.read_sidecar(sidecar)
        else:
            datetime_string = self.read_exif(file_path)
        return parse_exif_datetime(datetime_string)

    @staticmethod
    def read_sidecar(sidecar: Path) -> str:
        """Return the first non-empty date field of a JSON sidecar."""
        try:
            with open(sidecar, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise SourceUnreadable(f"can't read file {sidecar}: {e}", category="json")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedTimestamp(f"can't unmarshal {sidecar}: {e}", category="json")

        if not isinstance(data, dict):
            raise MalformedTimestamp(f"can't unmarshal {sidecar}: expected an object",
                                     category="json")

        for field in SIDECAR_DATE_FIELDS:
            value = data.get(field)
            if isinstance(value, str) and value.strip():
                logger.debug(f"Sidecar date: {sidecar}[{field}] = {value}")
                return value

        raise NoTimestampFound(f"no date field in sidecar {sidecar}", category="json")

    @staticmethod
    def read_exif(file_path: Path) -> str:
        """Return the embedded EXIF date-time string of an image."""
        try:
            with Image.open(file_path) as img:
                exif = img.getexif()
                tags: Dict[int, object] = dict(exif)
                tags.update(exif.get_ifd(EXIF_IFD_POINTER))
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            raise SourceUnreadable(f"couldn't decode exif from image {file_path}: {e}")

        # Priority order mirrors the sidecar fields
        for tag in (EXIF_DATETIME, EXIF_DATETIME_ORIGINAL, EXIF_DATETIME_DIGITIZED):
            value = _as_text(tags.get(tag))
            if value:
                logger.debug(f"EXIF date: {file_path}[{tag:#06x}] = {value}")
                return value

        raise NoTimestampFound(f"no DateTime tag in {file_path}", category="exif")


def _as_text(value: object) -> Optional[str]:
    if isinstance(value, bytes):
        value = value.decode('ascii', errors='replace')
    if not isinstance(value, str):
        return None
    return value.strip().strip('\x00').strip() or None


def parse_exif_datetime(datetime_string: str) -> datetime:
    """Parse an EXIF ``YYYY:MM:DD HH:MM:SS`` string."""
    cleaned = datetime_string.strip().strip('\x00').strip()
    try:
        return datetime.strptime(cleaned, EXIF_DATETIME_FORMAT)
    except ValueError as e:
        raise MalformedTimestamp(f"parse datetime {datetime_string!r}: {e}")


def get_timestamp_source(strategy: TimestampStrategy) -> TimestampSource:
    """Build the timestamp source selected for this run."""
    if strategy is TimestampStrategy.METADATA:
        return MetadataSource()
    return FilenamePatternSource()
