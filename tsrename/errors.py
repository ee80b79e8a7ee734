"""
Error taxonomy for tsrename.

Every error carries the bracketed category used to tag its log line.
"""

from typing import Optional


class TsrenameError(Exception):
    """Base error for the project."""

    category = "error"

    def __init__(self, message: str, category: Optional[str] = None):
        super().__init__(message)
        if category is not None:
            self.category = category

    def log_message(self) -> str:
        return f"[{self.category}] {self}"


class ConfigurationError(TsrenameError):
    """Fatal start-up problem; aborts before any file is processed."""

    category = "path"


class DiscoveryError(TsrenameError):
    category = "stat"


class TimestampError(TsrenameError):
    category = "parse"


class NoTimestampFound(TimestampError):
    pass


class MalformedTimestamp(TimestampError):
    pass


class SourceUnreadable(TimestampError):
    category = "exif"


class TransferError(TsrenameError):
    category = "move"


class SidecarError(TransferError):
    """Sidecar transfer failed; the primary file is unaffected."""

    category = "exif"
