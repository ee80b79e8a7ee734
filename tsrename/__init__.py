"""
tsrename - Organize photos and videos into a date-structured directory tree.

Each file's timestamp comes from a YYYY_MM_DD_HH_MM_SS pattern in its name,
or from its EXIF data (or a JSON sidecar), and the file is copied or moved
into YYYY/YYYY_MM/YYYY_MM_DD/YYYY_MM_DD_HH under the destination root.
"""

__version__ = "1.0.0"


# Public API
from .cli import main
from .config import Config, Settings, TimestampStrategy
from .core import FileVisitor, VisitResult, VisitStatus
from .discovery import Candidate, read_paths, walk_source
from .file_operations import FileOperations
from .planner import TransferPlan, plan
from .timestamps import FilenamePatternSource, MetadataSource, get_timestamp_source

__all__ = [ "main", "Config", "Settings", "TimestampStrategy", "FileVisitor", "VisitResult",
            "VisitStatus", "Candidate", "read_paths", "walk_source", "FileOperations",
            "TransferPlan", "plan", "FilenamePatternSource", "MetadataSource",
            "get_timestamp_source" ]
