"""
Formats, naming conventions and logging setup for tsrename.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PROGRAM = "tsrename"

# Date-time layouts
TIMESTAMP_FORMAT = "%Y_%m_%d_%H_%M_%S"
EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
TIMESTAMP_PATTERN = re.compile(r"[0-9]{4}_[0-9]{2}_[0-9]{2}_[0-9]{2}_[0-9]{2}_[0-9]{2}")

# Sidecar files carry exported metadata next to the media file
SIDECAR_SUFFIX = ".json"
SIDECAR_DATE_FIELDS = ("DateTime", "DateTimeOriginal", "DateTimeDigitized")

# EXIF tag ids: DateTime lives in IFD0, the other two in the Exif sub-IFD
EXIF_IFD_POINTER = 0x8769
EXIF_DATETIME = 0x0132
EXIF_DATETIME_ORIGINAL = 0x9003
EXIF_DATETIME_DIGITIZED = 0x9004

NUISANCE_NAMES = (".ds_store", "thumbs.db", "desktop.ini")

_console: Optional[Console] = None


def get_logger(name: str = PROGRAM) -> logging.Logger:
    """Return the package logger (or a child of it)."""
    return logging.getLogger(name)


def get_console() -> Console:
    """Shared console bound to stderr; stdout is reserved for destination paths."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """Attach the console (and optional file) handlers to the package logger."""
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Rich rendering only for interactive terminals; piped output stays one line per message
    if sys.stderr is not None and sys.stderr.isatty():
        console_handler = RichHandler(console=get_console(), show_time=False, show_path=False)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8", errors="backslashreplace")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
        ))
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG)
    return logger
