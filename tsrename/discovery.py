"""
Candidate discovery: recursive directory walks and line-oriented path streams.
"""

import os
import stat
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple

from .constants import get_logger
from .errors import DiscoveryError


logger = get_logger("tsrename.discovery")


class Candidate(NamedTuple):
    path: Path
    is_dir: bool


def walk_source(root: Path) -> Iterator[Candidate]:
    """Yield ``root`` and everything below it, depth-first in lexical order.

    Each directory is listed only when the walk reaches it. Symlinked
    directories are reported but not descended into.
    """
    try:
        is_dir = root.is_dir()
        exists = is_dir or root.exists()
    except OSError as e:
        logger.warning(DiscoveryError(f"{root}: {e}", category="walk").log_message())
        return
    if not exists:
        logger.warning(DiscoveryError(f"{root}: no such file or directory", category="walk").log_message())
        return
    yield Candidate(root, is_dir)
    if is_dir:
        yield from _walk_directory(root)


def _walk_directory(directory: Path) -> Iterator[Candidate]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        logger.warning(DiscoveryError(f"{directory}: {e}", category="walk").log_message())
        return

    for entry in entries:
        path = Path(entry.path)
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            logger.warning(DiscoveryError(f"{path}: {e}", category="walk").log_message())
            continue
        yield Candidate(path, is_dir)
        if is_dir:
            yield from _walk_directory(path)


def read_paths(lines: Iterable[str]) -> Iterator[Candidate]:
    """Yield a candidate for each line naming an existing path.

    Lines starting with ``[`` are diagnostics from another tool (or another
    tsrename in a pipeline) and are echoed to the log instead.
    """
    for line in lines:
        text = line.rstrip("\r\n")
        if not text:
            logger.debug("Skipping blank stdin line")
            continue
        if text.startswith("["):
            logger.info(f"[stdin] {text}")
            continue

        try:
            st = os.stat(text)
        except OSError:
            logger.warning(DiscoveryError(text, category="stat").log_message())
            continue
        yield Candidate(Path(text), stat.S_ISDIR(st.st_mode))
