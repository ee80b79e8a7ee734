"""
Copy/move primitives used to place files into the organized tree.
"""

import os
import shutil
from pathlib import Path

from .constants import get_logger
from .errors import TransferError


class FileOperations:
    """Directory creation and copy/move transfers, with dry-run support."""

    def __init__(self, delete_source: bool = False, dry_run: bool = False):
        self.delete_source = delete_source
        self.dry_run = dry_run
        self.logger = get_logger("tsrename.file_operations")

    @staticmethod
    def same_path(source: Path, dest: Path) -> bool:
        return os.path.abspath(source) == os.path.abspath(dest)

    def ensure_directory(self, directory: Path) -> None:
        """Create directory and parents if needed, with dry-run support."""
        if self.dry_run or directory.is_dir():
            return
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TransferError(f"{directory}: {e}", category="mkdir")

    def transfer(self, source: Path, dest: Path) -> None:
        """Move (rename, falling back to copy+delete) or copy ``source`` to ``dest``."""
        if self.dry_run:
            action = "move" if self.delete_source else "copy"
            self.logger.info(f"[dry-run] {action} {source} -> {dest}")
            return

        self.ensure_directory(dest.parent)

        if self.delete_source:
            try:
                os.rename(source, dest)
                self.logger.debug(f"Renamed {source} -> {dest}")
                return
            except OSError as e:
                # Typically a cross-device link; copy and delete instead
                self.logger.debug(f"Rename failed for {source}, copying instead: {e}")

        self.copy_file(source, dest)

    def copy_file(self, source: Path, dest: Path) -> None:
        """Byte-for-byte copy; removes the source afterwards in delete mode."""
        if self.same_path(source, dest):
            self.logger.debug(f"Not copying {source} onto itself")
            return

        try:
            with open(source, 'rb') as src_file:
                with open(dest, 'wb') as dest_file:
                    shutil.copyfileobj(src_file, dest_file)
                    dest_file.flush()
        except OSError as e:
            raise TransferError(f"copy {source} -> {dest}: {e}")

        # Carry over timestamps and permission bits where the filesystem allows
        try:
            shutil.copystat(source, dest)
        except OSError as e:
            self.logger.debug(f"Could not copy file metadata to {dest}: {e}")

        self.logger.debug(f"Copied {source} -> {dest}")

        if self.delete_source:
            try:
                os.remove(source)
            except OSError as e:
                raise TransferError(f"remove {source} after copy: {e}")
