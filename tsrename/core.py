"""
Per-file organizing pipeline: timestamp, plan, transfer, report.
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, TextIO

from rich.table import Table

from .config import Settings
from .constants import NUISANCE_NAMES, get_console, get_logger
from .discovery import Candidate
from .errors import SidecarError, TimestampError, TransferError
from .file_operations import FileOperations
from .planner import TransferPlan, is_sidecar, plan
from .stats import StatsManager
from .timestamps import TimestampSource, get_timestamp_source


class VisitStatus(Enum):
    ORGANIZED = "organized"
    DUPLICATE = "duplicates"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class VisitResult:
    """Outcome of visiting one discovered entry."""
    status: VisitStatus
    source: Path
    destination: Optional[Path] = None
    error: Optional[Exception] = None
    sidecar_moved: bool = False


class FileVisitor:
    """Routes each discovered file through timestamp resolution, planning and transfer.

    Per-file failures are logged and reported in the returned
    :class:`VisitResult`; they never propagate to the caller.
    """

    def __init__(self, settings: Settings, timestamp_source: Optional[TimestampSource] = None,
                 file_ops: Optional[FileOperations] = None, output: Optional[TextIO] = None):
        self.settings = settings
        self.timestamp_source = timestamp_source or get_timestamp_source(settings.strategy)
        self.file_ops = file_ops or FileOperations(delete_source=settings.delete_source,
                                                   dry_run=settings.dry_run)
        self.output = output
        self.stats_manager = StatsManager()
        self.logger = get_logger()

    def run(self, candidates: Iterable[Candidate]) -> StatsManager:
        """Visit every candidate in order, one file at a time."""
        mode = "DRY RUN" if self.settings.dry_run else (
            "MOVE" if self.settings.delete_source else "COPY")
        self.logger.debug(f"Organizing into {self.settings.output_root} "
                          f"({mode}, {self.timestamp_source.name} timestamps)")

        for candidate in candidates:
            self.visit(candidate.path, candidate.is_dir)
        return self.stats_manager

    def visit(self, file_path: Path, is_dir: bool = False) -> VisitResult:
        """Organize a single entry and record the outcome."""
        try:
            result = self._visit(file_path, is_dir)
        except Exception as e:
            self.logger.error(f"[error] processing {file_path}: {e}")
            result = VisitResult(VisitStatus.FAILED, file_path, error=e)
        self.stats_manager.record(result)
        return result

    def _visit(self, file_path: Path, is_dir: bool) -> VisitResult:
        if is_dir:
            return VisitResult(VisitStatus.SKIPPED, file_path)

        # Sidecars travel with their media file only
        if is_sidecar(file_path):
            return VisitResult(VisitStatus.SKIPPED, file_path)

        if file_path.name.lower() in NUISANCE_NAMES:
            self.logger.debug(f"Skipping {file_path}")
            return VisitResult(VisitStatus.SKIPPED, file_path)

        try:
            timestamp = self.timestamp_source.resolve(file_path)
        except TimestampError as e:
            self.logger.warning(e.log_message())
            return VisitResult(VisitStatus.FAILED, file_path, error=e)

        transfer_plan = plan(file_path, timestamp, self.settings)
        dest = transfer_plan.destination

        try:
            self.file_ops.ensure_directory(dest.parent)
        except TransferError as e:
            self.logger.error(e.log_message())
            return VisitResult(VisitStatus.FAILED, file_path, dest, error=e)

        if transfer_plan.is_self_transfer:
            self.logger.info(f"[dupe] {dest}")
            return VisitResult(VisitStatus.DUPLICATE, file_path, dest)

        size = self._file_size(file_path)
        try:
            self.file_ops.transfer(file_path, dest)
        except TransferError as e:
            self.logger.error(e.log_message())
            return VisitResult(VisitStatus.FAILED, file_path, dest, error=e)

        self._emit(dest)
        self.stats_manager.add_file_size(size)
        sidecar_moved = self._transfer_sidecar(transfer_plan)
        return VisitResult(VisitStatus.ORGANIZED, file_path, dest, sidecar_moved=sidecar_moved)

    def _emit(self, dest: Path) -> None:
        """Write a destination line to stdout, undecodable filename bytes intact."""
        stream = self.output or sys.stdout
        buffer = getattr(stream, "buffer", None)
        if buffer is None:
            print(dest, file=stream, flush=True)
            return
        stream.flush()
        buffer.write(os.fsencode(dest) + b"\n")
        buffer.flush()

    def _transfer_sidecar(self, transfer_plan: TransferPlan) -> bool:
        """Carry ``<source>.json`` over to ``<destination>.json``, if present."""
        sidecar = transfer_plan.sidecar_source
        if not sidecar.is_file():
            return False

        try:
            self.file_ops.transfer(sidecar, transfer_plan.sidecar_destination)
        except TransferError as e:
            error = SidecarError(f"couldn't move sidecar {sidecar}: {e}")
            self.logger.error(error.log_message())
            return False
        return True

    @staticmethod
    def _file_size(file_path: Path) -> int:
        try:
            return file_path.stat().st_size
        except OSError:
            return 0

    def print_summary(self) -> None:
        """Print processing summary to stderr."""
        stats = self.stats_manager
        table = Table(title="Processing Summary")
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="green")

        table.add_row("Organized", str(stats.get_organized()))
        table.add_row("Sidecars", str(stats.get_sidecars()))
        table.add_row("Duplicates Skipped", str(stats.get_duplicates()))
        table.add_row("Skipped", str(stats.get_skipped()))
        table.add_row("Failed", str(stats.get_failed()))

        size_mb = stats.get_total_size_mb()
        if size_mb > 1024:
            size_str = f"{size_mb/1024:.1f} GB"
        else:
            size_str = f"{size_mb:.1f} MB"
        table.add_row("Total Size", size_str)

        console = get_console()
        console.print(table)

        if stats.has_errors():
            console.print(f"[red]{stats.get_failed()} files could not be organized; see the log above[/red]")
