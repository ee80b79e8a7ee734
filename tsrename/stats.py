"""
Statistics tracking for organizing runs.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core import VisitResult


class StatsManager:
    """Encapsulates outcome counters for one run."""

    def __init__(self):
        self._stats = {
            'organized': 0,
            'duplicates': 0,
            'skipped': 0,
            'failed': 0,
            'sidecars': 0,
            'total_size': 0,
        }

    def record(self, result: "VisitResult") -> None:
        """Count one visit outcome."""
        key = result.status.value
        self._stats[key] += 1
        if result.sidecar_moved:
            self._stats['sidecars'] += 1

    def add_file_size(self, size: int) -> None:
        self._stats['total_size'] += size

    def get_total_size_mb(self) -> float:
        return self._stats['total_size'] / (1024 * 1024)

    def has_errors(self) -> bool:
        return self._stats['failed'] > 0

    # Individual stat getters for reporting
    def get_organized(self) -> int:
        return self._stats['organized']

    def get_duplicates(self) -> int:
        return self._stats['duplicates']

    def get_skipped(self) -> int:
        return self._stats['skipped']

    def get_failed(self) -> int:
        return self._stats['failed']

    def get_sidecars(self) -> int:
        return self._stats['sidecars']
