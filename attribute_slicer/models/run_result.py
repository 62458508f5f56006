from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""CLI run result models.

Aggregates per-input conversion outcomes for the SUMMARY line. The conversion
itself does not use these; they belong to the batch (CLI) layer.
"""

__all__ = [
    "FileStat",
    "RunResult",
]


@dataclass(frozen=True)
class FileStat:
    """Outcome of converting one input file."""
    file_name: str
    status: str  # success/failed
    items: int = 0  # converted items
    series: int = 0  # legend entries
    elapsed_seconds: float = 0.0
    output_path: str | None = None  # written JSON file (None -> stdout / failed)
    error: str | None = None  # failure reason


@dataclass(frozen=True)
class RunResult:
    """Aggregated results of a CLI run."""
    success_files: int
    failed_files: int
    total_items: int
    total_series: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files

    @classmethod
    def from_stats(cls, stats: list[FileStat], start_time: datetime, end_time: datetime) -> RunResult:
        success = [s for s in stats if s.status == "success"]
        return cls(
            success_files=len(success),
            failed_files=len(stats) - len(success),
            total_items=sum(s.items for s in success),
            total_series=sum(s.series for s in success),
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - start_time).total_seconds(),
            file_stats=stats,
        )
