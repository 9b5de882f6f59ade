"""Per-round metrics recorded as CSV."""

from __future__ import annotations

import csv
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import IO, Any


@dataclass(frozen=True, slots=True)
class RoundMetrics:
    """Outcome of one arena round and the pool state after it."""

    round: int
    fitness: float
    kills: int
    ticks: int
    brain_mutations: int
    pool_size: int
    pool_best_fitness: float
    pool_mean_fitness: float
    best_fitness: float


class MetricsWriter:
    """CSV-backed writer that appends one row per round."""

    _fieldnames = [item.name for item in fields(RoundMetrics)]

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        exists = self._path.exists()
        self._handle: IO[str] = self._path.open(
            "a" if exists else "w", encoding="utf-8", newline=""
        )
        self._writer = csv.DictWriter(self._handle, fieldnames=self._fieldnames)
        if not exists:
            self._writer.writeheader()
            self._handle.flush()

    def __enter__(self) -> MetricsWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def append(self, row: RoundMetrics) -> None:
        self._writer.writerow(asdict(row))
        self._handle.flush()

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    @property
    def path(self) -> Path:
        return self._path


__all__ = ["MetricsWriter", "RoundMetrics"]
