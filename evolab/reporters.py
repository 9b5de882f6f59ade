"""Event log for long-running evolution sessions."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path


class EventLogger:
    """Append-only text log with ISO timestamps and optional topic tags."""

    def __init__(self, path: Path, *, echo: bool = False) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self._path.open("a", encoding="utf-8")
        self._echo = echo

    def __enter__(self) -> EventLogger:
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()

    def log(self, message: str, *, topic: str | None = None) -> None:
        """Append a timestamped message, tagged with ``topic`` when given."""
        timestamp = datetime.now(timezone.utc).isoformat()
        tag = f"[{topic}] " if topic else ""
        line = f"{timestamp} {tag}{message}"
        self._handle.write(line + "\n")
        self._handle.flush()
        if self._echo:
            print(f"{tag}{message}")

    def channel(self, topic: str) -> Callable[[str], None]:
        """Return a callback that logs under ``topic``, for pool/FSM hooks."""

        def emit(message: str) -> None:
            self.log(message, topic=topic)

        return emit

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    @property
    def path(self) -> Path:
        return self._path


__all__ = ["EventLogger"]
