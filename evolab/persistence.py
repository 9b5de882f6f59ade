"""Checkpoint helpers for saving and resuming evolution sessions."""

from __future__ import annotations

import pickle
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .brain import Brain
from .genepool import GenePool


@dataclass(slots=True)
class PoolCheckpoint:
    """Serializable snapshot of a session: the pool and the best brain so far."""

    rounds_played: int
    pool: GenePool
    best_genotype: Brain | None
    best_fitness: float


def save_checkpoint(path: Path, checkpoint: PoolCheckpoint) -> None:
    """Persist a checkpoint; pool listeners are session-bound and not saved."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    detached = replace(checkpoint, pool=replace(checkpoint.pool, listener=None))
    with target.open("wb") as handle:
        pickle.dump(detached, handle, protocol=pickle.HIGHEST_PROTOCOL)


def load_checkpoint(path: Path) -> PoolCheckpoint:
    source = Path(path)
    with source.open("rb") as handle:
        data: Any = pickle.load(handle)
    if not isinstance(data, PoolCheckpoint):
        msg = f"Invalid checkpoint payload in {source}"
        raise ValueError(msg)
    return data


def save_champion(path: Path, *, round_index: int, fitness: float, genotype: Brain) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = {"round": round_index, "fitness": fitness, "genotype": genotype}
    with target.open("wb") as handle:
        pickle.dump(payload, handle, protocol=pickle.HIGHEST_PROTOCOL)


def load_champion(path: Path) -> dict[str, Any]:
    source = Path(path)
    with source.open("rb") as handle:
        data: Any = pickle.load(handle)
    if not isinstance(data, dict) or not isinstance(data.get("genotype"), Brain):
        msg = f"Invalid champion payload in {source}"
        raise ValueError(msg)
    return data


__all__ = [
    "PoolCheckpoint",
    "load_champion",
    "load_checkpoint",
    "save_champion",
    "save_checkpoint",
]
