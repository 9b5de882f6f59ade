from __future__ import annotations

import pickle
from pathlib import Path
from random import Random

import pytest
from evolab.brain import Brain
from evolab.genepool import GenePool
from evolab.persistence import (
    PoolCheckpoint,
    load_champion,
    load_checkpoint,
    save_champion,
    save_checkpoint,
)


def test_checkpoint_round_trip_detaches_listener(tmp_path: Path) -> None:
    messages: list[str] = []
    pool = GenePool.new_eden(rng=Random(4), listener=messages.append)
    pool.preserve(Brain.randomized(3, Random(1)), 3.0)
    champion = pool.entries[-1].genotype
    path = tmp_path / "nested" / "pool_state.pkl"

    save_checkpoint(
        path,
        PoolCheckpoint(rounds_played=4, pool=pool, best_genotype=champion, best_fitness=3.0),
    )
    restored = load_checkpoint(path)

    assert pool.listener is not None
    assert restored.pool.listener is None
    assert restored.rounds_played == 4
    assert restored.best_genotype == champion
    assert [entry.fitness for entry in restored.pool] == [
        entry.fitness for entry in pool
    ]
    assert restored.pool.preserved_total == pool.preserved_total
    # The restored pool continues the same random stream.
    assert restored.pool.rng.random() == pool.rng.random()


def test_load_checkpoint_rejects_foreign_payload(tmp_path: Path) -> None:
    path = tmp_path / "pool_state.pkl"
    with path.open("wb") as handle:
        pickle.dump({"not": "a checkpoint"}, handle)
    with pytest.raises(ValueError):
        load_checkpoint(path)


def test_champion_round_trip(tmp_path: Path) -> None:
    brain = Brain.new_dumb(3).mutate(0.5, Random(2))
    path = tmp_path / "champion.pkl"
    save_champion(path, round_index=7, fitness=12.5, genotype=brain)
    payload = load_champion(path)
    assert payload["round"] == 7
    assert payload["fitness"] == 12.5
    assert payload["genotype"] == brain
    assert payload["genotype"].mutations == 1

    with path.open("wb") as handle:
        pickle.dump({"round": 1}, handle)
    with pytest.raises(ValueError):
        load_champion(path)
