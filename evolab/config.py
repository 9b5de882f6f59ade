"""Configuration loading utilities for evolution sessions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .activations import MUTATION_CANDIDATES, ActivationFunction
from .brain import MutationConfig
from .genepool import GenePoolConfig


@dataclass(slots=True)
class EvolutionConfig:
    rounds: int
    tick_s: float = 1.0 / 30.0
    seed: int | None = None
    ideal_population_size: int = 20
    max_population_size: int | None = None
    blank_frequency: float = 0.1
    fitness_floor: float = 40.0
    eden_fitness: float = 800.0
    backfill_fitness: float = 0.0
    hidden_count: int = 3
    random_weight_range: float = 1.0
    asexual_strength: float = 0.12
    sexual_strength: float = 0.06
    sexual_rate: float = 0.0
    mutation_budget: float = 20.0
    weight_deviation: float = 0.5
    weight_rate: float = 1.0
    connect_rate: float = 0.15
    disconnect_rate: float = 0.25
    activation_rate: float = 0.4
    activation_options: tuple[str, ...] = field(
        default_factory=lambda: tuple(option.value for option in MUTATION_CANDIDATES)
    )

    def __post_init__(self) -> None:
        if self.rounds <= 0:
            msg = "rounds must be positive."
            raise ValueError(msg)
        if self.tick_s <= 0.0:
            msg = "tick_s must be positive."
            raise ValueError(msg)
        # Pool and mutation settings are validated up front too.
        self.gene_pool_config()

    def mutation_config(self) -> MutationConfig:
        return MutationConfig(
            weight_deviation=self.weight_deviation,
            weight_rate=self.weight_rate,
            connect_rate=self.connect_rate,
            disconnect_rate=self.disconnect_rate,
            activation_rate=self.activation_rate,
            activation_options=tuple(
                ActivationFunction.coerce(option) for option in self.activation_options
            ),
        )

    def gene_pool_config(self) -> GenePoolConfig:
        return GenePoolConfig(
            ideal_population_size=self.ideal_population_size,
            max_population_size=self.max_population_size,
            blank_frequency=self.blank_frequency,
            fitness_floor=self.fitness_floor,
            eden_fitness=self.eden_fitness,
            backfill_fitness=self.backfill_fitness,
            hidden_count=self.hidden_count,
            random_weight_range=self.random_weight_range,
            asexual_strength=self.asexual_strength,
            sexual_strength=self.sexual_strength,
            sexual_rate=self.sexual_rate,
            mutation_budget=self.mutation_budget,
            mutation=self.mutation_config(),
        )


@dataclass(slots=True)
class RunConfig:
    evolution_config: Path
    arena_config: Path
    output_dir: Path = Path("runs")
    resume: Path | None = None
    save_every: int | None = None

    def resolve(self, base_path: Path) -> RunConfig:
        return RunConfig(
            evolution_config=(base_path / self.evolution_config).resolve(),
            arena_config=(base_path / self.arena_config).resolve(),
            output_dir=(base_path / self.output_dir).resolve(),
            resume=(base_path / self.resume).resolve() if self.resume else None,
            save_every=self.save_every,
        )


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        msg = f"Expected mapping in YAML file: {path}"
        raise ValueError(msg)
    return data


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, Mapping):
        msg = f"Section {name!r} must be a mapping."
        raise ValueError(msg)
    return section


def load_evolution_config(path: Path) -> EvolutionConfig:
    data = _load_yaml(path)
    pool = _section(data, "pool")
    mutation = _section(data, "mutation")
    defaults = EvolutionConfig(rounds=1)
    max_population = pool.get("max_population_size")
    options = mutation.get("activation_options", defaults.activation_options)
    return EvolutionConfig(
        rounds=int(data.get("rounds", 10)),
        tick_s=float(data.get("tick_s", defaults.tick_s)),
        seed=(int(data["seed"]) if data.get("seed") is not None else None),
        ideal_population_size=int(
            pool.get("ideal_population_size", defaults.ideal_population_size)
        ),
        max_population_size=(
            int(max_population) if max_population is not None else None
        ),
        blank_frequency=float(pool.get("blank_frequency", defaults.blank_frequency)),
        fitness_floor=float(pool.get("fitness_floor", defaults.fitness_floor)),
        eden_fitness=float(pool.get("eden_fitness", defaults.eden_fitness)),
        backfill_fitness=float(
            pool.get("backfill_fitness", defaults.backfill_fitness)
        ),
        hidden_count=int(pool.get("hidden_count", defaults.hidden_count)),
        random_weight_range=float(
            pool.get("random_weight_range", defaults.random_weight_range)
        ),
        asexual_strength=float(
            pool.get("asexual_strength", defaults.asexual_strength)
        ),
        sexual_strength=float(pool.get("sexual_strength", defaults.sexual_strength)),
        sexual_rate=float(pool.get("sexual_rate", defaults.sexual_rate)),
        mutation_budget=float(pool.get("mutation_budget", defaults.mutation_budget)),
        weight_deviation=float(
            mutation.get("weight_deviation", defaults.weight_deviation)
        ),
        weight_rate=float(mutation.get("weight_rate", defaults.weight_rate)),
        connect_rate=float(mutation.get("connect_rate", defaults.connect_rate)),
        disconnect_rate=float(
            mutation.get("disconnect_rate", defaults.disconnect_rate)
        ),
        activation_rate=float(
            mutation.get("activation_rate", defaults.activation_rate)
        ),
        activation_options=tuple(str(option) for option in options),
    )


def load_run_config(path: Path) -> RunConfig:
    data = _load_yaml(path)
    evolution_path = data.get("evolution_config")
    arena_path = data.get("arena_config")
    if evolution_path is None or arena_path is None:
        msg = "run.yml must specify 'evolution_config' and 'arena_config' paths"
        raise ValueError(msg)
    base = path.parent
    run = RunConfig(
        evolution_config=Path(evolution_path),
        arena_config=Path(arena_path),
        output_dir=Path(data.get("output_dir", "runs")),
        resume=(Path(data["resume"]) if data.get("resume") else None),
        save_every=(int(data["save_every"]) if data.get("save_every") else None),
    )
    return run.resolve(base)


__all__ = [
    "EvolutionConfig",
    "RunConfig",
    "load_evolution_config",
    "load_run_config",
]
