"""Streaming gene pool: fitness-weighted spawning and probabilistic culling."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from random import Random

from .brain import Brain, MutationConfig, ShapeMismatchError
from .sensors import OUTPUT_COUNT

PoolListener = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class GenePoolConfig:
    """Tunables for selection, reproduction and population regulation."""

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
    mutation: MutationConfig = field(default_factory=MutationConfig)

    def __post_init__(self) -> None:
        if self.ideal_population_size <= 0:
            msg = "ideal_population_size must be positive."
            raise ValueError(msg)
        if (
            self.max_population_size is not None
            and self.max_population_size < self.ideal_population_size
        ):
            msg = "max_population_size must be >= ideal_population_size."
            raise ValueError(msg)
        for label, value in (
            ("blank_frequency", self.blank_frequency),
            ("sexual_rate", self.sexual_rate),
        ):
            if not 0.0 <= value <= 1.0:
                msg = f"{label} must be in [0, 1]."
                raise ValueError(msg)
        if self.hidden_count < OUTPUT_COUNT:
            msg = f"hidden_count must be >= output count ({OUTPUT_COUNT})."
            raise ValueError(msg)
        if self.fitness_floor <= 0.0:
            msg = "fitness_floor must be positive."
            raise ValueError(msg)
        if self.random_weight_range <= 0.0:
            msg = "random_weight_range must be positive."
            raise ValueError(msg)
        if self.mutation_budget < 0.0:
            msg = "mutation_budget must be >= 0."
            raise ValueError(msg)

    @property
    def population_ceiling(self) -> int:
        if self.max_population_size is None:
            return 2 * self.ideal_population_size
        return self.max_population_size

    @property
    def population_floor(self) -> int:
        return self.ideal_population_size // 4

    @property
    def cull_threshold(self) -> float:
        return self.ideal_population_size * 2 / 3


@dataclass(slots=True)
class PoolEntry:
    """A stored genotype with its accumulated fitness and generation id."""

    genotype: Brain
    fitness: float
    generation: int


def _binomial(rng: Random, trials: int, probability: float) -> int:
    return sum(1 for _ in range(trials) if rng.random() < probability)


@dataclass(slots=True)
class GenePool:
    """Population container driven by asynchronous births and deaths.

    ``spawn`` samples stored genotypes weighted by fitness and halves the
    weight of the one it picked, so no single champion takes over. ``preserve``
    records a dead agent's genotype and keeps the population between
    ``population_floor`` and ``population_ceiling`` by retiring a random
    number of the oldest entries.
    """

    rng: Random
    config: GenePoolConfig = field(default_factory=GenePoolConfig)
    entries: list[PoolEntry] = field(default_factory=list)
    preserved_total: int = 0
    listener: PoolListener | None = field(default=None, repr=False, compare=False)

    @classmethod
    def new_eden(
        cls,
        seed_genotypes: Sequence[Brain] | None = None,
        *,
        config: GenePoolConfig | None = None,
        rng: Random | None = None,
        listener: PoolListener | None = None,
    ) -> GenePool:
        """Seed a pool whose founders dominate spawning until it diversifies."""
        config = config or GenePoolConfig()
        if seed_genotypes is None:
            seed_genotypes = (Brain.new_dumb(config.hidden_count),)
        entries = [
            PoolEntry(genotype=genotype, fitness=config.eden_fitness, generation=0)
            for genotype in seed_genotypes
        ]
        return cls(
            rng=rng if rng is not None else Random(),
            config=config,
            entries=entries,
            preserved_total=1,
            listener=listener,
        )

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[PoolEntry]:
        return iter(self.entries)

    def _emit(self, message: str) -> None:
        if self.listener is not None:
            self.listener(message)

    def _blank(self) -> Brain:
        return Brain.randomized(
            self.config.hidden_count,
            self.rng,
            weight_range=self.config.random_weight_range,
        )

    def _sample_index(self) -> int:
        weights = [
            max(entry.fitness, 0.0) + self.config.fitness_floor
            for entry in self.entries
        ]
        return self.rng.choices(range(len(self.entries)), weights=weights, k=1)[0]

    def spawn(self) -> Brain:
        """Pick a genotype for a newborn agent.

        Returns a fresh random genotype with probability ``blank_frequency`` or
        when the pool is empty. Otherwise the selected entry's weight is
        halved and its genotype returned; brains are immutable, so the caller
        cannot alter the stored copy.
        """
        if not self.entries or self.rng.random() < self.config.blank_frequency:
            self._emit("Spawn blank genotype")
            return self._blank()
        index = self._sample_index()
        entry = self.entries[index]
        entry.fitness /= 2.0
        self._emit(f"Spawn offspring of {entry.generation}")
        return entry.genotype.copy()

    def mutation_rounds(self) -> int:
        """More mutation rounds while the population is small."""
        return math.ceil(self.config.mutation_budget / (len(self.entries) + 0.1))

    def breed(self) -> Brain:
        """Spawn a parent (or mix two) and mutate the result for a new agent."""
        config = self.config
        if len(self.entries) >= 2 and self.rng.random() < config.sexual_rate:
            first = self.spawn()
            second = self.spawn()
            try:
                child = first.mix_with(second, self.rng)
            except ShapeMismatchError as error:
                self._emit(f"Crossover rejected ({error}); mutating one parent")
                child, strength = first, config.asexual_strength
            else:
                strength = config.sexual_strength
        else:
            child, strength = self.spawn(), config.asexual_strength
        return child.mutate_times(
            self.mutation_rounds(),
            strength,
            self.rng,
            config.mutation,
        )

    def find(self, genotype: Brain) -> PoolEntry | None:
        for entry in self.entries:
            if entry.genotype == genotype:
                return entry
        return None

    def preserve(self, genotype: Brain, fitness: float) -> PoolEntry:
        """Record the genotype of an agent that died with ``fitness``."""
        entry = self.find(genotype)
        if entry is not None:
            entry.fitness += fitness
            self._emit(
                f"Reinforced {entry.generation} by {fitness:.3f} "
                f"to {entry.fitness:.3f}"
            )
        else:
            entry = PoolEntry(
                genotype=genotype,
                fitness=fitness,
                generation=self.preserved_total,
            )
            self.entries.append(entry)
            self.preserved_total += 1
            self._emit(f"Preserved as {entry.generation} with score {fitness:.3f}")
        self._regulate()
        return entry

    def _regulate(self) -> None:
        config = self.config
        if len(self.entries) <= config.cull_threshold:
            return
        # Overpopulation: retire oldies which already had a go.
        kill_count = _binomial(
            self.rng,
            len(self.entries),
            1.0 / config.ideal_population_size,
        )
        overflow = len(self.entries) - kill_count - config.population_ceiling
        kill_count += max(overflow, 0)
        if kill_count:
            del self.entries[:kill_count]
            self._emit(f"Killed {kill_count} oldies, pop now {len(self.entries)}")
        missing = config.population_floor - len(self.entries)
        if missing > 0:
            self._emit(f"Filling up to {config.population_floor} with blanks")
            self.entries.extend(
                PoolEntry(
                    genotype=Brain.new_dumb(config.hidden_count),
                    fitness=config.backfill_fitness,
                    generation=0,
                )
                for _ in range(missing)
            )

    def best(self) -> PoolEntry | None:
        """Entry with the highest recorded fitness."""
        if not self.entries:
            return None
        return max(self.entries, key=lambda entry: entry.fitness)

    def total_fitness(self) -> float:
        return sum(entry.fitness for entry in self.entries)


__all__ = ["GenePool", "GenePoolConfig", "PoolEntry", "PoolListener"]
