"""Evolution sessions: arena rounds driven by the game-state machine."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from random import Random
from statistics import mean

import yaml

from games.arena.config import load_arena_config
from games.arena.env.env_core import HERO_ID, ArenaEnv, ArenaEnvConfig
from games.arena.states import (
    ARENA_GROUP,
    BEGIN,
    BETWEEN_ROUNDS,
    MAIN_MENU,
    GameState,
    Mode,
    Stage,
)

from .brain import Brain
from .config import EvolutionConfig, RunConfig
from .controller import AgentController
from .export import write_dot
from .genepool import GenePool
from .metrics import MetricsWriter, RoundMetrics
from .persistence import (
    PoolCheckpoint,
    load_checkpoint,
    save_champion,
    save_checkpoint,
)
from .reporters import EventLogger
from .state import RoundStateMachine


@dataclass(frozen=True, slots=True)
class RunArtifacts:
    """Resolved file locations used for a session."""

    root: Path
    metrics: Path
    events: Path
    checkpoint: Path
    champion: Path
    champion_dot: Path
    config: Path


@dataclass(frozen=True, slots=True)
class RoundResult:
    """Outcome of one arena round."""

    index: int
    brain: Brain
    fitness: float
    kills: int
    ticks: int


class ArenaSession:
    """Plays arena rounds, spawning a bred brain per round and retiring it on death.

    Each ``tick`` runs, in order: teardown for a state group being exited,
    the state machine update, spawning for a state being entered, and the
    steady per-tick updates of the settled state.
    """

    def __init__(
        self,
        env: ArenaEnv,
        pool: GenePool,
        *,
        tick_s: float,
        rng: Random,
        logger: EventLogger | None = None,
        mode: Mode = Mode.AI,
    ) -> None:
        self.env = env
        self.pool = pool
        self.tick_s = tick_s
        self.rng = rng
        self.mode = mode
        self._log = logger.channel("session") if logger is not None else None
        self.fsm: RoundStateMachine[GameState] = RoundStateMachine.booting(
            MAIN_MENU,
            begin=BEGIN,
            on_reject=logger.channel("fsm") if logger is not None else None,
        )
        self.controller: AgentController | None = None
        self.rounds_started = 0
        self.round_ticks = 0

    def _emit(self, message: str) -> None:
        if self._log is not None:
            self._log(message)

    def tick(self) -> RoundResult | None:
        if self.fsm.exiting_group(ARENA_GROUP):
            self._teardown_arena()
        self.fsm.update()
        entering = self.fsm.entering()
        if entering is not None and entering.stage is Stage.ARENA:
            if self.fsm.entering_group(ARENA_GROUP):
                self._start_round()
        if not self.fsm.settled:
            return None
        return self._steady()

    def play_round(self) -> RoundResult:
        """Tick until the current or next round produces a result."""
        while True:
            result = self.tick()
            if result is not None:
                return result

    def _start_round(self) -> None:
        self.rounds_started += 1
        self.round_ticks = 0
        self.env.reset(seed=self.rng.getrandbits(32))
        brain = self.pool.breed()
        self.controller = AgentController(agent_id=HERO_ID, brain=brain)
        self._emit(
            f"Round {self.rounds_started} started "
            f"(brain mutations={brain.mutations}, pool={len(self.pool)})"
        )

    def _teardown_arena(self) -> None:
        self.controller = None
        self.env.close()
        self._emit(f"Arena cleared after round {self.rounds_started}")

    def _steady(self) -> RoundResult | None:
        current = self.fsm.current
        if current == MAIN_MENU or current == BETWEEN_ROUNDS:
            self.fsm.transit_to(GameState.arena(self.mode))
            return None
        if current.stage is Stage.ARENA_OVER:
            self.fsm.transit_to(BETWEEN_ROUNDS)
            return None
        if current.stage is not Stage.ARENA or self.controller is None:
            return None

        self.controller.tick(self.env)
        done, info = self.env.step(self.tick_s)
        self.round_ticks += 1
        if not done:
            return None

        fitness = self.env.time_alive
        self.controller.retire(self.pool, fitness)
        self.fsm.transit_to(GameState.arena_over(self.mode))
        self._emit(
            f"Round {self.rounds_started} over: survived {fitness:.2f}s, "
            f"kills={info['kills']}"
        )
        return RoundResult(
            index=self.rounds_started,
            brain=self.controller.brain,
            fitness=fitness,
            kills=int(info["kills"]),
            ticks=self.round_ticks,
        )


def _allocate_run_dir(output_root: Path) -> Path:
    output_root.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    candidate = output_root / timestamp
    suffix = 1
    while candidate.exists():
        candidate = output_root / f"{timestamp}_{suffix:02d}"
        suffix += 1
    candidate.mkdir(parents=True, exist_ok=False)
    return candidate


def _build_artifacts(run_dir: Path) -> RunArtifacts:
    return RunArtifacts(
        root=run_dir,
        metrics=run_dir / "metrics.csv",
        events=run_dir / "events.log",
        checkpoint=run_dir / "pool_state.pkl",
        champion=run_dir / "champion.pkl",
        champion_dot=run_dir / "champion.dot",
        config=run_dir / "config.yml",
    )


def _write_config_snapshot(
    artifacts: RunArtifacts,
    run_config: RunConfig,
    evolution_config: EvolutionConfig,
    arena_config: ArenaEnvConfig,
) -> None:
    if artifacts.config.exists():
        return
    evolution = asdict(evolution_config)
    evolution["activation_options"] = list(evolution_config.activation_options)
    snapshot = {
        "run": {
            "evolution_config": str(run_config.evolution_config),
            "arena_config": str(run_config.arena_config),
            "output_dir": str(run_config.output_dir),
            "resume": str(run_config.resume) if run_config.resume else None,
            "save_every": run_config.save_every,
        },
        "evolution": evolution,
        "arena": asdict(arena_config),
    }
    with artifacts.config.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(snapshot, handle, sort_keys=True)


def _normalise_checkpoint_path(path: Path) -> Path:
    candidate = Path(path)
    if candidate.is_dir():
        candidate = candidate / "pool_state.pkl"
    if not candidate.exists():
        msg = f"Checkpoint file not found: {candidate}"
        raise FileNotFoundError(msg)
    return candidate


def _initialise_run(
    run_config: RunConfig,
    evolution_config: EvolutionConfig,
    arena_config: ArenaEnvConfig,
) -> tuple[RunArtifacts, PoolCheckpoint]:
    if run_config.resume:
        checkpoint_path = _normalise_checkpoint_path(run_config.resume)
        checkpoint = load_checkpoint(checkpoint_path)
        run_dir = checkpoint_path.parent
    else:
        run_dir = _allocate_run_dir(run_config.output_dir)
        seed_rng = Random(evolution_config.seed)
        pool = GenePool.new_eden(
            config=evolution_config.gene_pool_config(),
            rng=Random(seed_rng.getrandbits(32)),
        )
        checkpoint = PoolCheckpoint(
            rounds_played=0,
            pool=pool,
            best_genotype=None,
            best_fitness=float("-inf"),
        )
    artifacts = _build_artifacts(run_dir)
    _write_config_snapshot(artifacts, run_config, evolution_config, arena_config)
    return artifacts, checkpoint


def _save_champion(artifacts: RunArtifacts, result: RoundResult) -> None:
    save_champion(
        artifacts.champion,
        round_index=result.index,
        fitness=result.fitness,
        genotype=result.brain,
    )
    with artifacts.champion_dot.open("w", encoding="utf-8") as handle:
        write_dot(result.brain, handle, name="Champion")


def _should_save(rounds_played: int, interval: int | None) -> bool:
    if interval is None or interval <= 0:
        return False
    return rounds_played % interval == 0


def run_training(
    run_config: RunConfig,
    evolution_config: EvolutionConfig,
    *,
    echo: bool = False,
) -> None:
    arena_config = load_arena_config(run_config.arena_config)
    artifacts, checkpoint = _initialise_run(
        run_config,
        evolution_config,
        arena_config,
    )
    pool = checkpoint.pool
    best_fitness = checkpoint.best_fitness
    best_genotype = checkpoint.best_genotype
    rounds_played = checkpoint.rounds_played

    if run_config.resume:
        print(f"[train] resuming from checkpoint: {artifacts.checkpoint}")
    else:
        print(f"[train] run directory: {artifacts.root}")

    with MetricsWriter(artifacts.metrics) as metrics_writer, EventLogger(
        artifacts.events, echo=echo
    ) as logger:
        mode = "resumed" if run_config.resume else "started"
        logger.log(f"Session {mode} at {artifacts.root}")
        logger.log(
            f"Configs -> evolution={run_config.evolution_config} "
            f"arena={run_config.arena_config}"
        )
        pool.listener = logger.channel("pool")
        session = ArenaSession(
            ArenaEnv(arena_config),
            pool,
            tick_s=evolution_config.tick_s,
            rng=Random(pool.rng.getrandbits(32)),
            logger=logger,
        )
        session.rounds_started = rounds_played

        while rounds_played < evolution_config.rounds:
            result = session.play_round()
            rounds_played = result.index

            if result.fitness > best_fitness or best_genotype is None:
                best_fitness = result.fitness
                best_genotype = result.brain
                _save_champion(artifacts, result)
                logger.log(
                    f"New champion in round {result.index} "
                    f"(fitness={best_fitness:.3f})."
                )

            pool_best = pool.best()
            fitness_values = [entry.fitness for entry in pool]
            metrics_writer.append(
                RoundMetrics(
                    round=result.index,
                    fitness=result.fitness,
                    kills=result.kills,
                    ticks=result.ticks,
                    brain_mutations=result.brain.mutations,
                    pool_size=len(pool),
                    pool_best_fitness=pool_best.fitness if pool_best else 0.0,
                    pool_mean_fitness=mean(fitness_values) if fitness_values else 0.0,
                    best_fitness=best_fitness,
                )
            )
            print(f"Round {result.index}: survived {result.fitness:.2f}s")

            if _should_save(rounds_played, run_config.save_every):
                save_checkpoint(
                    artifacts.checkpoint,
                    PoolCheckpoint(
                        rounds_played=rounds_played,
                        pool=pool,
                        best_genotype=best_genotype,
                        best_fitness=best_fitness,
                    ),
                )
                logger.log(f"Checkpoint saved after round {rounds_played}.")

        save_checkpoint(
            artifacts.checkpoint,
            PoolCheckpoint(
                rounds_played=rounds_played,
                pool=pool,
                best_genotype=best_genotype,
                best_fitness=best_fitness,
            ),
        )
        logger.log("Final checkpoint saved.")
        pool.listener = None


__all__ = ["ArenaSession", "RoundResult", "RunArtifacts", "run_training"]
