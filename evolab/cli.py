"""Command-line interface for arena evolution sessions."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import yaml

from games.arena.config import load_arena_config

from .config import EvolutionConfig, RunConfig, load_evolution_config, load_run_config
from .export import pretty_print, to_record, write_dot
from .persistence import load_checkpoint
from .training import run_training


def _load_bundle(config_path: Path) -> tuple[RunConfig, EvolutionConfig]:
    run_config = load_run_config(config_path)
    evolution_config = load_evolution_config(run_config.evolution_config)
    return run_config, evolution_config


def _cmd_train(args: argparse.Namespace) -> int:
    config_path = Path(args.config)
    run_config, evolution_config = _load_bundle(config_path)

    if args.dry_run:
        load_arena_config(run_config.arena_config)
        print("[train] configuration validated")
        print(f"  evolution_config: {run_config.evolution_config}")
        print(f"  arena_config: {run_config.arena_config}")
        print(f"  rounds: {evolution_config.rounds}")
        print(
            "  ideal_population_size: "
            f"{evolution_config.ideal_population_size}"
        )
        return 0

    run_training(run_config, evolution_config, echo=args.echo)
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    path = Path(args.checkpoint)
    if path.is_dir():
        path = path / "pool_state.pkl"
    if not path.exists():
        print(f"Checkpoint file not found: {path}", file=sys.stderr)
        return 1
    checkpoint = load_checkpoint(path)
    pool = checkpoint.pool

    print(f"[inspect] {path}")
    print(f"  rounds_played: {checkpoint.rounds_played}")
    print(f"  pool_size: {len(pool)}")
    print(f"  preserved_total: {pool.preserved_total}")
    for entry in sorted(pool, key=lambda item: item.fitness, reverse=True)[: args.top]:
        print(
            f"  #{entry.generation}: fitness={entry.fitness:.3f} "
            f"mutations={entry.genotype.mutations}"
        )

    genotype = checkpoint.best_genotype
    if genotype is None:
        print("  no champion recorded yet")
        return 0
    print(f"  best_fitness: {checkpoint.best_fitness:.3f}")
    if args.record:
        print(yaml.safe_dump(to_record(genotype), sort_keys=False), end="")
    else:
        print(pretty_print(genotype), end="")
    if args.dot:
        dot_path = Path(args.dot)
        dot_path.parent.mkdir(parents=True, exist_ok=True)
        with dot_path.open("w", encoding="utf-8") as handle:
            write_dot(genotype, handle, name="Champion")
        print(f"  dot graph written to {dot_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evolab",
        description="Neuroevolution of arena agents",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    train = subparsers.add_parser(
        "train",
        help="Run an evolution session using a YAML configuration bundle",
    )
    train.add_argument(
        "--config",
        required=True,
        help="Path to run configuration YAML",
    )
    train.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration without playing rounds",
    )
    train.add_argument(
        "--echo",
        action="store_true",
        help="Also print session events to stdout",
    )
    train.set_defaults(func=_cmd_train)

    inspect = subparsers.add_parser(
        "inspect",
        help="Summarise a saved gene pool and its champion brain",
    )
    inspect.add_argument(
        "--checkpoint",
        required=True,
        help="Checkpoint file or run directory",
    )
    inspect.add_argument(
        "--top",
        type=int,
        default=5,
        help="Number of pool entries to list, fittest first",
    )
    inspect.add_argument(
        "--record",
        action="store_true",
        help="Dump the champion as a flat YAML record instead of a table",
    )
    inspect.add_argument(
        "--dot",
        default=None,
        help="Write the champion as a Graphviz dot file to this path",
    )
    inspect.set_defaults(func=_cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    result = args.func(args)
    return int(result)


if __name__ == "__main__":  # pragma: no cover - entry point
    raise SystemExit(main())
