from __future__ import annotations

from pathlib import Path

import pytest
from evolab.activations import ActivationFunction
from evolab.config import EvolutionConfig, load_evolution_config, load_run_config


def test_load_evolution_config(tmp_path: Path) -> None:
    path = tmp_path / "evolution.yml"
    path.write_text(
        """
rounds: 5
tick_s: 0.05
seed: 9
pool:
  ideal_population_size: 12
  max_population_size: 30
  sexual_rate: 0.2
mutation:
  connect_rate: 0.3
  activation_options: [relu, tanh]
""",
        encoding="utf-8",
    )
    config = load_evolution_config(path)
    assert config.rounds == 5
    assert config.tick_s == pytest.approx(0.05)
    assert config.seed == 9
    assert config.ideal_population_size == 12
    assert config.connect_rate == pytest.approx(0.3)

    pool_config = config.gene_pool_config()
    assert pool_config.population_ceiling == 30
    assert pool_config.sexual_rate == pytest.approx(0.2)
    assert pool_config.mutation.connect_rate == pytest.approx(0.3)
    assert pool_config.mutation.activation_options == (
        ActivationFunction.RELU,
        ActivationFunction.TANH,
    )


def test_evolution_config_defaults(tmp_path: Path) -> None:
    path = tmp_path / "evolution.yml"
    path.write_text("", encoding="utf-8")
    config = load_evolution_config(path)
    assert config.rounds == 10
    assert config.seed is None
    assert config.blank_frequency == pytest.approx(0.1)
    assert config.gene_pool_config().population_ceiling == 40


def test_evolution_config_validation(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        EvolutionConfig(rounds=0)
    with pytest.raises(ValueError):
        EvolutionConfig(rounds=1, tick_s=0.0)

    path = tmp_path / "evolution.yml"
    path.write_text("pool: 3\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_evolution_config(path)

    path.write_text("- rounds\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_evolution_config(path)

    path.write_text("pool:\n  hidden_count: 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="hidden_count"):
        load_evolution_config(path)


def test_load_run_config_resolves_relative_paths(tmp_path: Path) -> None:
    config_dir = tmp_path / "configs"
    config_dir.mkdir()
    path = config_dir / "run.yml"
    path.write_text(
        """
evolution_config: evolution.yml
arena_config: ../arena/env.yml
output_dir: ../runs
save_every: 5
""",
        encoding="utf-8",
    )
    run = load_run_config(path)
    assert run.evolution_config == (config_dir / "evolution.yml").resolve()
    assert run.arena_config == (tmp_path / "arena" / "env.yml").resolve()
    assert run.output_dir == (tmp_path / "runs").resolve()
    assert run.save_every == 5
    assert run.resume is None


def test_run_config_requires_both_configs(tmp_path: Path) -> None:
    path = tmp_path / "run.yml"
    path.write_text("evolution_config: evolution.yml\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_run_config(path)
