from __future__ import annotations

import math

import pytest
from evolab.sensors import MotorOutputs
from games.arena.env.adapter import action_transform, obs_transform
from games.arena.env.env_core import HERO_ID, ArenaEnv, ArenaEnvConfig, Mob


def _quiet_config(**overrides: float) -> ArenaEnvConfig:
    return ArenaEnvConfig(base_spawn_rate=0.0, **overrides)  # type: ignore[arg-type]


def _mob_positions(env: ArenaEnv) -> list[tuple[float, float]]:
    return [(mob.x, mob.y) for mob in env.mobs]


def test_reset_is_deterministic_with_seed() -> None:
    env = ArenaEnv(ArenaEnvConfig(base_spawn_rate=5.0))
    runs = []
    for _ in range(2):
        obs = env.reset(seed=5)
        for _ in range(30):
            env.step(0.1)
        runs.append((obs, _mob_positions(env)))
    assert runs[0] == runs[1]
    assert runs[0][1]


def test_reset_observation_defaults_to_origin_target() -> None:
    env = ArenaEnv()
    obs = env.reset(seed=1)
    assert obs["target_angle"] == 0.0
    assert obs["target_distance"] == 0.0
    assert obs["time_alive"] == 0.0
    assert obs["life"] == float(env.config.hero_life)


def test_spawned_mobs_avoid_safe_zone() -> None:
    config = ArenaEnvConfig(base_spawn_rate=1000.0, mob_speed=0.0)
    env = ArenaEnv(config)
    env.reset(seed=2)
    env.step(0.1)
    assert env.mobs
    for x, y in _mob_positions(env):
        assert (
            abs(x) > config.safe_zone * config.width
            or abs(y) > config.safe_zone * config.height
        )


def test_mob_contact_costs_life_and_ends_round() -> None:
    env = ArenaEnv(_quiet_config(hero_life=1))
    env.reset(seed=0)
    env.mobs.append(Mob(x=0.0, y=20.0))
    done, info = env.step(0.1)
    assert done
    assert not env.hero_alive
    assert info["life"] == 0
    assert env.time_alive == pytest.approx(0.1)

    env.step(0.1)
    assert env.time_alive == pytest.approx(0.1)


def test_mob_contact_with_spare_life() -> None:
    env = ArenaEnv(_quiet_config())
    env.reset(seed=0)
    env.mobs.append(Mob(x=0.0, y=20.0))
    done, info = env.step(0.1)
    assert not done
    assert info["life"] == env.config.hero_life - 1
    assert info["mobs"] == 0


def test_laser_kills_mob_ahead() -> None:
    env = ArenaEnv(_quiet_config(fire_cooldown_s=0.0))
    env.reset(seed=0)
    env.mobs.append(Mob(x=0.0, y=30.0))
    env.actuate(HERO_ID, MotorOutputs(aim=0.0, turn=0.0, walk=0.0))
    done, info = env.step(0.05)
    assert not done
    assert info["kills"] == 1
    assert info["mobs"] == 0
    assert env.lasers == []


def test_hero_stops_at_arena_edge() -> None:
    env = ArenaEnv(_quiet_config(max_time_s=None))
    env.reset(seed=0)
    env.actuate(HERO_ID, MotorOutputs(aim=0.0, turn=0.0, walk=1.0, fire=False))
    for _ in range(100):
        env.step(0.1)
    assert env.hero.y == pytest.approx(env.config.height / 2.0)
    assert env.hero.x == pytest.approx(0.0)


def test_round_ends_at_time_limit() -> None:
    env = ArenaEnv(_quiet_config(max_time_s=0.5))
    env.reset(seed=0)
    assert env.step(0.25)[0] is False
    done, info = env.step(0.25)
    assert done
    assert env.hero_alive
    assert info["time_alive"] == pytest.approx(0.5)


def test_step_and_agents_are_validated() -> None:
    env = ArenaEnv()
    env.reset(seed=0)
    with pytest.raises(ValueError):
        env.step(0.0)
    with pytest.raises(KeyError):
        env.sense(HERO_ID + 1)
    with pytest.raises(KeyError):
        env.actuate(HERO_ID + 1, MotorOutputs(0.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        ArenaEnvConfig(safe_zone=0.5)
    with pytest.raises(ValueError):
        ArenaEnvConfig(max_time_s=0.0)


def test_sense_reports_nearest_mob() -> None:
    env = ArenaEnv(_quiet_config())
    env.reset(seed=0)
    env.mobs.extend([Mob(x=100.0, y=0.0), Mob(x=0.0, y=-40.0)])
    inputs = env.sense(HERO_ID)
    assert inputs.target_distance == pytest.approx(40.0)
    assert abs(inputs.target_angle) == pytest.approx(math.pi)
    assert inputs.time_survived == 0.0


def test_obs_and_action_transforms() -> None:
    env = ArenaEnv()
    obs = env.reset(seed=3)
    inputs = obs_transform(obs)
    assert inputs.target_distance == obs["target_distance"]
    assert inputs.time_survived == obs["time_alive"]

    command = action_transform(
        MotorOutputs(aim=2.0, turn=5.0, walk=-3.0),
        heading=0.5,
        rotation_speed=3.0,
        speed=120.0,
    )
    assert command.angular_velocity == pytest.approx(3.0)
    assert command.speed == pytest.approx(-120.0)
    assert command.aim_angle == pytest.approx(0.5 + math.pi)
    assert command.fire is True


def test_time_limit_is_not_overrun_by_float_drift() -> None:
    env = ArenaEnv(_quiet_config(max_time_s=5.0))
    env.reset(seed=0)
    steps = 0
    done = False
    while not done:
        done, _ = env.step(0.1)
        steps += 1
    assert steps == 50
    assert env.time_alive == pytest.approx(5.0)
