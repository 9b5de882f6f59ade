"""Configuration helpers for the arena environment."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import yaml

from .env.env_core import ArenaEnvConfig


def load_arena_config(path: Path) -> ArenaEnvConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        msg = f"Expected mapping in YAML file: {path}"
        raise ValueError(msg)
    hero = data.get("hero", {})
    mobs = data.get("mobs", {})
    laser = data.get("laser", {})
    defaults = ArenaEnvConfig()
    max_time_s = data.get("max_time_s", defaults.max_time_s)
    return ArenaEnvConfig(
        width=float(data.get("width", defaults.width)),
        height=float(data.get("height", defaults.height)),
        hero_speed=float(hero.get("speed", defaults.hero_speed)),
        hero_rotation_speed=float(
            hero.get("rotation_speed", defaults.hero_rotation_speed)
        ),
        hero_radius=float(hero.get("radius", defaults.hero_radius)),
        hero_life=int(hero.get("life", defaults.hero_life)),
        mob_speed=float(mobs.get("speed", defaults.mob_speed)),
        mob_radius=float(mobs.get("radius", defaults.mob_radius)),
        mob_damage=int(mobs.get("damage", defaults.mob_damage)),
        base_spawn_rate=float(mobs.get("spawn_rate", defaults.base_spawn_rate)),
        spawn_doubling_s=float(mobs.get("doubling_s", defaults.spawn_doubling_s)),
        safe_zone=float(mobs.get("safe_zone", defaults.safe_zone)),
        laser_speed=float(laser.get("speed", defaults.laser_speed)),
        laser_radius=float(laser.get("radius", defaults.laser_radius)),
        laser_lifetime_s=float(laser.get("lifetime_s", defaults.laser_lifetime_s)),
        fire_cooldown_s=float(laser.get("cooldown_s", defaults.fire_cooldown_s)),
        max_time_s=float(max_time_s) if max_time_s is not None else None,
    )


__all__ = ["load_arena_config"]
