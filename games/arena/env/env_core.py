"""Headless survival arena used to score brains."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Any

from evolab.sensors import MotorOutputs, SensorInputs

from ..geometry import Point, angle_from, distance, get_nearest, heading_vector
from .adapter import HeroCommand, action_transform, obs_transform

HERO_ID = 0
# Absorbs float drift when summing ticks against the round time limit.
TIME_EPSILON = 1e-9


@dataclass(slots=True)
class ArenaEnvConfig:
    """World and rule parameters for the arena."""

    width: float = 800.0
    height: float = 600.0
    hero_speed: float = 120.0
    hero_rotation_speed: float = 3.0
    hero_radius: float = 16.0
    hero_life: int = 3
    mob_speed: float = 60.0
    mob_radius: float = 12.0
    mob_damage: int = 1
    base_spawn_rate: float = 0.5
    spawn_doubling_s: float = 30.0
    safe_zone: float = 0.25
    laser_speed: float = 400.0
    laser_radius: float = 4.0
    laser_lifetime_s: float = 2.0
    fire_cooldown_s: float = 0.5
    max_time_s: float | None = 120.0

    def __post_init__(self) -> None:
        for label, value in (
            ("width", self.width),
            ("height", self.height),
            ("spawn_doubling_s", self.spawn_doubling_s),
        ):
            if value <= 0.0:
                msg = f"{label} must be positive."
                raise ValueError(msg)
        if self.hero_life <= 0:
            msg = "hero_life must be positive."
            raise ValueError(msg)
        if not 0.0 <= self.safe_zone < 0.5:
            msg = "safe_zone must be in [0, 0.5)."
            raise ValueError(msg)
        if self.max_time_s is not None and self.max_time_s <= 0.0:
            msg = "max_time_s must be positive when provided."
            raise ValueError(msg)


@dataclass(slots=True)
class Mob:
    x: float
    y: float


@dataclass(slots=True)
class Laser:
    x: float
    y: float
    vx: float
    vy: float
    ttl: float


@dataclass(slots=True)
class Hero:
    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0
    life: int = 1
    time_alive: float = 0.0
    cooldown: float = 0.0
    command: HeroCommand = field(
        default_factory=lambda: HeroCommand(0.0, 0.0, 0.0, False)
    )

    @property
    def position(self) -> Point:
        return (self.x, self.y)


class ArenaEnv:
    """One AI hero against mobs whose spawn rate doubles every half minute.

    The hero scores by staying alive; lasers kill mobs and every mob that
    reaches the hero costs it life.
    """

    def __init__(self, config: ArenaEnvConfig | None = None) -> None:
        self.config = config or ArenaEnvConfig()
        self._rng = Random()
        self.hero = Hero(life=self.config.hero_life)
        self.mobs: list[Mob] = []
        self.lasers: list[Laser] = []
        self.virility = 0.0
        self.kills = 0
        self.elapsed = 0.0

    @property
    def arena_size(self) -> float:
        return max(self.config.width, self.config.height)

    @property
    def hero_alive(self) -> bool:
        return self.hero.life > 0

    @property
    def time_alive(self) -> float:
        return self.hero.time_alive

    def reset(self, seed: int | None = None) -> dict[str, float]:
        if seed is not None:
            self._rng.seed(seed)
        self.hero = Hero(life=self.config.hero_life)
        self.mobs.clear()
        self.lasers.clear()
        self.virility = 0.0
        self.kills = 0
        self.elapsed = 0.0
        return self.observe()

    def observe(self) -> dict[str, float]:
        hero = self.hero
        nearest = get_nearest(hero.position, [(mob.x, mob.y) for mob in self.mobs])
        target = nearest if nearest is not None else (0.0, 0.0)
        return {
            "target_angle": angle_from(hero.position, hero.heading, target),
            "target_distance": distance(hero.position, target),
            "time_alive": hero.time_alive,
            "life": float(hero.life),
            "mobs": float(len(self.mobs)),
        }

    def sense(self, agent_id: int) -> SensorInputs:
        self._check_agent(agent_id)
        return obs_transform(self.observe())

    def actuate(self, agent_id: int, outputs: MotorOutputs) -> None:
        self._check_agent(agent_id)
        self.hero.command = action_transform(
            outputs,
            heading=self.hero.heading,
            rotation_speed=self.config.hero_rotation_speed,
            speed=self.config.hero_speed,
        )

    def step(self, dt: float) -> tuple[bool, dict[str, Any]]:
        """Advance the world by ``dt`` seconds. Returns ``(done, info)``."""
        if dt <= 0.0:
            msg = "dt must be positive."
            raise ValueError(msg)
        if self.hero_alive:
            self.elapsed += dt
            self.hero.time_alive += dt
            self.virility += dt
            self._move_hero(dt)
            self._fire(dt)
            self._move_lasers(dt)
            self._spawn_mobs(dt)
            self._move_mobs(dt)
            self._resolve_contacts()
        done = not self.hero_alive or (
            self.config.max_time_s is not None
            and self.elapsed >= self.config.max_time_s - TIME_EPSILON
        )
        info = {
            "time_alive": self.hero.time_alive,
            "kills": self.kills,
            "life": self.hero.life,
            "mobs": len(self.mobs),
        }
        return done, info

    def close(self) -> None:
        """No-op for symmetry with environments holding resources."""

    def _check_agent(self, agent_id: int) -> None:
        if agent_id != HERO_ID:
            msg = f"Unknown agent id {agent_id}"
            raise KeyError(msg)

    def _move_hero(self, dt: float) -> None:
        hero = self.hero
        command = hero.command
        hero.heading += command.angular_velocity * dt
        forward_x, forward_y = heading_vector(hero.heading)
        hero.x += forward_x * command.speed * dt
        hero.y += forward_y * command.speed * dt
        # Stop at arena edges.
        half_width = self.config.width / 2.0
        half_height = self.config.height / 2.0
        hero.x = min(max(hero.x, -half_width), half_width)
        hero.y = min(max(hero.y, -half_height), half_height)

    def _fire(self, dt: float) -> None:
        hero = self.hero
        hero.cooldown = max(hero.cooldown - dt, 0.0)
        if not hero.command.fire or hero.cooldown > 0.0:
            return
        aim_x, aim_y = heading_vector(hero.command.aim_angle)
        self.lasers.append(
            Laser(
                x=hero.x,
                y=hero.y,
                vx=aim_x * self.config.laser_speed,
                vy=aim_y * self.config.laser_speed,
                ttl=self.config.laser_lifetime_s,
            )
        )
        hero.cooldown = self.config.fire_cooldown_s

    def _move_lasers(self, dt: float) -> None:
        for laser in self.lasers:
            laser.x += laser.vx * dt
            laser.y += laser.vy * dt
            laser.ttl -= dt
        self.lasers = [laser for laser in self.lasers if laser.ttl > 0.0]

    def _spawn_mobs(self, dt: float) -> None:
        # Mobs per second, doubling every ``spawn_doubling_s``.
        rate = self.config.base_spawn_rate * 2.0 ** (
            self.virility / self.config.spawn_doubling_s
        )
        expected = rate * dt
        count = int(expected)
        if self._rng.random() < expected - count:
            count += 1
        for _ in range(count):
            x = self._rng.uniform(-0.5, 0.5)
            y = self._rng.uniform(-0.5, 0.5)
            if abs(x) > self.config.safe_zone or abs(y) > self.config.safe_zone:
                self.mobs.append(Mob(x=x * self.config.width, y=y * self.config.height))

    def _move_mobs(self, dt: float) -> None:
        hero = self.hero
        step = self.config.mob_speed * dt
        for mob in self.mobs:
            gap = distance((mob.x, mob.y), hero.position)
            if gap <= step or gap == 0.0:
                mob.x, mob.y = hero.x, hero.y
                continue
            mob.x += (hero.x - mob.x) / gap * step
            mob.y += (hero.y - mob.y) / gap * step

    def _resolve_contacts(self) -> None:
        hit_reach = self.config.mob_radius + self.config.laser_radius
        survivors: list[Mob] = []
        for mob in self.mobs:
            hit = next(
                (
                    laser
                    for laser in self.lasers
                    if distance((laser.x, laser.y), (mob.x, mob.y)) <= hit_reach
                ),
                None,
            )
            if hit is not None:
                self.lasers.remove(hit)
                self.kills += 1
                continue
            survivors.append(mob)

        contact_reach = self.config.mob_radius + self.config.hero_radius
        remaining: list[Mob] = []
        for mob in survivors:
            if distance((mob.x, mob.y), self.hero.position) <= contact_reach:
                self.hero.life -= self.config.mob_damage
                continue
            remaining.append(mob)
        self.mobs = remaining
        self.hero.life = max(self.hero.life, 0)


__all__ = ["ArenaEnv", "ArenaEnvConfig", "HERO_ID", "Hero", "Laser", "Mob"]
