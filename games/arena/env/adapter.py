"""Observation and action transforms for the arena environment."""

from __future__ import annotations

import math
from dataclasses import dataclass

from evolab.sensors import MotorOutputs, SensorInputs


@dataclass(frozen=True, slots=True)
class HeroCommand:
    """Motor outputs after clamping, in world units."""

    angular_velocity: float
    speed: float
    aim_angle: float
    fire: bool


def _clamp(value: float, limit: float) -> float:
    return min(max(value, -limit), limit)


def obs_transform(observation: dict[str, float]) -> SensorInputs:
    return SensorInputs(
        target_angle=observation["target_angle"],
        target_distance=observation["target_distance"],
        time_survived=observation["time_alive"],
    )


def action_transform(
    outputs: MotorOutputs,
    *,
    heading: float,
    rotation_speed: float,
    speed: float,
) -> HeroCommand:
    return HeroCommand(
        angular_velocity=_clamp(outputs.turn * rotation_speed, rotation_speed),
        speed=speed * _clamp(outputs.walk, 1.0),
        aim_angle=heading + _clamp(outputs.aim, 1.0) * math.pi,
        fire=outputs.fire,
    )


__all__ = ["HeroCommand", "action_transform", "obs_transform"]
