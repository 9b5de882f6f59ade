"""Sensor and motor contracts between brains and the host world."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

INPUT_COUNT = 3
OUTPUT_COUNT = 3


@dataclass(frozen=True, slots=True)
class SensorInputs:
    """What an agent perceives on one tick.

    ``target_angle`` is in radians relative to the agent's heading,
    ``target_distance`` in world units and ``time_survived`` in seconds.
    """

    target_angle: float
    target_distance: float
    time_survived: float


@dataclass(frozen=True, slots=True)
class MotorOutputs:
    """Commands produced by a brain. The host clamps and applies them."""

    aim: float
    turn: float
    walk: float
    fire: bool = True


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians into ``[-pi, pi]``."""
    wrapped = math.fmod(angle + math.pi, math.tau)
    if wrapped < 0.0:
        wrapped += math.tau
    return wrapped - math.pi


def normalize_inputs(inputs: SensorInputs, *, arena_size: float = 1.0) -> list[float]:
    """Flatten sensor readings into the brain's input vector (bias excluded)."""
    if arena_size <= 0.0:
        msg = "arena_size must be positive."
        raise ValueError(msg)
    return [
        wrap_angle(inputs.target_angle) / math.pi,
        inputs.target_distance / arena_size,
        inputs.time_survived,
    ]


def decode_outputs(values: Sequence[float]) -> MotorOutputs:
    """Map raw output-layer activations onto named motor fields."""
    if len(values) < OUTPUT_COUNT:
        msg = f"Expected at least {OUTPUT_COUNT} outputs but received {len(values)}."
        raise ValueError(msg)
    return MotorOutputs(
        aim=float(values[0]),
        turn=float(values[1]),
        walk=float(values[2]),
        fire=True,
    )


__all__ = [
    "INPUT_COUNT",
    "MotorOutputs",
    "OUTPUT_COUNT",
    "SensorInputs",
    "decode_outputs",
    "normalize_inputs",
    "wrap_angle",
]
