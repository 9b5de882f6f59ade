"""Geometry convenience functions for the arena host."""

from __future__ import annotations

import math
from collections.abc import Sequence

Point = tuple[float, float]


def heading_vector(heading: float) -> Point:
    """Unit vector for ``heading``; heading 0 faces +y, positive turns left."""
    return (-math.sin(heading), math.cos(heading))


def angle_from(position: Point, heading: float, target: Point) -> float:
    """Signed angle in ``[-pi, pi]`` between the facing direction and ``target``."""
    dx = target[0] - position[0]
    dy = target[1] - position[1]
    if dx == 0.0 and dy == 0.0:
        return 0.0
    # Rotate into the body frame, where forward is (0, 1).
    cos_h = math.cos(-heading)
    sin_h = math.sin(-heading)
    local_x = dx * cos_h - dy * sin_h
    local_y = dx * sin_h + dy * cos_h
    return math.atan2(-local_x, local_y)


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def get_nearest(position: Point, others: Sequence[Point]) -> Point | None:
    if not others:
        return None
    return min(others, key=lambda other: distance(position, other))


__all__ = ["Point", "angle_from", "distance", "get_nearest", "heading_vector"]
