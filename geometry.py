"""Distance and nearest-point helpers for the rescue swarm."""

import math
from typing import Iterable, Optional, Tuple


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Calculate 2D Euclidean distance between two points."""
    return math.hypot(x1 - x2, y1 - y2)


def nearest_point(x: float, y: float,
                  points: Iterable[Tuple[float, float]]) -> Optional[Tuple[float, float]]:
    """
    Find the point closest to (x, y).

    Args:
        x: Query x coordinate
        y: Query y coordinate
        points: Candidate (x, y) positions

    Returns:
        The nearest (x, y), or None if there are no candidates.
        Ties keep the first candidate.
    """
    best = None
    best_dist = math.inf
    for px, py in points:
        dist = distance(x, y, px, py)
        if dist < best_dist:
            best_dist = dist
            best = (px, py)
    return best


def heading(angle: float, speed: float) -> Tuple[float, float]:
    """Velocity vector of magnitude `speed` pointing at `angle` radians."""
    return math.cos(angle) * speed, math.sin(angle) * speed


def steer_toward(x: float, y: float, tx: float, ty: float,
                 speed: float) -> Tuple[float, float, float]:
    """
    Velocity pointing from (x, y) straight at (tx, ty).

    Returns:
        (vx, vy, dist) where dist is the current distance to the target.
        The velocity is zero when already on the target.
    """
    dx = tx - x
    dy = ty - y
    dist = math.hypot(dx, dy)
    if dist == 0:
        return 0.0, 0.0, 0.0
    return dx / dist * speed, dy / dist * speed, dist


def clamp_to_circle(x: float, y: float, cx: float, cy: float,
                    radius: float) -> Tuple[float, float]:
    """Project (x, y) back onto the circle around (cx, cy) if it lies outside."""
    dx = x - cx
    dy = y - cy
    dist = math.hypot(dx, dy)
    if dist <= radius or dist == 0:
        return x, y
    return cx + dx / dist * radius, cy + dy / dist * radius
