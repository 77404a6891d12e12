"""Core entity types for the rescue swarm world model.

This module defines the records shared by the controller and the driver:
- Drones: the searching agents and their behavioral mode
- Survivors: people to be found
- Clues: localized traces linked to a survivor that trigger reinforcement
- ChargingPoints: fixed stations that refill drone autonomy
- SimStats: aggregate statistics of a run

`to_dict` methods produce the plain-record payload handed to observers,
using the camelCase field names of the external snapshot format.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import config
from geometry import distance, heading


class DroneMode(Enum):
    """Behavioral mode of a drone."""
    SEARCHING = "searching"
    RESPONDING = "responding"
    HOVERING = "hovering"
    RETURNING = "returning"


@dataclass
class Drone:
    """
    A search drone.

    Drones are mutated in place by their own controller each tick and
    occasionally by the recruitment protocol of another drone.
    """
    id: int
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    mode: DroneMode = DroneMode.SEARCHING
    target: Optional[Tuple[float, float]] = None
    found_id: Optional[int] = None  # Last survivor this drone found
    respond_timer: float = 0.0

    speed: float = config.DRONE_SPEED
    weight: float = config.DRONE_WEIGHT
    autonomy: float = config.DRONE_AUTONOMY  # Full flight time in seconds
    remaining_autonomy: float = config.DRONE_AUTONOMY
    detection_radius: float = config.DETECTION_RADIUS

    @property
    def has_target(self) -> bool:
        return self.target is not None

    def distance_to(self, x: float, y: float) -> float:
        """Calculate distance from this drone to a point."""
        return distance(self.x, self.y, x, y)

    def set_heading(self, angle: float) -> None:
        """Fly at full speed in the direction `angle` (radians)."""
        self.vx, self.vy = heading(angle, self.speed)

    def to_dict(self) -> dict:
        """Serialize drone for observers."""
        tx, ty = self.target if self.target is not None else (0.0, 0.0)
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'vx': self.vx,
            'vy': self.vy,
            'state': self.mode.value,
            'targetX': tx,
            'targetY': ty,
            'hasTarget': self.has_target,
            'foundID': self.found_id if self.found_id is not None else -1,
            'respondTimer': self.respond_timer,
            'speed': self.speed,
            'weight': self.weight,
            'autonomy': self.autonomy,
            'remainingAutonomy': self.remaining_autonomy,
            'detectionRadius': self.detection_radius,
        }


@dataclass
class Survivor:
    """A person waiting to be found. `saved` flips to True exactly once."""
    id: int
    x: float
    y: float
    saved: bool = False
    radius: float = config.SURVIVOR_RADIUS

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'saved': self.saved,
            'radius': self.radius,
        }


@dataclass
class Clue:
    """
    A trace zone around a survivor.

    `activated` records that reinforcement was already called for this
    clue; it is internal and never sent to observers. `consumed` becomes
    True once the linked survivor is saved.
    """
    id: int
    x: float
    y: float
    radius: float
    consumed: bool = False
    survivor_id: Optional[int] = None
    activated: bool = False

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'radius': self.radius,
            'consumed': self.consumed,
            'survivorId': self.survivor_id if self.survivor_id is not None else -1,
        }


@dataclass(frozen=True)
class ChargingPoint:
    """A fixed charging station."""
    id: int
    x: float
    y: float

    def to_dict(self) -> dict:
        return {'id': self.id, 'x': self.x, 'y': self.y}


@dataclass
class SimStats:
    """Aggregate statistics of a simulation run."""
    total_time: float = 0.0
    total_survivors: int = 0
    saved_survivors: int = 0
    drones: int = 0
    traces: int = 0
    traces_consumed: int = 0
    finished: bool = False

    @property
    def saved_ratio(self) -> float:
        if self.total_survivors == 0:
            return 0.0
        return self.saved_survivors / self.total_survivors

    def to_dict(self) -> dict:
        return {
            'totalTime': self.total_time,
            'totalSurvivors': self.total_survivors,
            'savedSurvivors': self.saved_survivors,
            'drones': self.drones,
            'traces': self.traces,
            'tracesConsumed': self.traces_consumed,
            'finished': self.finished,
        }
