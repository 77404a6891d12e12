"""Shared world state of a rescue swarm run.

The Environment is the only mutable state of a simulation. The driver owns
it; drone controllers receive it by reference during a tick and observers
only ever see deep copies. This module also builds a fresh environment from
a sanitized SimConfig.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import math
import random

import config
from entities import Drone, DroneMode, Survivor, Clue, ChargingPoint, SimStats
from heatmap import Heatmap
from sim_config import SimConfig


@dataclass
class Environment:
    """Drones, survivors, clues, stations, clock, heatmap and completion status."""
    config: SimConfig
    drones: List[Drone] = field(default_factory=list)
    survivors: List[Survivor] = field(default_factory=list)
    clues: List[Clue] = field(default_factory=list)
    charging_points: List[ChargingPoint] = field(default_factory=list)
    time: float = 0.0
    finished: bool = False
    stats: SimStats = field(default_factory=SimStats)
    heatmap: Optional[Heatmap] = None

    def __post_init__(self):
        if self.heatmap is None:
            self.heatmap = Heatmap(width=self.config.width, height=self.config.height)

    def survivor_by_id(self, survivor_id: Optional[int]) -> Optional[Survivor]:
        """Look up a survivor by id; ids match creation indices."""
        if survivor_id is None or not 0 <= survivor_id < len(self.survivors):
            return None
        return self.survivors[survivor_id]

    def saved_count(self) -> int:
        return sum(1 for s in self.survivors if s.saved)

    def all_saved(self) -> bool:
        return all(s.saved for s in self.survivors)

    def consumed_count(self) -> int:
        return sum(1 for c in self.clues if c.consumed)

    def mode_counts(self) -> dict:
        """Number of drones in each mode."""
        counts = {mode: 0 for mode in DroneMode}
        for drone in self.drones:
            counts[drone.mode] += 1
        return counts

    def consume_clues(self) -> int:
        """
        Mark clues whose linked survivor has been saved as consumed.

        Returns:
            Number of clues newly consumed
        """
        newly_consumed = 0
        for clue in self.clues:
            if clue.consumed:
                continue
            survivor = self.survivor_by_id(clue.survivor_id)
            if survivor is not None and survivor.saved:
                clue.consumed = True
                newly_consumed += 1
        return newly_consumed

    def compute_stats(self, finished: bool) -> SimStats:
        """Statistics of the run as of the current tick."""
        return SimStats(
            total_time=self.time,
            total_survivors=len(self.survivors),
            saved_survivors=self.saved_count(),
            drones=len(self.drones),
            traces=len(self.clues),
            traces_consumed=self.consumed_count(),
            finished=finished,
        )

    def to_dict(self) -> dict:
        """Plain-record snapshot payload for observers."""
        return {
            'config': self.config.to_dict(),
            'drones': [d.to_dict() for d in self.drones],
            'survivors': [s.to_dict() for s in self.survivors],
            'traces': [c.to_dict() for c in self.clues],
            'chargingPoints': [cp.to_dict() for cp in self.charging_points],
            'time': self.time,
            'finished': self.finished,
            'stats': self.stats.to_dict(),
            'heatmap': self.heatmap.to_list(),
        }


def _random_drone(drone_id: int, x: float, y: float, speed: float, weight: float,
                  autonomy: float, detection_radius: float,
                  rng: random.Random) -> Drone:
    """Create a drone at (x, y) heading in a random direction."""
    drone = Drone(
        id=drone_id,
        x=x,
        y=y,
        mode=DroneMode.SEARCHING,
        speed=speed,
        weight=weight,
        autonomy=autonomy,
        remaining_autonomy=autonomy,
        detection_radius=detection_radius,
    )
    drone.set_heading(rng.random() * 2 * math.pi)
    return drone


def build_drones(cfg: SimConfig, rng: random.Random) -> List[Drone]:
    """
    Build the fleet at the base point.

    Heterogeneous fleets follow `cfg.drone_types` in order, skipping types
    with no drones; otherwise `cfg.num_drones` identical drones are built.
    """
    drones: List[Drone] = []

    if cfg.drone_types:
        for drone_type in cfg.drone_types:
            if drone_type.count <= 0:
                continue
            speed = drone_type.speed if drone_type.speed > 0 else cfg.drone_speed
            autonomy = drone_type.autonomy if drone_type.autonomy > 0 else config.TYPED_DRONE_AUTONOMY
            detection = drone_type.detection_radius
            if detection <= 0:
                detection = cfg.detection_radius if cfg.detection_radius > 0 else config.DETECTION_RADIUS

            for _ in range(drone_type.count):
                drones.append(_random_drone(
                    len(drones), cfg.base_x, cfg.base_y, speed, drone_type.weight,
                    autonomy, detection, rng
                ))
    else:
        detection = cfg.detection_radius if cfg.detection_radius > 0 else config.DETECTION_RADIUS
        for i in range(cfg.num_drones):
            drones.append(_random_drone(
                i, cfg.base_x, cfg.base_y, cfg.drone_speed, config.DRONE_WEIGHT,
                config.DRONE_AUTONOMY, detection, rng
            ))

    return drones


def build_survivors(cfg: SimConfig, rng: random.Random) -> List[Survivor]:
    """Place survivors uniformly at random over the region."""
    return [
        Survivor(
            id=i,
            x=rng.random() * cfg.width,
            y=rng.random() * cfg.height,
            radius=config.SURVIVOR_RADIUS,
        )
        for i in range(cfg.num_survivors)
    ]


def build_clues(cfg: SimConfig, survivors: List[Survivor], base_radius: float,
                rng: random.Random) -> List[Clue]:
    """
    Place one clue per survivor so the survivor lies inside the clue circle.

    With no survivors at all, `cfg.num_traces` free clues are scattered
    over the region instead.
    """
    radius = base_radius * cfg.clue_size_factor
    region = cfg.region

    if not survivors:
        return [
            Clue(id=i, x=rng.random() * cfg.width, y=rng.random() * cfg.height,
                 radius=radius)
            for i in range(cfg.num_traces)
        ]

    clues = []
    for i, survivor in enumerate(survivors):
        max_offset = max(0.0, radius - (survivor.radius + config.CLUE_PLACEMENT_MARGIN))
        rho = rng.random() * max_offset
        theta = rng.random() * 2 * math.pi

        x = survivor.x + rho * math.cos(theta)
        y = survivor.y + rho * math.sin(theta)
        x = min(max(x, 0.0), region.width)
        y = min(max(y, 0.0), region.height)

        clues.append(Clue(id=i, x=x, y=y, radius=radius, survivor_id=survivor.id))
    return clues


def build_environment(cfg: SimConfig, rng: random.Random) -> Environment:
    """Build a fresh environment from an already sanitized config."""
    drones = build_drones(cfg, rng)
    survivors = build_survivors(cfg, rng)

    base_radius = cfg.detection_radius
    if base_radius <= 0:
        base_radius = drones[0].detection_radius if drones else config.DETECTION_RADIUS
    clues = build_clues(cfg, survivors, base_radius, rng)

    return Environment(
        config=cfg,
        drones=drones,
        survivors=survivors,
        clues=clues,
        charging_points=list(cfg.charging_points),
        heatmap=Heatmap(width=cfg.width, height=cfg.height),
    )
