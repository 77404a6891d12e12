"""Per-drone behavior controller for the rescue swarm.

Each tick the driver calls `update_drone(env, index, rng)` once per drone in
index order. The controller reads the shared environment, updates the drone
at `index` and may touch world-wide state (activating clues, recruiting
neighbors, saving survivors). It keeps no state of its own between ticks.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, TYPE_CHECKING
import math
import random

import config
from entities import Drone, DroneMode
from geometry import clamp_to_circle, distance, nearest_point, steer_toward
from recruitment import call_neighbors_for_help

if TYPE_CHECKING:
    from environment import Environment


@dataclass
class TickReport:
    """What happened to one drone during a tick, for the driver to report."""
    drone_id: int
    started_return: bool = False
    recharged: bool = False
    timed_out: bool = False
    activated_clues: List[Tuple[int, List[int]]] = field(default_factory=list)  # (clue, helpers)
    found_survivor: Optional[int] = None


def _random_heading(drone: Drone, rng: random.Random) -> None:
    drone.set_heading(rng.random() * 2 * math.pi)


def _survivor_left_in_zone(env: 'Environment', cx: float, cy: float,
                           radius: float) -> bool:
    """Check if an unsaved survivor remains within `radius` of (cx, cy)."""
    for survivor in env.survivors:
        if survivor.saved:
            continue
        if distance(survivor.x, survivor.y, cx, cy) <= radius:
            return True
    return False


def _nearest_charger(env: 'Environment', x: float, y: float) -> Tuple[float, float]:
    """Nearest charging station, or the origin when there are none."""
    point = nearest_point(x, y, ((cp.x, cp.y) for cp in env.charging_points))
    return point if point is not None else (0.0, 0.0)


def pick_exploration_heading(env: 'Environment', drone: Drone,
                             rng: random.Random) -> float:
    """
    Choose the heading leading toward the least visited neighboring cell.

    Evaluates EXPLORATION_HEADINGS directions evenly spread around the
    drone. Each scores minus the heatmap count at EXPLORATION_LOOKAHEAD
    ahead plus a small random jitter. Directions whose lookahead falls
    outside the grid are skipped; if all are, a random heading is kept.

    Returns:
        Heading angle in radians
    """
    best_angle = rng.random() * 2 * math.pi
    best_score = -math.inf

    step = 2 * math.pi / config.EXPLORATION_HEADINGS
    for k in range(config.EXPLORATION_HEADINGS):
        angle = k * step
        nx = drone.x + math.cos(angle) * config.EXPLORATION_LOOKAHEAD
        ny = drone.y + math.sin(angle) * config.EXPLORATION_LOOKAHEAD

        visits = env.heatmap.value_at(nx, ny)
        if visits is None:
            continue

        score = -visits + rng.random() * config.EXPLORATION_JITTER
        if score > best_score:
            best_score = score
            best_angle = angle

    return best_angle


def _detection_radius(env: 'Environment', drone: Drone) -> float:
    if drone.detection_radius > 0:
        return drone.detection_radius
    if env.config.detection_radius > 0:
        return env.config.detection_radius
    return config.DETECTION_RADIUS


def update_drone(env: 'Environment', index: int, rng: random.Random) -> TickReport:
    """
    Run one tick of the behavior state machine for drone `index`.

    Rules are applied in a fixed precedence order: zone release, recruitment
    timeout, hovering, autonomy safety check, mode movement, integration
    with wall bounces, clue zone containment, autonomy decay, then clue and
    survivor detection (skipped while returning to a charger).

    Args:
        env: The shared environment, mutated in place
        index: Index of the drone in env.drones
        rng: Random source owned by the driver

    Returns:
        TickReport describing notable events
    """
    cfg = env.config
    drone = env.drones[index]
    report = TickReport(drone_id=drone.id)
    dt = cfg.time_step
    zone_radius = cfg.clue_zone_radius

    # Release the clue zone once nobody is left to find there
    if drone.target is not None and drone.mode != DroneMode.RETURNING:
        tx, ty = drone.target
        if not _survivor_left_in_zone(env, tx, ty, zone_radius):
            drone.target = None
            if drone.mode == DroneMode.RESPONDING:
                drone.mode = DroneMode.SEARCHING
                _random_heading(drone, rng)

    # Give up on a stale call for help
    if drone.mode == DroneMode.RESPONDING:
        drone.respond_timer += dt
        if drone.respond_timer > cfg.engagement_timeout:
            drone.mode = DroneMode.SEARCHING
            drone.target = None
            drone.respond_timer = 0.0
            _random_heading(drone, rng)
            report.timed_out = True
    else:
        drone.respond_timer = 0.0

    if drone.mode == DroneMode.HOVERING:
        drone.vx, drone.vy = 0.0, 0.0
        return report

    # Head home while a charger is still reachable
    cx, cy = _nearest_charger(env, drone.x, drone.y)
    dist_to_charger = distance(drone.x, drone.y, cx, cy)
    time_to_reach = dist_to_charger / drone.speed if drone.speed > 0 else math.inf
    if (drone.mode != DroneMode.RETURNING
            and drone.remaining_autonomy <= config.AUTONOMY_SAFETY_MARGIN * time_to_reach):
        drone.mode = DroneMode.RETURNING
        drone.target = (cx, cy)
        report.started_return = True

    if drone.mode == DroneMode.SEARCHING:
        if rng.random() < cfg.exploration_rate:
            drone.set_heading(pick_exploration_heading(env, drone, rng))

    elif drone.mode == DroneMode.RESPONDING:
        if drone.target is not None:
            vx, vy, dist = steer_toward(drone.x, drone.y, drone.target[0],
                                        drone.target[1], drone.speed)
            if dist > zone_radius * config.RESPOND_ARRIVAL_FACTOR:
                drone.vx, drone.vy = vx, vy
            else:
                # Inside the zone: switch to local search
                drone.mode = DroneMode.SEARCHING
                _random_heading(drone, rng)

    elif drone.mode == DroneMode.RETURNING:
        if drone.target is None:
            drone.target = (cx, cy)
        vx, vy, dist = steer_toward(drone.x, drone.y, drone.target[0],
                                    drone.target[1], drone.speed)
        if dist > config.CHARGER_REACHED_DISTANCE:
            drone.vx, drone.vy = vx, vy
        else:
            drone.remaining_autonomy = drone.autonomy
            drone.mode = DroneMode.SEARCHING
            drone.target = None
            _random_heading(drone, rng)
            report.recharged = True

    drone.x += drone.vx * dt
    drone.y += drone.vy * dt
    drone.x, drone.y, drone.vx, drone.vy = cfg.region.reflect(
        drone.x, drone.y, drone.vx, drone.vy
    )

    # Local search stays inside the clue zone
    if drone.target is not None and drone.mode == DroneMode.SEARCHING:
        drone.x, drone.y = clamp_to_circle(drone.x, drone.y, drone.target[0],
                                           drone.target[1], zone_radius)

    drone.remaining_autonomy = max(0.0, drone.remaining_autonomy - dt)

    if drone.mode == DroneMode.RETURNING:
        return report

    detection = _detection_radius(env, drone)

    for ci, clue in enumerate(env.clues):
        if clue.consumed:
            continue
        if drone.distance_to(clue.x, clue.y) <= detection + clue.radius:
            if not clue.activated:
                clue.activated = True
                helpers = call_neighbors_for_help(env, index, ci)
                report.activated_clues.append((clue.id, helpers))

    for survivor in env.survivors:
        if survivor.saved:
            continue
        if drone.distance_to(survivor.x, survivor.y) <= detection + survivor.radius:
            survivor.saved = True
            drone.found_id = survivor.id
            drone.target = None
            if drone.mode != DroneMode.RETURNING:
                drone.mode = DroneMode.SEARCHING
            # Velocity is left as is: the drone keeps its course
            report.found_survivor = survivor.id
            break

    return report
