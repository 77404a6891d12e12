"""Neighbor recruitment triggered when a drone first crosses a clue."""

from typing import List, TYPE_CHECKING

from entities import DroneMode

if TYPE_CHECKING:
    from environment import Environment


def find_helpers(env: 'Environment', drone_index: int) -> List[int]:
    """
    Select the drones that will answer a call for help.

    Candidates are the other drones currently Searching within the help
    radius of the caller, in index order. At most `max_helpers_per_hit` of
    them are kept: the first ones found, or the nearest ones when
    `recruit_nearest_first` is set.

    Args:
        env: The shared environment
        drone_index: Index of the drone calling for help

    Returns:
        Indices of the selected drones
    """
    cfg = env.config
    source = env.drones[drone_index]

    candidates = []
    for i, drone in enumerate(env.drones):
        if i == drone_index or drone.mode != DroneMode.SEARCHING:
            continue
        dist = source.distance_to(drone.x, drone.y)
        if dist <= cfg.help_radius:
            candidates.append((i, dist))

    if cfg.recruit_nearest_first:
        candidates.sort(key=lambda c: c[1])

    limit = max(0, cfg.max_helpers_per_hit)
    return [i for i, _ in candidates[:limit]]


def call_neighbors_for_help(env: 'Environment', drone_index: int,
                            clue_index: int) -> List[int]:
    """
    Send nearby idle drones to a clue.

    Each recruited drone switches to Responding with the clue center as
    its target. Its engagement timer is handled by its own controller.

    Returns:
        Indices of the recruited drones
    """
    clue = env.clues[clue_index]
    helpers = find_helpers(env, drone_index)
    for i in helpers:
        drone = env.drones[i]
        drone.mode = DroneMode.RESPONDING
        drone.target = (clue.x, clue.y)
    return helpers
