"""Tests for neighbor recruitment on clue activation."""

from conftest import make_env
from entities import Clue, Drone, DroneMode
from recruitment import call_neighbors_for_help, find_helpers


def swarm(positions, modes=None):
    modes = modes or [DroneMode.SEARCHING] * len(positions)
    return [Drone(id=i, x=x, y=y, mode=mode)
            for i, ((x, y), mode) in enumerate(zip(positions, modes))]


CLUE = Clue(id=0, x=120.0, y=100.0, radius=60.0)


def test_cap_keeps_first_candidates_in_index_order():
    drones = swarm([(100, 100), (200, 100), (110, 100), (150, 100), (105, 100), (130, 100)])
    env = make_env(drones=drones, clues=[CLUE], max_helpers_per_hit=2)

    helpers = call_neighbors_for_help(env, 0, 0)

    assert helpers == [1, 2]
    assert [d.mode for d in drones[1:]] == [
        DroneMode.RESPONDING, DroneMode.RESPONDING,
        DroneMode.SEARCHING, DroneMode.SEARCHING, DroneMode.SEARCHING,
    ]


def test_recruited_drones_target_clue_center():
    drones = swarm([(100, 100), (150, 100)])
    env = make_env(drones=drones, clues=[CLUE])

    call_neighbors_for_help(env, 0, 0)

    assert drones[1].mode == DroneMode.RESPONDING
    assert drones[1].target == (120.0, 100.0)


def test_only_searching_drones_are_candidates():
    drones = swarm(
        [(100, 100), (110, 100), (120, 100), (130, 100), (140, 100)],
        [DroneMode.SEARCHING, DroneMode.RESPONDING, DroneMode.RETURNING,
         DroneMode.HOVERING, DroneMode.SEARCHING],
    )
    env = make_env(drones=drones, clues=[CLUE])

    assert call_neighbors_for_help(env, 0, 0) == [4]
    assert drones[2].mode == DroneMode.RETURNING
    assert drones[3].mode == DroneMode.HOVERING


def test_source_and_far_drones_are_excluded():
    drones = swarm([(100, 100), (100, 251), (100, 250)])
    env = make_env(drones=drones, clues=[CLUE], help_radius=150.0)

    assert find_helpers(env, 0) == [2]
    assert drones[0].mode == DroneMode.SEARCHING


def test_zero_cap_recruits_nobody():
    drones = swarm([(100, 100), (110, 100), (120, 100), (130, 100)])
    env = make_env(drones=drones, clues=[CLUE], max_helpers_per_hit=0)

    assert call_neighbors_for_help(env, 0, 0) == []
    assert all(d.mode == DroneMode.SEARCHING for d in drones)


def test_nearest_first_option_sorts_before_truncating():
    drones = swarm([(100, 100), (240, 100), (120, 100), (150, 100)])
    env = make_env(drones=drones, clues=[CLUE], max_helpers_per_hit=2)

    assert find_helpers(env, 0) == [1, 2]

    env.config.recruit_nearest_first = True
    assert find_helpers(env, 0) == [2, 3]
