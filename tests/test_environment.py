"""Tests for the environment record and its snapshot payload."""

import math

import pytest

import config
from conftest import make_env
from entities import Clue, Drone, DroneMode, Survivor
from geometry import heading


def test_consume_clues_follows_saved_survivors():
    survivors = [Survivor(id=0, x=1.0, y=1.0, saved=True), Survivor(id=1, x=2.0, y=2.0)]
    clues = [
        Clue(id=0, x=1.0, y=1.0, radius=60.0, survivor_id=0),
        Clue(id=1, x=2.0, y=2.0, radius=60.0, survivor_id=1),
        Clue(id=2, x=3.0, y=3.0, radius=60.0),
    ]
    env = make_env(survivors=survivors, clues=clues)

    assert env.consume_clues() == 1
    assert [c.consumed for c in clues] == [True, False, False]
    assert env.consume_clues() == 0


def test_compute_stats():
    env = make_env(
        drones=[Drone(id=0, x=0.0, y=0.0)],
        survivors=[Survivor(id=0, x=1.0, y=1.0, saved=True), Survivor(id=1, x=2.0, y=2.0)],
        clues=[Clue(id=0, x=1.0, y=1.0, radius=60.0, survivor_id=0, consumed=True)],
    )
    env.time = 12.5

    stats = env.compute_stats(finished=False)

    assert stats.total_time == 12.5
    assert (stats.saved_survivors, stats.total_survivors) == (1, 2)
    assert (stats.traces_consumed, stats.traces) == (1, 1)
    assert stats.drones == 1
    assert stats.saved_ratio == 0.5
    assert not env.all_saved()


def test_mode_counts():
    env = make_env(drones=[
        Drone(id=0, x=0.0, y=0.0),
        Drone(id=1, x=0.0, y=0.0, mode=DroneMode.RETURNING),
        Drone(id=2, x=0.0, y=0.0, mode=DroneMode.RETURNING),
    ])

    counts = env.mode_counts()

    assert counts[DroneMode.SEARCHING] == 1
    assert counts[DroneMode.RETURNING] == 2
    assert counts[DroneMode.HOVERING] == 0


def test_to_dict_hides_activation_flag():
    env = make_env(
        drones=[Drone(id=0, x=5.0, y=6.0, mode=DroneMode.RESPONDING, target=(7.0, 8.0))],
        survivors=[Survivor(id=0, x=1.0, y=1.0)],
        clues=[Clue(id=0, x=1.0, y=1.0, radius=60.0, activated=True)],
    )

    data = env.to_dict()

    assert 'activated' not in data['traces'][0]
    assert data['traces'][0]['survivorId'] == -1
    drone = data['drones'][0]
    assert drone['state'] == 'responding'
    assert (drone['targetX'], drone['targetY'], drone['hasTarget']) == (7.0, 8.0, True)
    assert drone['foundID'] == -1
    assert len(data['chargingPoints']) == 5
    assert len(data['heatmap']) == 50
    assert data['stats']['finished'] is False
    assert data['config']['rayonAide'] == 150.0


def test_entity_defaults_follow_config():
    drone = Drone(id=0, x=0.0, y=0.0)
    survivor = Survivor(id=0, x=0.0, y=0.0)

    assert drone.speed == config.DRONE_SPEED
    assert drone.weight == config.DRONE_WEIGHT
    assert drone.autonomy == drone.remaining_autonomy == config.DRONE_AUTONOMY
    assert drone.detection_radius == config.DETECTION_RADIUS
    assert survivor.radius == config.SURVIVOR_RADIUS


def test_set_heading_uses_full_speed():
    drone = Drone(id=0, x=0.0, y=0.0, speed=20.0)

    drone.set_heading(math.pi)

    assert (drone.vx, drone.vy) == heading(math.pi, 20.0)
    assert drone.vx == pytest.approx(-20.0)
