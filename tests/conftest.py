"""Shared fixtures for the rescue swarm tests."""

import random

import pytest

from entities import ChargingPoint
from environment import Environment
from sim_config import SimConfig
from zone import default_charging_points


def make_env(drones=(), survivors=(), clues=(), charging_points=None, **overrides):
    """
    Build an environment by hand, without sanitizing the config.

    `charging_points` defaults to the five canonical stations; pass a list
    of (x, y) tuples to place them explicitly.
    """
    cfg = SimConfig(**overrides)
    if charging_points is None:
        points = default_charging_points(cfg.region)
    else:
        points = [ChargingPoint(id=i, x=x, y=y) for i, (x, y) in enumerate(charging_points)]
    return Environment(
        config=cfg,
        drones=list(drones),
        survivors=list(survivors),
        clues=list(clues),
        charging_points=points,
    )


@pytest.fixture
def rng():
    return random.Random(1234)
