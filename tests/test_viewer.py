"""Tests for the live view, rendered off-screen."""

from types import SimpleNamespace

import matplotlib
matplotlib.use('Agg')

import pytest

from sim_config import SimConfig
from simulation import Simulation
from viewer import LiveView


@pytest.fixture
def view():
    sim = Simulation(SimConfig(num_drones=4, num_survivors=2), seed=21)
    live = LiveView(sim, interval=0.001)
    live.setup_plot()
    yield live
    live.close()


def test_setup_draws_world(view):
    env = view.sim.snapshot()

    assert len(view.drone_markers.get_offsets()) == 4
    assert len(view.survivor_markers.get_offsets()) == 2
    assert len(view.charger_markers.get_offsets()) == 5
    assert len(view.clue_artists) == len(env.clues)
    assert view.heat_image is not None


def test_dashboard_reflects_state(view):
    text = view.dashboard_text.get_text()

    assert "RUNNING" in text
    assert "Survivors saved: 0/2" in text
    assert "Searching   4" in text

    view.sim.set_running(False)
    assert "PAUSED" in view._generate_dashboard_content(view.sim.snapshot())


def test_update_after_steps(view):
    for _ in range(5):
        view.sim.step()

    view.update_visualization(view.sim.snapshot())

    assert "TIME: 0.5s" in view.dashboard_text.get_text()
    assert len(view.clue_artists) == 2


def test_key_presses(view):
    view._on_key_press(SimpleNamespace(key=' '))
    assert not view.sim.is_running()

    view.sim.step()
    view._on_key_press(SimpleNamespace(key='r'))
    assert view.sim.snapshot().time == 0.0
    assert view.sim.is_running()


def test_background_thread(view):
    view.start_background()
    try:
        thread = view._thread
        assert thread.is_alive()
    finally:
        view.stop_background()

    assert view._thread is None
    assert not thread.is_alive()
