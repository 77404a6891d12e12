"""Simulation driver for the rescue swarm.

The Simulation owns the environment and advances it one tick at a time.
All access goes through a single read/write lock: stepping, resetting and
changing the running flag are exclusive, snapshots are shared. Observers
only ever receive deep copies taken between ticks.
"""

from typing import Dict, List, Optional
import copy
import random
import threading

import config
from drone import TickReport, update_drone
from entities import SimStats
from environment import Environment, build_environment
from sim_config import SimConfig, default_config
from sync import ReadWriteLock


class Simulation:
    """
    Drives a search-and-rescue swarm.

    The driver can be stepped directly (offline evaluation, tests) or by
    `run()`, a timer-paced loop that steps while the running flag is set.
    """

    def __init__(
        self,
        sim_config: Optional[SimConfig] = None,
        seed: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize the simulation.

        Args:
            sim_config: Scenario to build (defaults to the stock scenario)
            seed: Seed of the random source; None draws one from the OS
            verbose: If True, print swarm events as they happen
        """
        self.verbose = verbose
        self.rng = random.Random(seed)
        self.lock = ReadWriteLock()

        self.base_config: SimConfig = sim_config or default_config()
        self.env: Optional[Environment] = None
        self.running = False

        self.reset(self.base_config)

    def reset(self, sim_config: Optional[SimConfig] = None) -> None:
        """
        Rebuild the whole world from a configuration.

        Fields that are missing or non-positive are replaced by defaults.
        Any previous state is discarded and the simulation is set running.

        Args:
            sim_config: New scenario; None rebuilds the current one
        """
        if sim_config is not None:
            self.base_config = sim_config
        cfg = self.base_config.sanitized()

        with self.lock.write_locked():
            env = build_environment(cfg, self.rng)
            self.env = env
            self.running = True

        if self.verbose:
            print(f"[Simulation] Reset: {len(env.drones)} drones, "
                  f"{len(env.survivors)} survivors, {len(env.clues)} traces, "
                  f"{len(env.charging_points)} charging points, "
                  f"region {cfg.width:.0f}x{cfg.height:.0f}")

    def step(self) -> Dict:
        """
        Advance the simulation by one tick.

        Every drone acts in index order, then the clock advances, the
        heatmap records each drone's cell, consumed clues are marked and
        completion is checked. A finished simulation is left untouched.

        Returns:
            Status dict with the tick's reports and completion state
        """
        with self.lock.write_locked():
            env = self.env
            if env.finished:
                return {'time': env.time, 'reports': [], 'finished': True}

            reports: List[TickReport] = []
            for index in range(len(env.drones)):
                reports.append(update_drone(env, index, self.rng))

            env.time += env.config.time_step
            for drone in env.drones:
                env.heatmap.record_visit(drone.x, drone.y)

            env.consume_clues()

            if env.all_saved():
                env.stats = env.compute_stats(finished=True)
                env.finished = True
                self.running = False

            status = {
                'time': env.time,
                'reports': reports,
                'finished': env.finished,
            }

        if self.verbose:
            self._print_reports(status)
        return status

    def _print_reports(self, status: Dict) -> None:
        """Print notable events of a tick."""
        t = status['time']
        for report in status['reports']:
            for clue_id, helpers in report.activated_clues:
                print(f"[Recruit] Drone {report.drone_id} crossed trace {clue_id} "
                      f"at {t:.1f}s, helpers: {helpers}")
            if report.found_survivor is not None:
                print(f"[Rescue] Drone {report.drone_id} found survivor "
                      f"{report.found_survivor} at {t:.1f}s")
            if report.started_return:
                print(f"[Charge] Drone {report.drone_id} returning to charge")
            if report.recharged:
                print(f"[Charge] Drone {report.drone_id} recharged")
            if report.timed_out:
                print(f"[Recruit] Drone {report.drone_id} gave up responding")
        if status['finished']:
            print(f"[Simulation] All survivors saved at {t:.1f}s")

    def snapshot(self) -> Environment:
        """
        Deep copy of the environment, safe to read without the lock.

        The copy belongs to the caller and shares nothing with the live
        world: changing it never affects the simulation. Use
        `snapshot().to_dict()` for a plain-record payload.
        """
        with self.lock.read_locked():
            return copy.deepcopy(self.env)

    def current_stats(self) -> SimStats:
        """Statistics as of the last tick, final or not."""
        with self.lock.read_locked():
            if self.env.finished:
                return copy.deepcopy(self.env.stats)
            return self.env.compute_stats(finished=False)

    def is_finished(self) -> bool:
        with self.lock.read_locked():
            return self.env.finished

    def is_running(self) -> bool:
        with self.lock.read_locked():
            return self.running

    def set_running(self, running: bool) -> None:
        """Enable or disable continuous stepping by `run()`."""
        with self.lock.write_locked():
            self.running = running

    def toggle_running(self) -> bool:
        """
        Flip the running flag.

        Has no effect once the simulation is finished.

        Returns:
            The running flag after the call
        """
        with self.lock.write_locked():
            if self.env.finished:
                return self.running
            self.running = not self.running
            return self.running

    def run(self, stop_event: threading.Event,
            interval: float = config.RUN_INTERVAL) -> None:
        """
        Step at a fixed wall-clock cadence until `stop_event` is set.

        Meant to run in a background thread while observers take
        snapshots. Ticks are skipped while the running flag is off; a tick
        in progress always completes.
        """
        while not stop_event.wait(interval):
            if self.is_running():
                self.step()

    def run_until_finished(self, max_steps: int = config.MAX_HEADLESS_STEPS) -> SimStats:
        """
        Step in a tight loop until every survivor is saved or `max_steps` ticks.

        Returns:
            Final statistics, or the statistics reached when the cap hit
        """
        for _ in range(max_steps):
            if self.step()['finished']:
                break
        return self.current_stats()

    def print_final_stats(self) -> None:
        """Print final simulation statistics."""
        stats = self.current_stats()

        print("\n" + "=" * 50)
        print("SIMULATION COMPLETE" if stats.finished else "SIMULATION STOPPED")
        print("=" * 50)
        print(f"Total time: {stats.total_time:.1f} seconds")
        print(f"Survivors saved: {stats.saved_survivors}/{stats.total_survivors}")
        print(f"Traces consumed: {stats.traces_consumed}/{stats.traces}")
        print(f"Drones: {stats.drones}")
        print("=" * 50)


if __name__ == '__main__':
    sim = Simulation(seed=1, verbose=True)
    sim.run_until_finished()
    sim.print_final_stats()
