"""Offline tuning of the swarm's trainable parameters.

Random search: sample candidate parameter sets, evaluate each over several
independent simulations, keep the best average score and save it as the
learned policy the live mode picks up on its next start.
"""

from typing import Optional, Tuple
import random

from tqdm import tqdm

import config
from entities import SimStats
from sim_config import LearnedPolicy, SimConfig, save_best_policy
from simulation import Simulation


def score_stats(stats: SimStats) -> float:
    """
    Score a run: more survivors saved and less time is better.

    Runs with no survivors at all, or none saved, get FAILED_RUN_SCORE.
    """
    if stats.total_survivors == 0 or stats.saved_survivors == 0:
        return config.FAILED_RUN_SCORE
    survival_rate = stats.saved_survivors / stats.total_survivors
    return survival_rate * config.SAVED_SURVIVOR_REWARD - stats.total_time


def random_train_params(rng: random.Random) -> LearnedPolicy:
    """Sample a candidate parameter set from the search ranges."""
    return LearnedPolicy(
        help_radius=100 + rng.random() * 300,         # 100 to 400
        max_helpers_per_hit=1 + rng.randrange(6),     # 1 to 6
        clue_size_factor=1.0 + rng.random() * 2.0,    # 1.0 to 3.0
        exploration_rate=0.01 + rng.random() * 0.19,  # 0.01 to 0.20
        engagement_timeout=3.0 + rng.random() * 9.0,  # 3 to 12 seconds
    )


def apply_train_params(base: SimConfig, params: LearnedPolicy) -> SimConfig:
    """Copy of `base` using the candidate's parameters."""
    return params.apply(base)


def run_simulation_once(sim_config: SimConfig, max_steps: int = config.TRAIN_MAX_STEPS,
                        seed: Optional[int] = None) -> SimStats:
    """
    Run one simulation until every survivor is saved or `max_steps` ticks.

    Returns:
        Final statistics, or the partial statistics reached at the cap
    """
    sim = Simulation(sim_config, seed=seed)
    return sim.run_until_finished(max_steps)


def run_batch_training(
    base_config: SimConfig,
    num_candidates: int = config.TRAIN_CANDIDATES,
    runs_per_candidate: int = config.TRAIN_RUNS_PER_CANDIDATE,
    max_steps: int = config.TRAIN_MAX_STEPS,
    seed: Optional[int] = None,
    policy_path: Optional[str] = config.POLICY_PATH
) -> Tuple[LearnedPolicy, float, SimStats]:
    """
    Search for the best trainable parameters.

    Args:
        base_config: Scenario every candidate is evaluated on
        num_candidates: Number of parameter sets sampled
        runs_per_candidate: Simulations averaged per candidate
        max_steps: Tick cap per simulation
        seed: Seed for sampling and for the simulations
        policy_path: Where to save the best policy; None skips saving

    Returns:
        (best parameters, best average score, averaged statistics)
    """
    rng = random.Random(seed)
    runs_per_candidate = max(1, runs_per_candidate)

    best_score = float('-inf')
    best_params = LearnedPolicy()
    best_stats = SimStats()

    print("=== Batch training drones (offline) ===")
    print(f"Base scenario: survivors={base_config.num_survivors}, "
          f"traces={base_config.num_traces}, droneTypes={len(base_config.drone_types)}")

    for i in tqdm(range(num_candidates), desc="Candidates"):
        params = random_train_params(rng)
        cfg = apply_train_params(base_config, params)

        total_score = 0.0
        total_time = 0.0
        total_saved = 0
        total_survivors = 0
        for _ in range(runs_per_candidate):
            stats = run_simulation_once(cfg, max_steps, seed=rng.randrange(2 ** 32))
            total_score += score_stats(stats)
            total_time += stats.total_time
            total_saved += stats.saved_survivors
            total_survivors = stats.total_survivors

        avg_score = total_score / runs_per_candidate
        avg_stats = SimStats(
            total_time=total_time / runs_per_candidate,
            saved_survivors=round(total_saved / runs_per_candidate),
            total_survivors=total_survivors,
        )

        tqdm.write(f"[candidate {i:2d}] {params.describe()} -> score={avg_score:.2f}, "
                   f"avgTime={avg_stats.total_time:.1f}s, "
                   f"saved={avg_stats.saved_survivors}/{avg_stats.total_survivors}")

        if avg_score > best_score:
            best_score = avg_score
            best_params = params
            best_stats = avg_stats

    print("\n=== BEST CONFIG FOUND ===")
    print(best_params.describe())
    print(f"Average performance: saved={best_stats.saved_survivors}/{best_stats.total_survivors}, "
          f"avg time={best_stats.total_time:.1f}s, score={best_score:.2f}")

    if policy_path:
        try:
            save_best_policy(policy_path, best_params)
        except OSError as e:
            print(f"[Trainer] Could not write {policy_path}: {e}")
        else:
            print(f"\n[Trainer] {policy_path} written. The live mode will use it on next start.")

    return best_params, best_score, best_stats
