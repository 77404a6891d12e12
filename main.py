#!/usr/bin/env python3
"""
Rescue Swarm Simulation

Entry point for running the search-and-rescue drone swarm.
Drones explore the region, call neighbors for help when they cross a
survivor's trace, and return to charging points before running out of
autonomy.

Usage:
    python main.py                 # Run with live visualization
    python main.py --no-viz        # Run headless until all survivors are saved
    python main.py --train         # Tune trainable parameters offline
    TRAIN_BATCH=1 python main.py   # Same as --train
    python main.py --help          # Show help
"""

import argparse
import os
import sys

import config
from sim_config import load_best_policy, load_config
from simulation import Simulation


def main():
    parser = argparse.ArgumentParser(
        description='Search-and-Rescue Drone Swarm Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                        Run with visualization
  python main.py --no-viz --seed 7      Headless run with a fixed seed
  python main.py --config scenario.json Use a custom scenario
  python main.py --train --candidates 20 --runs 3
        """
    )

    parser.add_argument(
        '--config', default=config.CONFIG_PATH,
        help=f'Scenario JSON file (default: {config.CONFIG_PATH})'
    )
    parser.add_argument(
        '--policy', default=config.POLICY_PATH,
        help=f'Learned policy JSON file (default: {config.POLICY_PATH})'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed (default: random)'
    )
    parser.add_argument(
        '--no-viz', action='store_true',
        help='Run without matplotlib visualization'
    )
    parser.add_argument(
        '--max-steps', type=int, default=config.MAX_HEADLESS_STEPS,
        help=f'Tick cap for headless runs (default: {config.MAX_HEADLESS_STEPS})'
    )
    parser.add_argument(
        '--quiet', action='store_true',
        help='Do not print swarm events'
    )
    parser.add_argument(
        '--train', action='store_true',
        help='Run offline parameter training and write the policy file'
    )
    parser.add_argument(
        '--candidates', type=int, default=config.TRAIN_CANDIDATES,
        help=f'Training: parameter sets sampled (default: {config.TRAIN_CANDIDATES})'
    )
    parser.add_argument(
        '--runs', type=int, default=config.TRAIN_RUNS_PER_CANDIDATE,
        help=f'Training: runs per candidate (default: {config.TRAIN_RUNS_PER_CANDIDATE})'
    )

    args = parser.parse_args()

    sim_config = load_config(args.config)

    if args.train or os.environ.get('TRAIN_BATCH') == '1':
        from trainer import run_batch_training
        run_batch_training(
            sim_config,
            num_candidates=args.candidates,
            runs_per_candidate=args.runs,
            seed=args.seed,
            policy_path=args.policy
        )
        return

    policy = load_best_policy(args.policy)
    if policy is not None:
        sim_config = policy.apply(sim_config)
        print(f"[Config] Using learned policy: {policy.describe()}")

    print("=" * 50)
    print("RESCUE SWARM - SEARCH & RESCUE")
    print("=" * 50)
    print(f"Region: {sim_config.width:.0f} x {sim_config.height:.0f}")
    if sim_config.drone_types:
        for drone_type in sim_config.drone_types:
            print(f"Drones ({drone_type.name or 'unnamed'}): {drone_type.count}")
    else:
        print(f"Drones: {sim_config.num_drones}")
    print(f"Survivors: {sim_config.num_survivors}")
    print(f"Help radius: {sim_config.help_radius:.1f}, "
          f"max helpers: {sim_config.max_helpers_per_hit}")
    print("=" * 50)

    sim = Simulation(sim_config, seed=args.seed, verbose=not args.quiet)

    try:
        if args.no_viz:
            sim.run_until_finished(args.max_steps)
            sim.print_final_stats()
        else:
            from viewer import LiveView
            LiveView(sim).show()
            sim.print_final_stats()
    except KeyboardInterrupt:
        print("\n\nSimulation interrupted by user")
        sys.exit(0)


if __name__ == '__main__':
    main()
