"""Tests for the offline parameter search."""

import random

import pytest

from entities import SimStats
from sim_config import SimConfig, load_best_policy
from trainer import (
    apply_train_params, random_train_params, run_batch_training,
    run_simulation_once, score_stats,
)


class TestScore:

    def test_nothing_saved_is_a_failed_run(self):
        fast = SimStats(total_survivors=5, saved_survivors=0, total_time=1.0)
        slow = SimStats(total_survivors=5, saved_survivors=0, total_time=900.0)

        assert score_stats(fast) == score_stats(slow) == -1e9

    def test_no_survivors_is_a_failed_run(self):
        assert score_stats(SimStats(total_survivors=0, total_time=3.0)) == -1e9

    def test_ratio_minus_time(self):
        stats = SimStats(total_survivors=5, saved_survivors=4, total_time=100.0)

        assert score_stats(stats) == pytest.approx(700.0)

    def test_faster_run_scores_higher(self):
        fast = SimStats(total_survivors=2, saved_survivors=2, total_time=50.0)
        slow = SimStats(total_survivors=2, saved_survivors=2, total_time=80.0)

        assert score_stats(fast) > score_stats(slow)


class TestParams:

    def test_sampled_ranges(self):
        rng = random.Random(0)
        for _ in range(200):
            params = random_train_params(rng)
            assert 100 <= params.help_radius <= 400
            assert 1 <= params.max_helpers_per_hit <= 6
            assert 1.0 <= params.clue_size_factor <= 3.0
            assert 0.01 <= params.exploration_rate <= 0.20
            assert 3.0 <= params.engagement_timeout <= 12.0

    def test_apply_leaves_base_untouched(self):
        base = SimConfig(num_survivors=7)
        params = random_train_params(random.Random(1))

        cfg = apply_train_params(base, params)

        assert cfg.num_survivors == 7
        assert cfg.help_radius == params.help_radius
        assert cfg.engagement_timeout == params.engagement_timeout
        assert base.help_radius == 150.0


class TestRuns:

    def test_step_cap_gives_partial_stats(self):
        stats = run_simulation_once(SimConfig(), max_steps=1, seed=3)

        assert not stats.finished
        assert stats.total_time == pytest.approx(0.1)

    def test_same_seed_same_outcome(self):
        cfg = SimConfig(width=300.0, height=300.0, num_drones=6, num_survivors=2)

        assert run_simulation_once(cfg, 400, seed=5) == run_simulation_once(cfg, 400, seed=5)

    def test_batch_training_saves_best_policy(self, tmp_path, capsys):
        path = str(tmp_path / 'best_policy.json')
        base = SimConfig(width=200.0, height=200.0, num_drones=6, num_survivors=1)

        params, score, stats = run_batch_training(
            base, num_candidates=3, runs_per_candidate=2, max_steps=300,
            seed=7, policy_path=path
        )

        assert load_best_policy(path) == params
        assert stats.total_survivors == 1
        assert score >= -1e9
        out = capsys.readouterr().out
        assert "=== BEST CONFIG FOUND ===" in out
        assert "written" in out

    def test_batch_training_without_policy_file(self, tmp_path):
        params, _, _ = run_batch_training(
            SimConfig(num_drones=2, num_survivors=1), num_candidates=1,
            runs_per_candidate=1, max_steps=5, seed=1, policy_path=None
        )

        assert 100 <= params.help_radius <= 400
        assert list(tmp_path.iterdir()) == []
