from __future__ import annotations

import pytest

from chinchon import benchmark
from chinchon.ai.policy import Difficulty


def test_head_to_head_report_is_consistent() -> None:
    report = benchmark.run_head_to_head(2, "easy", Difficulty.HARD, seed=7)

    assert report.games == 2
    assert report.baseline.difficulty is Difficulty.EASY
    assert report.challenger.difficulty is Difficulty.HARD
    assert report.baseline.game_wins + report.challenger.game_wins == 2
    assert report.baseline.round_wins + report.challenger.round_wins + report.stalemates == report.rounds
    assert 0.0 <= report.challenger_win_rate <= 1.0
    assert report.baseline.mean_deadwood >= 0.0


def test_head_to_head_is_reproducible() -> None:
    first = benchmark.run_head_to_head(1, "medium", "medium", seed=11)
    second = benchmark.run_head_to_head(1, "medium", "medium", seed=11)

    assert first == second


def test_head_to_head_requires_games() -> None:
    with pytest.raises(ValueError):
        benchmark.run_head_to_head(0, "easy", "hard")
