from __future__ import annotations

import pytest

from chinchon import scoring
from chinchon.analysis import analyze_hand
from chinchon.cards import cards_from_codes

CLOSED = ["1-oros", "2-oros", "3-oros", "4-oros", "5-copas", "5-espadas", "5-bastos"]
LOW = ["1-oros", "2-oros", "3-oros", "7-copas", "7-espadas", "7-bastos", "2-copas"]
HIGH = ["1-copas", "5-oros", "7-oros", "10-espadas", "11-bastos", "12-copas", "3-espadas"]


def _analysis(codes: list[str]):
    return analyze_hand(cards_from_codes(codes))


def test_winner_collects_loser_deadwood() -> None:
    delta = scoring.score_round(_analysis(LOW), _analysis(HIGH), 1)

    assert delta.points == (0, 46)
    assert delta.winner_index == 1
    assert not delta.chinchon_bonus


def test_chinchon_adds_bonus() -> None:
    delta = scoring.score_round(_analysis(CLOSED), _analysis(LOW), 0)

    assert delta.points == (2 + 25, 0)
    assert delta.chinchon_bonus


def test_custom_bonus() -> None:
    delta = scoring.score_round(_analysis(CLOSED), _analysis(LOW), 0, bonus=10)

    assert delta.points == (12, 0)


def test_score_round_rejects_unknown_winner() -> None:
    with pytest.raises(ValueError):
        scoring.score_round(_analysis(LOW), _analysis(HIGH), 2)


def test_apply_delta_accumulates_and_advances_round() -> None:
    score = scoring.new_game_score(50)

    score = scoring.apply_delta(score, scoring.ScoreDelta(points=(20, 0), winner_index=0))
    score = scoring.apply_delta(score, scoring.draw_delta())

    assert score.totals == (20, 0)
    assert score.round_number == 3
    assert not scoring.is_game_over(score)
    assert scoring.game_winner(score) is None


@pytest.mark.parametrize(("target", "gained", "over"), [(50, 49, False), (50, 50, True), (100, 99, False), (100, 130, True)])
def test_game_over_at_target(target: int, gained: int, over: bool) -> None:
    score = scoring.apply_delta(
        scoring.new_game_score(target),
        scoring.ScoreDelta(points=(0, gained), winner_index=1),
    )

    assert scoring.is_game_over(score) is over
    assert scoring.game_winner(score) == (1 if over else None)


def test_new_game_score_validates_target() -> None:
    with pytest.raises(ValueError):
        scoring.new_game_score(60)


def test_match_history_totals() -> None:
    history = scoring.MatchHistory()
    history.record(
        scoring.RoundSummary(
            round_number=1,
            winner_index=0,
            delta=scoring.ScoreDelta(points=(30, 0), winner_index=0, chinchon_bonus=True),
            deadwood_points=(0, 5),
        )
    )
    history.record(
        scoring.RoundSummary(
            round_number=2,
            winner_index=None,
            delta=scoring.draw_delta(),
            deadwood_points=(12, 8),
        )
    )

    first, second = history.totals()

    assert (first.wins, first.chinchons, first.points, first.deadwood_points) == (1, 1, 30, 12)
    assert (second.wins, second.chinchons, second.points, second.deadwood_points) == (0, 0, 0, 13)


def test_match_history_rejects_wrong_player_count() -> None:
    history = scoring.MatchHistory()

    with pytest.raises(ValueError):
        history.record(
            scoring.RoundSummary(
                round_number=1,
                winner_index=0,
                delta=scoring.ScoreDelta(points=(1, 2, 3), winner_index=0),
                deadwood_points=(0, 0),
            )
        )
