"""Tests for the difficulty-parameterised opponent."""

from __future__ import annotations

import random

import pytest

from chinchon.actions import CutAction, DiscardAction, DrawAction
from chinchon.ai.policy import MEMORY_FORGET, MEMORY_LIMIT, Difficulty, OpponentPolicy
from chinchon.cards import Card, build_deck, cards_from_codes
from chinchon.rules import DrawSource
from chinchon.state import RoundState, TurnPhase

RUN_AND_SET = ["1-oros", "2-oros", "3-oros", "7-copas", "7-espadas", "7-bastos"]


class FixedRandom:
    """Stand-in rng whose ``random`` always returns the same value."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value

    def randrange(self, stop: int) -> int:
        return 0


def _card(code: str) -> Card:
    return cards_from_codes([code])[0]


def _policy(difficulty: Difficulty, rng=None) -> OpponentPolicy:
    return OpponentPolicy(difficulty, rng or random.Random(0))


@pytest.mark.parametrize(
    ("difficulty", "expected"),
    [(Difficulty.EASY, False), (Difficulty.MEDIUM, False), (Difficulty.HARD, True)],
)
def test_draw_from_discard_when_improvement_is_zero(difficulty: Difficulty, expected: bool) -> None:
    hand = cards_from_codes(["1-oros", "2-oros", "3-oros", "5-copas", "7-espadas", "12-bastos", "11-copas"])

    assert _policy(difficulty).should_draw_from_discard(hand, _card("4-oros")) is expected


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_draw_from_discard_when_it_builds_a_set(difficulty: Difficulty) -> None:
    hand = cards_from_codes(["1-copas", "1-espadas", "5-copas", "7-espadas", "12-bastos", "11-copas", "6-oros"])

    assert _policy(difficulty).should_draw_from_discard(hand, _card("1-bastos"))


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_useless_discard_is_ignored(difficulty: Difficulty) -> None:
    hand = cards_from_codes(["1-copas", "1-espadas", "5-copas", "7-espadas", "12-bastos", "11-copas", "6-oros"])

    policy = _policy(difficulty)

    assert not policy.should_draw_from_discard(hand, _card("10-oros"))
    assert not policy.should_draw_from_discard(hand, None)


def test_discard_prefers_highest_deadwood() -> None:
    hand = cards_from_codes(["1-oros", "2-oros", "3-oros", "5-copas", "7-espadas", "12-bastos", "11-copas", "10-oros"])

    assert _policy(Difficulty.MEDIUM).select_discard(hand) == _card("10-oros")


def test_discard_tie_break_uses_memory() -> None:
    hand = cards_from_codes(["1-oros", "2-oros", "3-oros", "5-copas", "7-espadas", "12-bastos", "11-copas", "10-oros"])
    policy = _policy(Difficulty.MEDIUM)

    policy.remember_card(_card("12-copas"))

    assert policy.select_discard(hand) == _card("12-bastos")


def test_fully_melded_hand_gives_up_cheapest_card() -> None:
    hand = cards_from_codes([*RUN_AND_SET, "7-oros"])

    assert _policy(Difficulty.EASY).select_discard(hand) == _card("1-oros")


def test_hard_sometimes_keeps_the_highest_card() -> None:
    hand = cards_from_codes([*RUN_AND_SET, "12-bastos", "5-copas"])

    assert OpponentPolicy(Difficulty.HARD, FixedRandom(0.1)).select_discard(hand) == _card("5-copas")
    assert OpponentPolicy(Difficulty.HARD, FixedRandom(0.9)).select_discard(hand) == _card("12-bastos")


def test_discard_from_empty_hand_is_an_error() -> None:
    with pytest.raises(ValueError):
        _policy(Difficulty.EASY).select_discard([])


def test_memory_forgets_oldest_cards() -> None:
    policy = _policy(Difficulty.MEDIUM)
    deck = build_deck()

    for card in deck[: MEMORY_LIMIT + 1]:
        policy.remember_card(card)

    assert len(policy.memory) == MEMORY_LIMIT + 1 - MEMORY_FORGET
    assert deck[0].code not in policy.memory
    assert deck[MEMORY_LIMIT].code in policy.memory


@pytest.mark.parametrize(
    ("difficulty", "extra", "hint", "expected"),
    [
        (Difficulty.EASY, "3-copas", None, True),
        (Difficulty.EASY, "4-copas", None, False),
        (Difficulty.MEDIUM, "4-copas", None, True),
        (Difficulty.MEDIUM, "5-copas", None, False),
        (Difficulty.MEDIUM, "5-copas", 6, True),
        (Difficulty.MEDIUM, "5-copas", 5, False),
        (Difficulty.HARD, "6-copas", None, False),
    ],
)
def test_should_cut_thresholds(difficulty: Difficulty, extra: str, hint: int | None, expected: bool) -> None:
    hand = cards_from_codes([*RUN_AND_SET, extra])

    assert _policy(difficulty).should_cut(hand, hint) is expected


@pytest.mark.parametrize(("roll", "expected"), [(0.5, True), (0.9, False)])
def test_hard_cuts_with_probability(roll: float, expected: bool) -> None:
    hand = cards_from_codes([*RUN_AND_SET, "5-copas"])

    assert OpponentPolicy(Difficulty.HARD, FixedRandom(roll)).should_cut(hand) is expected


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_chinchon_always_cuts(difficulty: Difficulty) -> None:
    hand = cards_from_codes([*RUN_AND_SET, "4-oros"])

    assert OpponentPolicy(difficulty, FixedRandom(0.99)).should_cut(hand)


def _state(phase: TurnPhase) -> RoundState:
    hand = ["1-oros", "2-oros", "3-oros", "4-copas", "4-espadas", "4-bastos", "12-bastos"]
    if phase == TurnPhase.AWAITING_DISCARD:
        hand.append("1-copas")
    return RoundState(
        hands=[cards_from_codes(hand), cards_from_codes(["5-oros", "7-copas", "10-espadas", "11-bastos", "2-copas", "6-espadas", "3-bastos"])],
        stock=cards_from_codes(["7-oros", "6-copas"]),
        discard_pile=cards_from_codes(["12-copas"]),
        phase=phase,
    )


def test_choose_action_draws_from_stock_when_discard_does_not_help() -> None:
    action = _policy(Difficulty.MEDIUM).choose_action(_state(TurnPhase.AWAITING_DRAW), 0)

    assert action == DrawAction(DrawSource.STOCK)


def test_choose_action_takes_discard_when_stock_is_empty() -> None:
    state = _state(TurnPhase.AWAITING_DRAW)
    state.stock.clear()

    assert _policy(Difficulty.MEDIUM).choose_action(state, 0) == DrawAction(DrawSource.DISCARD)


def test_choose_action_cuts_when_low_enough() -> None:
    action = _policy(Difficulty.EASY).choose_action(_state(TurnPhase.AWAITING_DISCARD), 0)

    assert action == CutAction(_card("12-bastos"))


def test_choose_action_discards_when_cut_is_declined() -> None:
    state = _state(TurnPhase.AWAITING_DISCARD)
    state.hands[0][-1] = _card("6-copas")
    state.stock.remove(_card("6-copas"))
    state.stock.append(_card("1-copas"))

    action = _policy(Difficulty.MEDIUM).choose_action(state, 0)

    assert action == DiscardAction(_card("12-bastos"))


def test_choose_action_out_of_turn() -> None:
    with pytest.raises(ValueError):
        _policy(Difficulty.MEDIUM).choose_action(_state(TurnPhase.AWAITING_DRAW), 1)
