from __future__ import annotations

import random

import pytest

from chinchon import encoding
from chinchon.cards import (
    Card,
    Suit,
    build_deck,
    card_from_code,
    card_from_index,
    cards_from_mask,
    hand_points,
    mask_from_cards,
    shuffle,
)


def test_deck_holds_forty_distinct_cards() -> None:
    deck = build_deck()

    assert len(deck) == encoding.DECK_CARD_COUNT == 40
    assert len({card.code for card in deck}) == 40
    for suit in Suit:
        ranks = sorted(card.rank for card in deck if card.suit is suit)
        assert ranks == [1, 2, 3, 4, 5, 6, 7, 10, 11, 12]


@pytest.mark.parametrize(
    ("rank", "points"),
    [(1, 1), (5, 5), (7, 7), (10, 10), (11, 10), (12, 10)],
)
def test_point_values(rank: int, points: int) -> None:
    assert Card(Suit.COPAS, rank).point_value == points


def test_deck_points_total() -> None:
    assert hand_points(build_deck()) == 4 * (1 + 2 + 3 + 4 + 5 + 6 + 7 + 30)


@pytest.mark.parametrize("rank", [0, 8, 9, 13])
def test_card_rejects_ranks_outside_spanish_deck(rank: int) -> None:
    with pytest.raises(ValueError):
        Card(Suit.OROS, rank)


def test_card_codes_round_trip() -> None:
    card = card_from_code("10-espadas")

    assert card == Card(Suit.ESPADAS, 10)
    assert card.code == "10-espadas"
    assert str(card) == "10-espadas"
    assert card_from_code(" 3-OROS ") == Card(Suit.OROS, 3)


@pytest.mark.parametrize("code", ["", "oros", "8-oros", "1-hearts", "x-copas"])
def test_card_from_code_rejects_garbage(code: str) -> None:
    with pytest.raises(ValueError):
        card_from_code(code)


def test_index_and_mask_helpers_agree() -> None:
    deck = build_deck()

    assert [card_from_index(card.index) for card in deck] == deck
    hand = [Card(Suit.BASTOS, 12), Card(Suit.OROS, 1), Card(Suit.COPAS, 7)]
    assert sorted(cards_from_mask(mask_from_cards(hand)), key=lambda c: c.index) == sorted(
        hand, key=lambda c: c.index
    )


def test_shuffle_is_a_permutation_and_leaves_input_alone() -> None:
    deck = build_deck()
    original = list(deck)

    shuffled = shuffle(deck, random.Random(1))

    assert deck == original
    assert sorted(shuffled, key=lambda c: c.index) == sorted(original, key=lambda c: c.index)
    assert shuffled != original


def test_shuffle_is_reproducible_with_seed() -> None:
    deck = build_deck()

    assert shuffle(deck, random.Random(42)) == shuffle(deck, random.Random(42))
