from __future__ import annotations

import pytest

from chinchon.cards import cards_from_codes
from chinchon.melds import (
    BRUTE_FORCE_CANDIDATE_LIMIT,
    DEFAULT_SOLVER,
    BacktrackingSolver,
    MeldKind,
    enumerate_melds,
    find_runs,
    find_sets,
    is_valid_meld,
    is_valid_run,
    is_valid_set,
    next_rank,
    solver_for,
)


def _codes(meld) -> list[str]:
    return [card.code for card in meld.cards]


@pytest.mark.parametrize(
    ("codes", "expected"),
    [
        (["5-oros", "5-copas", "5-espadas"], True),
        (["5-oros", "5-copas", "5-espadas", "5-bastos"], True),
        (["5-oros", "5-copas"], False),
        (["5-oros", "5-copas", "6-espadas"], False),
    ],
)
def test_is_valid_set(codes: list[str], expected: bool) -> None:
    assert is_valid_set(cards_from_codes(codes)) is expected


@pytest.mark.parametrize(
    ("codes", "expected"),
    [
        (["1-oros", "2-oros", "3-oros"], True),
        (["3-oros", "1-oros", "2-oros"], True),
        (["6-copas", "7-copas", "10-copas"], True),
        (["7-bastos", "10-bastos", "11-bastos", "12-bastos"], True),
        (["1-oros", "2-oros", "4-oros"], False),
        (["1-oros", "2-oros", "3-copas"], False),
        (["11-oros", "12-oros", "1-oros"], False),
        (["1-oros", "2-oros"], False),
    ],
)
def test_is_valid_run(codes: list[str], expected: bool) -> None:
    assert is_valid_run(cards_from_codes(codes)) is expected


def test_is_valid_meld_accepts_either_kind() -> None:
    assert is_valid_meld(cards_from_codes(["2-oros", "2-copas", "2-bastos"]))
    assert is_valid_meld(cards_from_codes(["4-espadas", "5-espadas", "6-espadas"]))
    assert not is_valid_meld(cards_from_codes(["4-espadas", "5-copas", "6-espadas"]))


@pytest.mark.parametrize(("rank", "expected"), [(1, 2), (6, 7), (7, 10), (11, 12), (12, None)])
def test_next_rank_skips_missing_ranks(rank: int, expected: int | None) -> None:
    assert next_rank(rank) == expected


def test_find_runs_emits_every_window() -> None:
    hand = cards_from_codes(["1-oros", "2-oros", "3-oros", "4-oros", "7-copas"])

    runs = find_runs(hand)

    assert [_codes(run) for run in runs] == [
        ["1-oros", "2-oros", "3-oros"],
        ["1-oros", "2-oros", "3-oros", "4-oros"],
        ["2-oros", "3-oros", "4-oros"],
    ]
    assert all(run.kind is MeldKind.RUN for run in runs)


def test_find_runs_bridges_seven_and_ten() -> None:
    hand = cards_from_codes(["6-copas", "7-copas", "10-copas", "12-copas"])

    assert [_codes(run) for run in find_runs(hand)] == [["6-copas", "7-copas", "10-copas"]]


def test_find_runs_splits_on_gaps() -> None:
    hand = cards_from_codes(["1-bastos", "2-bastos", "3-bastos", "5-bastos", "6-bastos", "7-bastos"])

    assert [_codes(run) for run in find_runs(hand)] == [
        ["1-bastos", "2-bastos", "3-bastos"],
        ["5-bastos", "6-bastos", "7-bastos"],
    ]


def test_find_sets_keeps_quads_whole_by_default() -> None:
    hand = cards_from_codes(["5-oros", "5-copas", "5-espadas", "5-bastos", "1-oros", "1-copas"])

    sets = find_sets(hand)

    assert len(sets) == 1
    assert len(sets[0]) == 4
    assert sets[0].kind is MeldKind.SET


def test_find_sets_can_split_quads() -> None:
    hand = cards_from_codes(["5-oros", "5-copas", "5-espadas", "5-bastos"])

    sets = find_sets(hand, split_quads=True)

    assert sorted(len(meld) for meld in sets) == [3, 3, 3, 3, 4]


def test_enumerate_melds_lists_sets_before_runs() -> None:
    hand = cards_from_codes(["3-oros", "3-copas", "3-espadas", "1-oros", "2-oros"])

    kinds = [meld.kind for meld in enumerate_melds(hand)]

    assert kinds == [MeldKind.SET, MeldKind.RUN]


def test_meld_points_and_mask() -> None:
    (meld,) = find_sets(cards_from_codes(["12-oros", "12-copas", "12-bastos"]))

    assert meld.points == 30
    assert bin(meld.mask).count("1") == 3


def test_find_sets_ignores_repeated_cards() -> None:
    hand = cards_from_codes(["5-oros", "5-oros", "5-copas", "12-bastos"])

    assert find_sets(hand) == []


def test_solver_for_switches_on_candidate_count() -> None:
    assert solver_for(BRUTE_FORCE_CANDIDATE_LIMIT) is DEFAULT_SOLVER
    assert isinstance(solver_for(BRUTE_FORCE_CANDIDATE_LIMIT + 1), BacktrackingSolver)
