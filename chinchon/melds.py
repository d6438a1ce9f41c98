"""Meld detection and cover solvers for Chinchón hands."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from itertools import combinations
from typing import Iterable, List, Protocol, Sequence

from . import encoding
from .cards import Card, mask_from_cards


class MeldKind(str, Enum):
    SET = "set"
    RUN = "run"


@dataclass(frozen=True, slots=True)
class Meld:
    """A candidate or selected group of cards forming a set or a run."""

    kind: MeldKind
    cards: tuple[Card, ...]
    mask: int

    @classmethod
    def of(cls, kind: MeldKind, cards: Iterable[Card]) -> "Meld":
        ordered = tuple(cards)
        return cls(kind=kind, cards=ordered, mask=mask_from_cards(ordered))

    @property
    def points(self) -> int:
        return sum(card.point_value for card in self.cards)

    def __len__(self) -> int:
        return len(self.cards)


def next_rank(rank: int) -> int | None:
    """Return the rank following ``rank`` in a run, or ``None`` after the king."""

    idx = encoding.RANK_TO_IDX[rank] + 1
    if idx >= len(encoding.RANKS):
        return None
    return encoding.RANKS[idx]


def is_valid_set(cards: Sequence[Card]) -> bool:
    """Return ``True`` for 3 or 4 distinct cards sharing a rank."""

    if len(cards) not in (3, 4):
        return False
    if len({card.code for card in cards}) != len(cards):
        return False
    return len({card.rank for card in cards}) == 1


def is_valid_run(cards: Sequence[Card]) -> bool:
    """Return ``True`` for 3+ same-suit cards with consecutive ranks."""

    if len(cards) < 3:
        return False
    if len({card.suit for card in cards}) != 1:
        return False
    positions = sorted(card.rank_idx for card in cards)
    return all(b - a == 1 for a, b in zip(positions, positions[1:]))


def is_valid_meld(cards: Sequence[Card]) -> bool:
    return is_valid_set(cards) or is_valid_run(cards)


def find_sets(hand: Iterable[Card], *, split_quads: bool = False) -> list[Meld]:
    """Return one set per rank held at least three times.

    A rank held four times yields the full four-card set. With
    ``split_quads`` it also yields each of its three-card subsets so the
    solver may leave one of the four cards free.
    """

    by_rank: dict[int, dict[str, Card]] = defaultdict(dict)
    for card in hand:
        by_rank[card.rank].setdefault(card.code, card)

    sets: list[Meld] = []
    for rank in encoding.RANKS:
        group = list(by_rank.get(rank, {}).values())
        if len(group) < 3:
            continue
        sets.append(Meld.of(MeldKind.SET, group))
        if split_quads and len(group) == 4:
            sets.extend(Meld.of(MeldKind.SET, subset) for subset in combinations(group, 3))
    return sets


def find_runs(hand: Iterable[Card]) -> list[Meld]:
    """Return every same-suit window of three or more consecutive ranks."""

    by_suit: dict[str, dict[int, Card]] = defaultdict(dict)
    for card in hand:
        by_suit[card.suit.value].setdefault(card.rank_idx, card)

    runs: list[Meld] = []
    for suit in encoding.SUITS:
        by_position = by_suit.get(suit)
        if not by_position or len(by_position) < 3:
            continue
        ordered = [by_position[pos] for pos in sorted(by_position)]
        for stretch in _gap_free_stretches(ordered):
            for start in range(len(stretch) - 2):
                for end in range(start + 3, len(stretch) + 1):
                    runs.append(Meld.of(MeldKind.RUN, stretch[start:end]))
    return runs


def _gap_free_stretches(ordered: List[Card]) -> list[list[Card]]:
    stretches: list[list[Card]] = [[ordered[0]]]
    for previous, card in zip(ordered, ordered[1:]):
        if card.rank_idx == previous.rank_idx + 1:
            stretches[-1].append(card)
        else:
            stretches.append([card])
    return [stretch for stretch in stretches if len(stretch) >= 3]


def enumerate_melds(hand: Iterable[Card], *, split_quads: bool = False) -> list[Meld]:
    """Return all candidate melds: sets first, then runs."""

    cards = list(hand)
    return find_sets(cards, split_quads=split_quads) + find_runs(cards)


@dataclass(frozen=True, slots=True)
class CoverResult:
    """Selected melds and the resulting deadwood mask."""

    melds: tuple[Meld, ...]
    deadwood_mask: int
    deadwood_points: int


class MeldSolver(Protocol):
    """Strategy selecting a disjoint subset of candidates minimising deadwood."""

    def best_cover(self, hand_mask: int, candidates: Sequence[Meld]) -> CoverResult:  # pragma: no cover - protocol only
        ...


class BruteForceSolver:
    """Try every subset of the candidate melds.

    Exponential in the number of candidates, which stays small for 7 and 8
    card hands. Subsets are visited in increasing bitmask order; ties keep
    the first subset found unless a later one empties the deadwood.
    """

    def best_cover(self, hand_mask: int, candidates: Sequence[Meld]) -> CoverResult:
        best_melds: tuple[Meld, ...] = ()
        best_deadwood = hand_mask
        best_points = encoding.points_from_mask(hand_mask)

        for subset in range(1, 1 << len(candidates)):
            used = 0
            selected: list[Meld] = []
            for bit, meld in enumerate(candidates):
                if not (subset >> bit) & 1:
                    continue
                if used & meld.mask:
                    break
                used |= meld.mask
                selected.append(meld)
            else:
                deadwood = hand_mask & ~used
                points = encoding.points_from_mask(deadwood)
                closes = deadwood == 0
                if points < best_points or (points == best_points and closes and best_deadwood != 0):
                    best_melds = tuple(selected)
                    best_deadwood = deadwood
                    best_points = points

        return CoverResult(melds=best_melds, deadwood_mask=best_deadwood, deadwood_points=best_points)


class BacktrackingSolver:
    """Depth-first search that skips overlapping candidates early.

    Reaches the same minimum as :class:`BruteForceSolver` without visiting
    subsets that already contain a conflict, which matters once hands grow
    past the standard eight cards.
    """

    def best_cover(self, hand_mask: int, candidates: Sequence[Meld]) -> CoverResult:
        best: list = [(), hand_mask, encoding.points_from_mask(hand_mask)]

        def visit(start: int, used: int, selected: tuple[Meld, ...]) -> None:
            deadwood = hand_mask & ~used
            points = encoding.points_from_mask(deadwood)
            if points < best[2] or (points == best[2] and deadwood == 0 and best[1] != 0):
                best[0], best[1], best[2] = selected, deadwood, points
            for position in range(start, len(candidates)):
                meld = candidates[position]
                if used & meld.mask:
                    continue
                visit(position + 1, used | meld.mask, selected + (meld,))

        visit(0, 0, ())
        return CoverResult(melds=best[0], deadwood_mask=best[1], deadwood_points=best[2])


BRUTE_FORCE_CANDIDATE_LIMIT = 12

DEFAULT_SOLVER: MeldSolver = BruteForceSolver()
LARGE_HAND_SOLVER: MeldSolver = BacktrackingSolver()


def solver_for(candidate_count: int) -> MeldSolver:
    """Return the subset walk for small candidate lists, backtracking beyond."""

    if candidate_count <= BRUTE_FORCE_CANDIDATE_LIMIT:
        return DEFAULT_SOLVER
    return LARGE_HAND_SOLVER
