"""Hand analysis: the optimal split of a hand into melds and deadwood."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from . import melds
from .cards import Card, mask_from_cards

DEFAULT_CUT_THRESHOLD = 5


@dataclass(frozen=True, slots=True)
class HandAnalysis:
    """Best partition of a hand and the flags derived from it."""

    melds: tuple[melds.Meld, ...]
    deadwood: tuple[Card, ...]
    points: int
    is_chinchon: bool
    can_cut: bool
    candidates: tuple[melds.Meld, ...] = ()

    @property
    def is_closed_hand(self) -> bool:
        return self.is_chinchon

    @property
    def melded_cards(self) -> List[Card]:
        return [card for meld in self.melds for card in meld.cards]

    def arranged(self) -> List[Card]:
        """Return the hand with melded cards first, grouped by meld, then deadwood."""

        return self.melded_cards + list(self.deadwood)


def analyze_hand(
    hand: Iterable[Card],
    *,
    cut_threshold: int = DEFAULT_CUT_THRESHOLD,
    split_quads: bool = False,
    solver: melds.MeldSolver | None = None,
) -> HandAnalysis:
    """Return the meld selection minimising deadwood points for ``hand``.

    Total over finite hands: an empty hand is vacuously closed with zero
    points. Deadwood keeps the order the cards had in ``hand``.
    """

    cards = list(hand)
    candidates = melds.enumerate_melds(cards, split_quads=split_quads)
    if solver is None:
        solver = melds.solver_for(len(candidates))

    if candidates:
        cover = solver.best_cover(mask_from_cards(cards), candidates)
        selected = cover.melds
        used_mask = 0
        for meld in selected:
            used_mask |= meld.mask
    else:
        selected = ()
        used_mask = 0

    deadwood = tuple(card for card in cards if not (used_mask >> card.index) & 1)
    points = sum(card.point_value for card in deadwood)
    return HandAnalysis(
        melds=tuple(selected),
        deadwood=deadwood,
        points=points,
        is_chinchon=not deadwood,
        can_cut=points <= cut_threshold,
        candidates=tuple(candidates),
    )


def arrange_hand(hand: Iterable[Card], **options) -> List[Card]:
    """Reorder ``hand`` so melds come first, as the table shows them."""

    return analyze_hand(hand, **options).arranged()
