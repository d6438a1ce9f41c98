"""Difficulty-parameterised opponent policy."""

from __future__ import annotations

import logging
import random
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, Sequence

from .. import rules
from ..actions import Action, CutAction, DiscardAction, DrawAction
from ..analysis import HandAnalysis, analyze_hand
from ..cards import Card
from ..rules import DrawSource
from ..state import ChinchonConfig, RoundState, TurnPhase

logger = logging.getLogger(__name__)

MEMORY_LIMIT: Final[int] = 20
MEMORY_FORGET: Final[int] = 5


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True, slots=True)
class DifficultyProfile:
    """Thresholds and randomness attached to a difficulty level."""

    draw_improvement: int
    cut_points: int
    cut_probability: float = 1.0
    beat_opponent_hint: bool = False
    discard_deviation: float = 0.0


PROFILES: Final[dict[Difficulty, DifficultyProfile]] = {
    Difficulty.EASY: DifficultyProfile(draw_improvement=1, cut_points=3),
    Difficulty.MEDIUM: DifficultyProfile(draw_improvement=2, cut_points=4, beat_opponent_hint=True),
    Difficulty.HARD: DifficultyProfile(
        draw_improvement=0,
        cut_points=5,
        cut_probability=0.8,
        discard_deviation=0.3,
    ),
}


class OpponentPolicy:
    """Draw, discard and cut decisions built on hand analysis."""

    def __init__(
        self,
        difficulty: Difficulty | str = Difficulty.MEDIUM,
        rng: random.Random | None = None,
        config: ChinchonConfig | None = None,
    ) -> None:
        self.difficulty = Difficulty(difficulty)
        self.profile = PROFILES[self.difficulty]
        self.rng = rng if rng is not None else random.Random()
        self.config = config or ChinchonConfig()
        self.memory: OrderedDict[str, Card] = OrderedDict()

    def analyze(self, hand: Iterable[Card]) -> HandAnalysis:
        return analyze_hand(
            hand,
            cut_threshold=self.config.cut_threshold,
            split_quads=self.config.split_quads,
        )

    def remember_card(self, card: Card) -> None:
        """Note a card the other player threw away."""

        self.memory[card.code] = card
        self.memory.move_to_end(card.code)
        self.forget_old_cards()

    def forget_old_cards(self) -> None:
        if len(self.memory) > MEMORY_LIMIT:
            for code in list(self.memory)[:MEMORY_FORGET]:
                del self.memory[code]

    def should_draw_from_discard(self, hand: Sequence[Card], top_discard: Card | None) -> bool:
        """Take the discard when it lowers deadwood by the profile's threshold."""

        if top_discard is None:
            return False
        current = self.analyze(hand)
        with_top = self.analyze([*hand, top_discard])
        improvement = current.points - with_top.points
        return improvement >= self.profile.draw_improvement

    def select_discard(self, hand: Sequence[Card]) -> Card:
        """Pick the card to throw away.

        Highest-point deadwood goes first; among equal points a rank the
        opponent already discarded is preferred. A fully melded hand gives up
        its cheapest card.
        """

        if not hand:
            raise ValueError("cannot discard from an empty hand")
        analysis = self.analyze(hand)
        if not analysis.deadwood:
            return min(hand, key=lambda card: (card.point_value, card.index))

        seen_ranks = {card.rank for card in self.memory.values()}
        ranked = sorted(
            analysis.deadwood,
            key=lambda card: (-card.point_value, card.rank not in seen_ranks, card.index),
        )
        if self.profile.discard_deviation and self.rng.random() < self.profile.discard_deviation:
            return ranked[min(1, len(ranked) - 1)]
        return ranked[0]

    def should_cut(self, hand: Sequence[Card], opponent_points_hint: int | None = None) -> bool:
        analysis = self.analyze(hand)
        if analysis.is_chinchon:
            return True
        if not analysis.can_cut:
            return False
        profile = self.profile
        if analysis.points <= profile.cut_points:
            if profile.cut_probability >= 1.0 or self.rng.random() < profile.cut_probability:
                return True
        if profile.beat_opponent_hint and opponent_points_hint is not None:
            return analysis.points < opponent_points_hint
        return False

    def choose_action(
        self,
        state: RoundState,
        player_index: int,
        *,
        opponent_points_hint: int | None = None,
    ) -> Action:
        """Return the action to play for ``player_index`` in ``state``."""

        if state.is_over or state.current_player != player_index:
            raise ValueError("policy asked to act out of turn")
        hand = state.hands[player_index]

        if state.phase == TurnPhase.AWAITING_DRAW:
            top = state.top_discard
            if not state.stock or self.should_draw_from_discard(hand, top):
                action = DrawAction(DrawSource.DISCARD)
            else:
                action = DrawAction(DrawSource.STOCK)
            logger.debug("%s policy draws from %s", self.difficulty.value, action.source.value)
            return action

        card = self.select_discard(hand)
        remaining = [other for other in hand if other != card]
        cut_allowed = rules.validate_move(state, rules.ActionKind.CUT, player_index, card).ok
        if cut_allowed and self.should_cut(remaining, opponent_points_hint):
            logger.debug("%s policy cuts, laying aside %s", self.difficulty.value, card.code)
            return CutAction(card)
        return DiscardAction(card)
