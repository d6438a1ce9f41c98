"""Core round state data structures for Chinchón."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, List, Sequence

from .analysis import DEFAULT_CUT_THRESHOLD
from .cards import Card

logger = logging.getLogger(__name__)

NUM_PLAYERS: Final[int] = 2
TARGET_SCORES: Final[tuple[int, ...]] = (50, 100)


class TurnPhase(str, Enum):
    """Phases of a round."""

    AWAITING_DRAW = "awaiting_draw"
    AWAITING_DISCARD = "awaiting_discard"
    ROUND_OVER = "round_over"


class InsufficientCardsError(ValueError):
    """Raised when a deck is too small to deal a round."""


class InvariantViolation(AssertionError):
    """Raised when the card bookkeeping of a round is corrupted."""


@dataclass(frozen=True, slots=True)
class ChinchonConfig:
    """Rule configuration shared by every round of a game."""

    hand_size: int = 7
    cut_threshold: int = DEFAULT_CUT_THRESHOLD
    chinchon_bonus: int = 25
    target_score: int = 50
    split_quads: bool = False

    def __post_init__(self) -> None:
        if self.hand_size <= 0:
            raise ValueError("hand_size must be positive")
        if self.cut_threshold < 0:
            raise ValueError("cut_threshold must not be negative")
        if self.target_score not in TARGET_SCORES:
            raise ValueError(f"target_score must be one of {TARGET_SCORES}")

    @property
    def cards_needed(self) -> int:
        """Cards consumed by the deal before the stock starts."""

        return NUM_PLAYERS * self.hand_size + 1


@dataclass(slots=True)
class RoundState:
    """Mutable state of a single round."""

    hands: List[List[Card]]
    stock: List[Card]
    discard_pile: List[Card]
    config: ChinchonConfig = field(default_factory=ChinchonConfig)
    current_player: int = 0
    phase: TurnPhase = TurnPhase.AWAITING_DRAW
    turn_index: int = 0
    winner_index: int | None = None
    stalemate: bool = False
    card_count: int = 0

    def __post_init__(self) -> None:
        if not self.card_count:
            self.card_count = sum(len(hand) for hand in self.hands) + len(self.stock) + len(self.discard_pile)

    @property
    def is_over(self) -> bool:
        return self.phase == TurnPhase.ROUND_OVER

    @property
    def top_discard(self) -> Card | None:
        return self.discard_pile[-1] if self.discard_pile else None

    def other_player(self, player_index: int) -> int:
        return (player_index + 1) % NUM_PLAYERS

    def all_cards(self) -> List[Card]:
        cards = [card for hand in self.hands for card in hand]
        return cards + list(self.stock) + list(self.discard_pile)

    def clone_shallow(self) -> "RoundState":
        """Return a copy whose containers can be mutated independently."""

        return RoundState(
            hands=[list(hand) for hand in self.hands],
            stock=list(self.stock),
            discard_pile=list(self.discard_pile),
            config=self.config,
            current_player=self.current_player,
            phase=self.phase,
            turn_index=self.turn_index,
            winner_index=self.winner_index,
            stalemate=self.stalemate,
            card_count=self.card_count,
        )


def check_invariants(state: RoundState) -> None:
    """Raise :class:`InvariantViolation` if a card is duplicated or lost."""

    cards = state.all_cards()
    if len(cards) != state.card_count:
        raise InvariantViolation(f"round holds {len(cards)} cards, expected {state.card_count}")
    codes = [card.code for card in cards]
    if len(set(codes)) != len(codes):
        duplicates = sorted({code for code in codes if codes.count(code) > 1})
        raise InvariantViolation(f"duplicate cards in round: {', '.join(duplicates)}")


def deal_round(deck: Sequence[Card], config: ChinchonConfig | None = None) -> RoundState:
    """Deal a fresh round from an already shuffled ``deck``.

    The first ``hand_size`` cards go to player 0, the next ``hand_size`` to
    player 1, the following card opens the discard pile and the rest form
    the stock with its front at index 0.
    """

    if config is None:
        config = ChinchonConfig()
    size = config.hand_size
    if len(deck) < config.cards_needed:
        raise InsufficientCardsError(
            f"dealing needs at least {config.cards_needed} cards, deck has {len(deck)}"
        )

    state = RoundState(
        hands=[list(deck[0:size]), list(deck[size : 2 * size])],
        stock=list(deck[2 * size + 1 :]),
        discard_pile=[deck[2 * size]],
        config=config,
    )
    check_invariants(state)
    logger.debug("dealt round: stock=%d discard=%s", len(state.stock), state.discard_pile[0].code)
    return state
