"""Turn rules, move validation and state transitions for Chinchón."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .analysis import HandAnalysis, analyze_hand
from .cards import Card, RandomSource, shuffle
from .state import RoundState, TurnPhase, check_invariants

logger = logging.getLogger(__name__)

__all__ = [
    "ActionKind",
    "DrawSource",
    "MoveError",
    "MoveValidation",
    "IllegalMove",
    "IllegalDraw",
    "IllegalDiscard",
    "IllegalCut",
    "hand_analysis",
    "validate_move",
    "draw",
    "discard",
    "cut",
    "replenish_stock",
    "mark_stalemate",
    "can_draw",
]


class ActionKind(str, Enum):
    DRAW = "draw"
    DISCARD = "discard"
    CUT = "cut"


class DrawSource(str, Enum):
    STOCK = "stock"
    DISCARD = "discard"


class MoveError(str, Enum):
    """Reasons a move is rejected."""

    NOT_YOUR_TURN = "not_your_turn"
    WRONG_PHASE = "wrong_phase"
    MISSING_CARD = "missing_card"
    CANNOT_CUT = "cannot_cut"
    EMPTY_SOURCE = "empty_source"
    CARD_NOT_IN_HAND = "card_not_in_hand"
    ROUND_OVER = "round_over"


@dataclass(frozen=True, slots=True)
class MoveValidation:
    """Outcome of :func:`validate_move`."""

    ok: bool
    error: MoveError | None = None
    detail: str = ""

    @classmethod
    def accept(cls) -> "MoveValidation":
        return cls(ok=True)

    @classmethod
    def reject(cls, error: MoveError, detail: str = "") -> "MoveValidation":
        return cls(ok=False, error=error, detail=detail)


class IllegalMove(RuntimeError):
    """Raised by the transition functions when a move breaks the rules."""

    def __init__(self, error: MoveError, detail: str = "") -> None:
        super().__init__(detail or error.value)
        self.error = error


class IllegalDraw(IllegalMove):
    """Raised when a player attempts to draw illegally."""


class IllegalDiscard(IllegalMove):
    """Raised when a player attempts to discard illegally."""


class IllegalCut(IllegalMove):
    """Raised when a player attempts to cut illegally."""


def _without(hand: Iterable[Card], card: Card | None) -> list[Card]:
    cards = list(hand)
    if card is not None and card in cards:
        cards.remove(card)
    return cards


def hand_analysis(state: RoundState, player_index: int, *, without: Card | None = None) -> HandAnalysis:
    """Analyse a player's hand under the round configuration."""

    config = state.config
    return analyze_hand(
        _without(state.hands[player_index], without),
        cut_threshold=config.cut_threshold,
        split_quads=config.split_quads,
    )


def validate_move(
    state: RoundState,
    action: ActionKind,
    player_index: int,
    card: Card | None = None,
    *,
    source: DrawSource | None = None,
) -> MoveValidation:
    """Check ``action`` by ``player_index`` against turn, phase and hand."""

    action = ActionKind(action)
    if state.is_over:
        return MoveValidation.reject(MoveError.ROUND_OVER, "round already finished")
    if state.current_player != player_index:
        return MoveValidation.reject(MoveError.NOT_YOUR_TURN, f"it is player {state.current_player}'s turn")

    hand = state.hands[player_index]
    if action is ActionKind.DRAW:
        if state.phase != TurnPhase.AWAITING_DRAW:
            return MoveValidation.reject(MoveError.WRONG_PHASE, "cannot draw while a discard is pending")
        if source is not None:
            pile = state.stock if DrawSource(source) is DrawSource.STOCK else state.discard_pile
            if not pile:
                return MoveValidation.reject(MoveError.EMPTY_SOURCE, f"the {DrawSource(source).value} pile is empty")
        return MoveValidation.accept()

    if action is ActionKind.DISCARD:
        if state.phase != TurnPhase.AWAITING_DISCARD:
            return MoveValidation.reject(MoveError.WRONG_PHASE, "draw a card before discarding")
        if card is None:
            return MoveValidation.reject(MoveError.MISSING_CARD, "name the card to discard")
        if card not in hand:
            return MoveValidation.reject(MoveError.CARD_NOT_IN_HAND, f"{card.code} is not in hand")
        return MoveValidation.accept()

    if card is not None:
        if state.phase != TurnPhase.AWAITING_DISCARD:
            return MoveValidation.reject(MoveError.WRONG_PHASE, "a card can only be laid aside after drawing")
        if card not in hand:
            return MoveValidation.reject(MoveError.CARD_NOT_IN_HAND, f"{card.code} is not in hand")
    analysis = hand_analysis(state, player_index, without=card)
    if not analysis.can_cut:
        return MoveValidation.reject(MoveError.CANNOT_CUT, f"cannot cut with {analysis.points} points")
    return MoveValidation.accept()


def _raise_for(validation: MoveValidation, exc_type: type[IllegalMove]) -> None:
    if not validation.ok:
        assert validation.error is not None
        raise exc_type(validation.error, validation.detail)


def draw(state: RoundState, player_index: int, source: DrawSource = DrawSource.STOCK) -> Card:
    """Move the stock front or the discard top into the player's hand."""

    source = DrawSource(source)
    _raise_for(validate_move(state, ActionKind.DRAW, player_index, source=source), IllegalDraw)

    if source is DrawSource.STOCK:
        card = state.stock.pop(0)
    else:
        card = state.discard_pile.pop()
    state.hands[player_index].append(card)
    state.phase = TurnPhase.AWAITING_DISCARD
    logger.debug("player %d drew %s from %s", player_index, card.code, source.value)
    return card


def discard(state: RoundState, player_index: int, card: Card | None) -> Card:
    """Move ``card`` from the player's hand onto the discard pile."""

    _raise_for(validate_move(state, ActionKind.DISCARD, player_index, card), IllegalDiscard)
    assert card is not None

    state.hands[player_index].remove(card)
    state.discard_pile.append(card)
    state.phase = TurnPhase.AWAITING_DRAW
    state.current_player = state.other_player(player_index)
    state.turn_index += 1
    logger.debug("player %d discarded %s", player_index, card.code)
    return card


def cut(state: RoundState, player_index: int, card: Card | None = None) -> HandAnalysis:
    """End the round for ``player_index``, optionally laying ``card`` aside first."""

    _raise_for(validate_move(state, ActionKind.CUT, player_index, card), IllegalCut)

    if card is not None:
        state.hands[player_index].remove(card)
        state.discard_pile.append(card)
    analysis = hand_analysis(state, player_index)
    state.phase = TurnPhase.ROUND_OVER
    state.winner_index = player_index
    check_invariants(state)
    logger.info(
        "player %d cut with %d points%s",
        player_index,
        analysis.points,
        " (chinchón)" if analysis.is_chinchon else "",
    )
    return analysis


def replenish_stock(state: RoundState, rng: RandomSource | None = None) -> bool:
    """Refill an empty stock from the discard pile, keeping its top card.

    Returns ``True`` when the stock was refilled.
    """

    if state.stock or len(state.discard_pile) <= 1:
        return False
    top_card = state.discard_pile.pop()
    state.stock = shuffle(state.discard_pile, rng)
    state.discard_pile = [top_card]
    logger.debug("stock replenished with %d cards", len(state.stock))
    return True


def mark_stalemate(state: RoundState) -> None:
    """Close a round in which no card can be drawn."""

    state.phase = TurnPhase.ROUND_OVER
    state.winner_index = None
    state.stalemate = True
    logger.info("round ended in stalemate after %d turns", state.turn_index)


def can_draw(state: RoundState) -> bool:
    return bool(state.stock or state.discard_pile)
