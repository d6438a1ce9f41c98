"""Action objects and legal action generation for Chinchón."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from . import rules
from .cards import Card
from .rules import ActionKind, DrawSource, MoveError
from .state import RoundState, TurnPhase


@dataclass(frozen=True)
class DrawAction:
    """Take the stock front or the discard top."""

    source: DrawSource = DrawSource.STOCK

    kind = ActionKind.DRAW


@dataclass(frozen=True)
class DiscardAction:
    """Put a card from hand on the discard pile."""

    card: Card | None

    kind = ActionKind.DISCARD


@dataclass(frozen=True)
class CutAction:
    """Close the round, optionally laying ``card`` aside on the discard pile."""

    card: Card | None = None

    kind = ActionKind.CUT


Action = Union[DrawAction, DiscardAction, CutAction]


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Result of :func:`apply_action`; failures leave the state untouched."""

    ok: bool
    action: Action
    error: MoveError | None = None
    detail: str = ""
    card: Card | None = None


def validate_action(state: RoundState, player_index: int, action: Action) -> rules.MoveValidation:
    if isinstance(action, DrawAction):
        return rules.validate_move(state, ActionKind.DRAW, player_index, source=action.source)
    return rules.validate_move(state, action.kind, player_index, action.card)


def legal_draw_actions(state: RoundState, player_index: int) -> list[DrawAction]:
    """Return the draw actions available to ``player_index``."""

    candidates = [DrawAction(DrawSource.STOCK), DrawAction(DrawSource.DISCARD)]
    return [action for action in candidates if validate_action(state, player_index, action).ok]


def legal_discard_actions(state: RoundState, player_index: int) -> list[DiscardAction | CutAction]:
    """Return discard-phase actions: one discard per card plus legal cuts."""

    if state.phase != TurnPhase.AWAITING_DISCARD or state.current_player != player_index:
        return []
    hand = state.hands[player_index]
    result: list[DiscardAction | CutAction] = [DiscardAction(card) for card in hand]
    for card in hand:
        cut = CutAction(card)
        if validate_action(state, player_index, cut).ok:
            result.append(cut)
    return result


def legal_actions(state: RoundState, player_index: int) -> list[Action]:
    if state.phase == TurnPhase.AWAITING_DRAW:
        actions: list[Action] = list(legal_draw_actions(state, player_index))
        if validate_action(state, player_index, CutAction()).ok:
            actions.append(CutAction())
        return actions
    return list(legal_discard_actions(state, player_index))


def apply_action(state: RoundState, player_index: int, action: Action) -> MoveResult:
    """Apply ``action`` and report the outcome instead of raising."""

    try:
        if isinstance(action, DrawAction):
            card = rules.draw(state, player_index, action.source)
        elif isinstance(action, DiscardAction):
            card = rules.discard(state, player_index, action.card)
        elif isinstance(action, CutAction):
            rules.cut(state, player_index, action.card)
            card = action.card
        else:  # pragma: no cover - defensive branch
            raise TypeError(f"unknown action {action!r}")
    except rules.IllegalMove as exc:
        return MoveResult(ok=False, action=action, error=exc.error, detail=str(exc))
    return MoveResult(ok=True, action=action, card=card)
