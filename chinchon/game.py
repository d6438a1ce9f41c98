"""Game sessions: dealing rounds, routing actions and keeping score."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from . import rules, scoring
from .actions import Action, MoveResult, apply_action
from .analysis import HandAnalysis
from .cards import RandomSource, build_deck, shuffle
from .encoding import DECK_CARD_COUNT
from .state import ChinchonConfig, InvariantViolation, RoundState, TurnPhase, deal_round

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlayerStats:
    cards_in_hand: int
    points: int
    can_cut: bool
    is_chinchon: bool
    meld_count: int


@dataclass(frozen=True, slots=True)
class GameStats:
    """Snapshot of a round for score boards and debug panels."""

    round_number: int
    turn_index: int
    current_player: int
    cards_in_stock: int
    cards_in_discard: int
    players: tuple[PlayerStats, ...]
    progress: float


def game_stats(state: RoundState, round_number: int = 1) -> GameStats:
    """Summarise ``state``; ``progress`` is the share of the deck no longer in stock."""

    players = []
    for idx in range(len(state.hands)):
        analysis = rules.hand_analysis(state, idx)
        players.append(
            PlayerStats(
                cards_in_hand=len(state.hands[idx]),
                points=analysis.points,
                can_cut=analysis.can_cut,
                is_chinchon=analysis.is_chinchon,
                meld_count=len(analysis.melds),
            )
        )
    progress = (state.card_count - len(state.stock)) / state.card_count * 100 if state.card_count else 0.0
    return GameStats(
        round_number=round_number,
        turn_index=state.turn_index,
        current_player=state.current_player,
        cards_in_stock=len(state.stock),
        cards_in_discard=len(state.discard_pile),
        players=tuple(players),
        progress=progress,
    )


class ChinchonGame:
    """A game between two seats, played round by round up to the target score."""

    def __init__(self, config: ChinchonConfig | None = None, rng: RandomSource | None = None) -> None:
        self.config = config or ChinchonConfig()
        self.rng = rng if rng is not None else random.Random()
        self.score = scoring.new_game_score(self.config.target_score)
        self.history = scoring.MatchHistory()
        self.round: RoundState | None = None
        self._round_recorded = False

    @property
    def is_over(self) -> bool:
        return scoring.is_game_over(self.score)

    @property
    def winner(self) -> int | None:
        return scoring.game_winner(self.score)

    def start_round(self) -> RoundState:
        """Shuffle a full deck and deal the next round."""

        if self.is_over:
            raise RuntimeError("game already finished")
        if self.round is not None and not self._round_recorded:
            raise RuntimeError("current round has not finished")
        deck = shuffle(build_deck(), self.rng)
        if len(deck) != DECK_CARD_COUNT:
            raise InvariantViolation(f"round must start with {DECK_CARD_COUNT} cards, got {len(deck)}")
        self.round = deal_round(deck, self.config)
        self._round_recorded = False
        logger.info("round %d dealt", self.score.round_number)
        return self.round

    def _require_round(self) -> RoundState:
        if self.round is None:
            raise RuntimeError("no round in progress; call start_round first")
        return self.round

    def prepare_turn(self) -> bool:
        """Make sure the player to act can draw; return ``False`` if the round ended."""

        state = self._require_round()
        if state.is_over:
            return False
        if state.phase == TurnPhase.AWAITING_DRAW and not state.stock:
            rules.replenish_stock(state, self.rng)
            if not rules.can_draw(state):
                rules.mark_stalemate(state)
                self.finish_round()
                return False
        return True

    def apply(self, player_index: int, action: Action) -> MoveResult:
        """Apply ``action`` for ``player_index`` and settle the round if it ended."""

        state = self._require_round()
        result = apply_action(state, player_index, action)
        if not result.ok:
            logger.debug("rejected %s by player %d: %s", type(action).__name__, player_index, result.error)
            return result
        if state.is_over:
            self.finish_round()
        else:
            self.prepare_turn()
        return result

    def analyses(self) -> tuple[HandAnalysis, ...]:
        state = self._require_round()
        return tuple(rules.hand_analysis(state, idx) for idx in range(len(state.hands)))

    def finish_round(self) -> scoring.RoundSummary:
        """Score the finished round and add it to the game totals."""

        state = self._require_round()
        if not state.is_over:
            raise RuntimeError("round is still in progress")
        if self._round_recorded:
            return self.history.rounds[-1]

        analyses = self.analyses()
        winner = state.winner_index
        if winner is None:
            delta = scoring.draw_delta()
        else:
            loser = state.other_player(winner)
            delta = scoring.score_round(
                analyses[winner],
                analyses[loser],
                winner,
                bonus=self.config.chinchon_bonus,
            )
        summary = scoring.RoundSummary(
            round_number=self.score.round_number,
            winner_index=winner,
            delta=delta,
            deadwood_points=tuple(analysis.points for analysis in analyses),
        )
        self.score = scoring.apply_delta(self.score, delta)
        self.history.record(summary)
        self._round_recorded = True
        logger.info("round %d scored %s, totals %s", summary.round_number, delta.points, self.score.totals)
        return summary
