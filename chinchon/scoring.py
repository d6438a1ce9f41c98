"""Round scoring and game score tracking for Chinchón."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Sequence

from .analysis import HandAnalysis
from .state import NUM_PLAYERS, TARGET_SCORES

logger = logging.getLogger(__name__)

DEFAULT_CHINCHON_BONUS = 25

__all__ = [
    "ScoreDelta",
    "GameScore",
    "RoundSummary",
    "PlayerMatchTotal",
    "MatchHistory",
    "score_round",
    "draw_delta",
    "apply_delta",
    "is_game_over",
    "game_winner",
    "new_game_score",
]


@dataclass(frozen=True, slots=True)
class ScoreDelta:
    """Points earned by each player in one round."""

    points: tuple[int, ...]
    winner_index: int | None
    chinchon_bonus: bool = False


@dataclass(frozen=True, slots=True)
class GameScore:
    """Running totals of a game."""

    totals: tuple[int, ...]
    round_number: int
    target_score: int

    def total_for(self, player_index: int) -> int:
        return self.totals[player_index]


def new_game_score(target_score: int = 50) -> GameScore:
    if target_score not in TARGET_SCORES:
        raise ValueError(f"target_score must be one of {TARGET_SCORES}")
    return GameScore(totals=(0,) * NUM_PLAYERS, round_number=1, target_score=target_score)


def score_round(
    winner_analysis: HandAnalysis,
    loser_analysis: HandAnalysis,
    winner_index: int,
    *,
    bonus: int = DEFAULT_CHINCHON_BONUS,
) -> ScoreDelta:
    """Credit the loser's deadwood points to the winner.

    A winner holding a closed hand also receives ``bonus``.
    """

    if not 0 <= winner_index < NUM_PLAYERS:
        raise ValueError("winner index out of range")
    gained = loser_analysis.points
    chinchon = winner_analysis.is_chinchon
    if chinchon:
        gained += bonus
    points = [0] * NUM_PLAYERS
    points[winner_index] = gained
    return ScoreDelta(points=tuple(points), winner_index=winner_index, chinchon_bonus=chinchon)


def draw_delta() -> ScoreDelta:
    """Delta for a round that ended without a cut."""

    return ScoreDelta(points=(0,) * NUM_PLAYERS, winner_index=None)


def apply_delta(score: GameScore, delta: ScoreDelta) -> GameScore:
    """Return ``score`` with ``delta`` added and the round counter advanced."""

    if len(delta.points) != len(score.totals):
        raise ValueError("delta does not match the number of players")
    totals = tuple(total + gained for total, gained in zip(score.totals, delta.points))
    return replace(score, totals=totals, round_number=score.round_number + 1)


def is_game_over(score: GameScore) -> bool:
    return any(total >= score.target_score for total in score.totals)


def game_winner(score: GameScore) -> int | None:
    """Return the player whose total reached the target, if any."""

    if not is_game_over(score):
        return None
    return max(range(len(score.totals)), key=score.totals.__getitem__)


@dataclass(frozen=True, slots=True)
class RoundSummary:
    """What happened in a single round."""

    round_number: int
    winner_index: int | None
    delta: ScoreDelta
    deadwood_points: Sequence[int]


@dataclass(frozen=True, slots=True)
class PlayerMatchTotal:
    """Aggregate totals accumulated across all recorded rounds."""

    player_index: int
    wins: int
    chinchons: int
    points: int
    deadwood_points: int


@dataclass(slots=True)
class MatchHistory:
    """Mutable tracker that accumulates round summaries for a game."""

    num_players: int = NUM_PLAYERS
    rounds: list[RoundSummary] = field(default_factory=list)
    _wins: list[int] = field(init=False, repr=False)
    _chinchons: list[int] = field(init=False, repr=False)
    _points: list[int] = field(init=False, repr=False)
    _deadwood: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.num_players <= 0:
            raise ValueError("num_players must be positive")
        self._wins = [0] * self.num_players
        self._chinchons = [0] * self.num_players
        self._points = [0] * self.num_players
        self._deadwood = [0] * self.num_players

    def record(self, summary: RoundSummary) -> None:
        """Record ``summary`` and update cumulative totals."""

        if len(summary.delta.points) != self.num_players or len(summary.deadwood_points) != self.num_players:
            raise ValueError("score count does not match number of players")
        self.rounds.append(summary)
        for idx in range(self.num_players):
            self._points[idx] += summary.delta.points[idx]
            self._deadwood[idx] += summary.deadwood_points[idx]
        winner = summary.winner_index
        if winner is not None:
            if winner < 0 or winner >= self.num_players:
                raise ValueError("player index out of range")
            self._wins[winner] += 1
            if summary.delta.chinchon_bonus:
                self._chinchons[winner] += 1
        logger.debug("recorded round %d: %s", summary.round_number, summary.delta.points)

    def totals(self) -> list[PlayerMatchTotal]:
        """Return the cumulative totals for each player in seating order."""

        return [
            PlayerMatchTotal(
                player_index=idx,
                wins=self._wins[idx],
                chinchons=self._chinchons[idx],
                points=self._points[idx],
                deadwood_points=self._deadwood[idx],
            )
            for idx in range(self.num_players)
        ]
