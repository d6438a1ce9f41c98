"""Benchmark harness pitting two opponent difficulties against each other."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from . import rules
from .actions import DiscardAction, CutAction
from .ai.policy import Difficulty, OpponentPolicy
from .game import ChinchonGame
from .state import ChinchonConfig

logger = logging.getLogger(__name__)

__all__ = ["AgentBreakdown", "HeadToHeadReport", "play_round", "play_game", "run_head_to_head"]

MAX_TURNS_PER_ROUND = 400
MAX_ROUNDS_PER_GAME = 200


@dataclass(frozen=True, slots=True)
class AgentBreakdown:
    """Aggregate statistics collected for one agent across a benchmark."""

    difficulty: Difficulty
    game_wins: int
    round_wins: int
    chinchons: int
    points: int
    mean_round_points: float
    mean_deadwood: float


@dataclass(frozen=True, slots=True)
class HeadToHeadReport:
    """Summary of a head-to-head benchmark between two agents."""

    games: int
    rounds: int
    stalemates: int
    baseline: AgentBreakdown
    challenger: AgentBreakdown

    @property
    def challenger_win_rate(self) -> float:
        return self.challenger.game_wins / self.games if self.games else 0.0


def play_round(
    game: ChinchonGame,
    policies: Sequence[OpponentPolicy],
    *,
    max_turns: int = MAX_TURNS_PER_ROUND,
) -> None:
    """Deal and play one round to completion with ``policies`` in seat order."""

    state = game.start_round()
    for _ in range(max_turns):
        if state.is_over or not game.prepare_turn():
            break
        actor = state.current_player
        action = policies[actor].choose_action(state, actor)
        result = game.apply(actor, action)
        if not result.ok:
            raise RuntimeError(f"policy produced an illegal move: {result.detail}")
        if isinstance(action, (DiscardAction, CutAction)) and action.card is not None:
            policies[state.other_player(actor)].remember_card(action.card)
    else:
        if not state.is_over:
            logger.warning("round exceeded %d turns; closing it without a winner", max_turns)
            rules.mark_stalemate(state)
            game.finish_round()


def play_game(
    policies: Sequence[OpponentPolicy],
    config: ChinchonConfig | None = None,
    rng: random.Random | None = None,
    *,
    max_rounds: int = MAX_ROUNDS_PER_GAME,
) -> ChinchonGame:
    """Play a whole game between ``policies`` and return the finished session."""

    game = ChinchonGame(config, rng)
    for _ in range(max_rounds):
        if game.is_over:
            break
        play_round(game, policies)
    return game


def run_head_to_head(
    games: int,
    baseline: Difficulty | str,
    challenger: Difficulty | str,
    *,
    seed: int = 123,
    target_score: int = 50,
) -> HeadToHeadReport:
    """Play ``games`` full games, swapping seats every game."""

    if games <= 0:
        raise ValueError("games must be positive")

    rng = random.Random(seed)
    config = ChinchonConfig(target_score=target_score)
    labels = ("baseline", "challenger")
    difficulties = {"baseline": Difficulty(baseline), "challenger": Difficulty(challenger)}
    game_wins = {label: 0 for label in labels}
    round_wins = {label: 0 for label in labels}
    chinchons = {label: 0 for label in labels}
    round_points: dict[str, list[int]] = {label: [] for label in labels}
    deadwood: dict[str, list[int]] = {label: [] for label in labels}
    rounds = 0
    stalemates = 0

    for game_number in range(games):
        seats = labels if game_number % 2 == 0 else labels[::-1]
        policies = [OpponentPolicy(difficulties[label], rng, config) for label in seats]
        game = play_game(policies, config, rng)

        winner = game.winner
        if winner is not None:
            game_wins[seats[winner]] += 1
        for summary in game.history.rounds:
            rounds += 1
            if summary.winner_index is None:
                stalemates += 1
            else:
                round_wins[seats[summary.winner_index]] += 1
                if summary.delta.chinchon_bonus:
                    chinchons[seats[summary.winner_index]] += 1
            for seat, label in enumerate(seats):
                round_points[label].append(summary.delta.points[seat])
                deadwood[label].append(summary.deadwood_points[seat])
        logger.debug("game %d finished with totals %s", game_number + 1, game.score.totals)

    def breakdown(label: str) -> AgentBreakdown:
        points = np.asarray(round_points[label], dtype=np.int64)
        leftovers = np.asarray(deadwood[label], dtype=np.int64)
        return AgentBreakdown(
            difficulty=difficulties[label],
            game_wins=game_wins[label],
            round_wins=round_wins[label],
            chinchons=chinchons[label],
            points=int(points.sum()),
            mean_round_points=float(points.mean()) if points.size else 0.0,
            mean_deadwood=float(leftovers.mean()) if leftovers.size else 0.0,
        )

    return HeadToHeadReport(
        games=games,
        rounds=rounds,
        stalemates=stalemates,
        baseline=breakdown("baseline"),
        challenger=breakdown("challenger"),
    )
