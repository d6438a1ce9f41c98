"""Typer entry-point wiring for the Chinchón CLI."""

from __future__ import annotations

import logging
from typing import List

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .. import benchmark
from ..ai.policy import Difficulty
from ..analysis import DEFAULT_CUT_THRESHOLD, analyze_hand
from ..cards import Card, cards_from_codes
from ..state import TARGET_SCORES
from .render import render_analysis
from .textual import run_textual_app

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
console = Console()


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _check_target(target: int) -> int:
    if target not in TARGET_SCORES:
        allowed = ", ".join(str(value) for value in TARGET_SCORES)
        raise typer.BadParameter(f"target must be one of {allowed}")
    return target


def _parse_cards(codes: List[str]) -> list[Card]:
    try:
        hand = cards_from_codes(codes)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if len({card.index for card in hand}) != len(hand):
        raise typer.BadParameter("a hand cannot hold the same card twice")
    return hand


@app.callback()
def cli(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine events to stderr."),
) -> None:
    """Chinchón hand analysis, rules engine and computer opponent."""

    _configure_logging(verbose)


@app.command()
def play(
    difficulty: Difficulty = typer.Option(Difficulty.MEDIUM, case_sensitive=False, help="Computer opponent strength."),
    target: int = typer.Option(50, help="Score that ends the game (50 or 100)."),
    seed: int | None = typer.Option(None, help="Random seed for reproducible games (omit for randomness)."),
    reveal: bool = typer.Option(False, "--reveal", help="Show the computer's hand from the start."),
) -> None:
    """Play against the computer in a Textual interface."""

    run_textual_app(difficulty=difficulty, target_score=_check_target(target), seed=seed, reveal=reveal)


@app.command()
def analyze(
    cards: List[str] = typer.Argument(..., help="Card codes such as 1-oros or 12-bastos."),
    cut_threshold: int = typer.Option(DEFAULT_CUT_THRESHOLD, min=0, help="Deadwood points allowed when cutting."),
    split_quads: bool = typer.Option(False, "--split-quads", help="Let four-of-a-kind lend one card to a run."),
) -> None:
    """Find the best arrangement of a hand."""

    hand = _parse_cards(cards)
    result = analyze_hand(hand, cut_threshold=cut_threshold, split_quads=split_quads)
    console.print(render_analysis(result))


@app.command("benchmark")
def benchmark_cli(
    games: int = typer.Option(20, min=1, help="Number of full games to play."),
    baseline: Difficulty = typer.Option(Difficulty.EASY, case_sensitive=False, help="Baseline opponent."),
    challenger: Difficulty = typer.Option(Difficulty.HARD, case_sensitive=False, help="Challenger opponent."),
    seed: int = typer.Option(123, help="Random seed for the benchmark."),
    target: int = typer.Option(50, help="Score that ends each game (50 or 100)."),
) -> None:
    """Run a baseline vs. challenger benchmark."""

    report = benchmark.run_head_to_head(
        games,
        baseline,
        challenger,
        seed=seed,
        target_score=_check_target(target),
    )

    table = Table(title="Head-to-Head Benchmark", box=box.SIMPLE_HEAVY)
    table.add_column("Agent", justify="center")
    table.add_column("Difficulty", justify="center")
    table.add_column("Games", justify="right")
    table.add_column("Rounds", justify="right")
    table.add_column("Chinchones", justify="right")
    table.add_column("Points", justify="right")
    table.add_column("Avg round", justify="right")
    table.add_column("Avg deadwood", justify="right")

    for label, entry in (("Baseline", report.baseline), ("Challenger", report.challenger)):
        table.add_row(
            label,
            entry.difficulty.value,
            str(entry.game_wins),
            str(entry.round_wins),
            str(entry.chinchons),
            str(entry.points),
            f"{entry.mean_round_points:.2f}",
            f"{entry.mean_deadwood:.2f}",
        )

    console.print(table)
    console.print(
        f"[cyan]{report.rounds} round(s) simulated, {report.stalemates} without a cut. "
        f"Challenger win rate {report.challenger_win_rate:.0%}.[/cyan]"
    )


def main() -> None:
    """Entry-point for ``python -m chinchon.cli``."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    main()
