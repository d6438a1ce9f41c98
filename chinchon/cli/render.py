"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from typing import Iterable, Sequence

from rich import box
from rich.console import RenderableType
from rich.panel import Panel
from rich.table import Table

from ..actions import Action, CutAction, DiscardAction, DrawAction
from ..analysis import HandAnalysis
from ..cards import Card, Suit
from ..rules import DrawSource
from ..scoring import GameScore, MatchHistory
from ..state import RoundState
from .views import StateSummaryView

_SUIT_STYLES = {
    Suit.OROS: ("O", "yellow"),
    Suit.COPAS: ("C", "red"),
    Suit.ESPADAS: ("E", "cyan"),
    Suit.BASTOS: ("B", "green"),
}


def format_card(card: Card, *, highlight: bool = False) -> str:
    """Return a Rich-rendered label for ``card``."""

    letter, color = _SUIT_STYLES[card.suit]
    style = f"bold {color} underline" if highlight else color
    return f"[{style}]{card.rank}{letter}[/{style}]"


def format_cards(cards: Iterable[Card], highlighted: Iterable[Card] = ()) -> str:
    marked = set(highlighted)
    return " ".join(format_card(card, highlight=card in marked) for card in cards)


def describe_action(action: Action, state: RoundState | None = None) -> str:
    if isinstance(action, DrawAction):
        if action.source is DrawSource.STOCK:
            return "Draw from stock"
        top = state.top_discard if state is not None else None
        return f"Take {format_card(top)} from discard" if top is not None else "Take discard"
    if isinstance(action, CutAction):
        if action.card is None:
            return "Cut"
        return f"Cut, laying aside {format_card(action.card)}"
    if isinstance(action, DiscardAction) and action.card is not None:
        return f"Discard {format_card(action.card)}"
    return "Discard"


def render_analysis(analysis: HandAnalysis, *, title: str = "Hand Analysis") -> RenderableType:
    """Return a panel listing the selected melds and the deadwood."""

    table = Table(box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Group", justify="left", style="bold")
    table.add_column("Cards", justify="left")
    table.add_column("Points", justify="right")

    for idx, meld in enumerate(analysis.melds, start=1):
        table.add_row(f"{meld.kind.value.title()} {idx}", format_cards(meld.cards), "0")
    deadwood = format_cards(analysis.deadwood) if analysis.deadwood else "—"
    table.add_row("Deadwood", deadwood, str(analysis.points))

    flags = []
    if analysis.is_chinchon:
        flags.append("[bold magenta]Chinchón![/bold magenta]")
    flags.append("[green]can cut[/green]" if analysis.can_cut else "[dim]cannot cut[/dim]")
    return Panel(table, title=title, subtitle=" • ".join(flags), border_style="cyan")


def render_state(
    state: RoundState,
    roles: Sequence[str],
    *,
    reveal_players: Iterable[int] | None = None,
    title: str = "Chinchón",
) -> RenderableType:
    """Return a Rich panel describing the current round."""

    view = StateSummaryView(
        state=state,
        roles=roles,
        reveal_players=set(reveal_players or set()),
        card_formatter=format_card,
    )
    return Panel(view.render(), title=title, padding=(0, 1), border_style="cyan")


def render_scores(score: GameScore, history: MatchHistory, labels: Sequence[str]) -> Table:
    """Return the running score table."""

    table = Table(title=f"Target {score.target_score}", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Player", justify="left")
    table.add_column("Total", justify="right")
    table.add_column("Rounds won", justify="right")
    table.add_column("Chinchones", justify="right")
    for entry in history.totals():
        idx = entry.player_index
        label = labels[idx] if idx < len(labels) else f"P{idx}"
        total = str(score.totals[idx])
        if score.totals[idx] >= score.target_score:
            label = f"[bold blue]{label}[/bold blue]"
            total = f"[bold blue]{total}[/bold blue]"
        table.add_row(label, total, str(entry.wins), str(entry.chinchons))
    return table
