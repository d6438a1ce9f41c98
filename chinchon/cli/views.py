"""Composable view primitives for the Chinchón CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, Set

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table

from .. import rules
from ..cards import Card
from ..state import RoundState


@dataclass(slots=True)
class StateSummaryView:
    """Renderable summarising the current round."""

    state: RoundState
    roles: Sequence[str]
    reveal_players: Set[int]
    card_formatter: Callable[[Card], str]

    def _hand_markup(self, cards: Sequence[Card], visible: bool) -> str:
        if not visible:
            return f"{len(cards)} cards"
        if not cards:
            return "—"
        return " ".join(self.card_formatter(card) for card in cards)

    def _metadata_panel(self) -> Panel:
        state = self.state
        grid = Table.grid(expand=True)
        grid.add_column(justify="left")
        grid.add_row(f"[cyan]Turn[/cyan]: {state.turn_index}")
        grid.add_row(f"[cyan]Stock[/cyan]: {len(state.stock)} card(s)")
        top = state.top_discard
        if top is not None:
            grid.add_row(f"[cyan]Discard[/cyan]: {self.card_formatter(top)} ({len(state.discard_pile)} card(s))")
        else:
            grid.add_row("[cyan]Discard[/cyan]: —")
        grid.add_row(f"[cyan]Cut at[/cyan]: {state.config.cut_threshold} points or less")
        return Panel(grid, title="Table", box=box.SQUARE, border_style="blue")

    def render(self) -> RenderableType:
        table = Table(box=box.ROUNDED, expand=True)
        table.add_column("Player", justify="left", style="bold")
        table.add_column("Role", justify="left")
        table.add_column("Hand", justify="left")
        table.add_column("Points", justify="right")
        table.add_column("Status", justify="left")

        state = self.state
        for idx, hand in enumerate(state.hands):
            role = self.roles[idx] if idx < len(self.roles) else "AI"
            visible = idx in self.reveal_players
            analysis = rules.hand_analysis(state, idx)
            points = str(analysis.points) if visible else "?"

            if state.winner_index == idx:
                status = "[bold green]Cut[/bold green]"
            elif state.is_over:
                status = "Stalemate" if state.stalemate else "—"
            elif idx == state.current_player:
                status = state.phase.value.replace("_", " ").title()
            else:
                status = "Waiting"

            name = f"P{idx}"
            if idx == state.current_player and not state.is_over:
                name = f"[bold yellow]{name}[/bold yellow]"
            table.add_row(name, role, self._hand_markup(hand, visible), points, status)

        return Group(table, self._metadata_panel())
