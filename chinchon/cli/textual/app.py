"""Textual-powered interactive Chinchón interface."""

from __future__ import annotations

import random
from contextlib import suppress
from typing import Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from textual import events, on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Footer, Header, OptionList, Static
from textual.widgets.option_list import Option

from ... import actions
from ...ai.policy import Difficulty, OpponentPolicy
from ...game import ChinchonGame
from ...state import ChinchonConfig, RoundState
from ..render import describe_action, format_card, render_analysis, render_scores, render_state

MAX_EVENT_LINES = 18
HUMAN = 0
COMPUTER = 1
LABELS = ("You", "AI")


class EventLog(Static):
    """Simple rolling log rendered inside a panel."""

    lines: reactive[tuple[str, ...]] = reactive((), init=False)

    def on_mount(self) -> None:  # pragma: no cover - widget lifecycle glue
        self._refresh()

    def add(self, message: str) -> None:
        self.lines = tuple([*self.lines, message][-MAX_EVENT_LINES:])

    def watch_lines(self, value: tuple[str, ...]) -> None:
        self._refresh(value)

    def _refresh(self, lines: tuple[str, ...] | None = None) -> None:
        content = Table.grid(padding=(0, 1), expand=True)
        content.add_column(justify="left")
        rows = lines if lines is not None else self.lines
        if rows:
            for line in rows:
                content.add_row(Text.from_markup(line))
        else:
            content.add_row(Text.from_markup("[dim]Event log will appear here[/dim]"))
        self.update(Panel(content, title="Events", border_style="magenta"))


class StatusStrip(Static):
    """Single line status helper."""

    message: reactive[str] = reactive("", init=False)

    def watch_message(self, value: str) -> None:
        self.update(Panel(Text.from_markup(value or "[dim]Ready[/dim]"), border_style="green"))


class ActionPalette(OptionList):
    """Interactive list used for draw / discard / cut selection."""

    class Choice(Message):
        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    def __init__(self, entries: Sequence[str]) -> None:
        options = [Option(f"[bold]{idx + 1}[/bold] {entry}", id=str(idx)) for idx, entry in enumerate(entries)]
        super().__init__(*options)
        if options:
            self.index = 0

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:  # pragma: no cover - Textual glue
        event.stop()
        if event.option.id is not None:
            self.post_message(self.Choice(int(event.option.id)))

    def on_key(self, event: events.Key) -> None:  # pragma: no cover - driven by UI interaction
        if event.key.isdigit() and event.key != "0":
            index = int(event.key) - 1
            if 0 <= index < self.option_count:
                self.index = index
                self.post_message(self.Choice(index))
                event.stop()


class ChinchonTextualApp(App):
    """One human seat against the computer."""

    CSS = """
    #main {
        layout: horizontal;
        height: 1fr;
    }

    #left, #right {
        layout: vertical;
        width: 1fr;
        padding: 0 1;
        overflow-y: auto;
    }

    ActionPalette {
        border: heavy $accent;
        height: auto;
        max-height: 14;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("h", "toggle_reveal", "Reveal AI hand"),
        Binding("n", "next_round", "Next round"),
    ]

    def __init__(
        self,
        *,
        difficulty: Difficulty,
        target_score: int,
        seed: int | None,
        reveal: bool = False,
    ) -> None:
        super().__init__()
        if seed is None:
            seed = random.SystemRandom().randrange(0, 2**63)
        self.seed = seed
        self.rng = random.Random(seed)
        config = ChinchonConfig(target_score=target_score)
        self.game = ChinchonGame(config, self.rng)
        self.policy = OpponentPolicy(difficulty, self.rng, config)
        self.reveal_enabled = reveal
        self.awaiting_next_round = False
        self._pending: list[actions.Action] = []
        self._palette: ActionPalette | None = None

        self.status_strip = StatusStrip(id="status")
        self.table_panel = Static(id="table")
        self.hand_panel = Static(id="hand")
        self.actions_container = Vertical(id="actions")
        self.event_log = EventLog(id="events")
        self.score_panel = Static(id="scores")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield self.status_strip
        left = Vertical(self.table_panel, self.hand_panel, self.actions_container, id="left")
        right = Vertical(self.event_log, self.score_panel, id="right")
        yield Horizontal(left, right, id="main")
        yield Footer()

    async def on_mount(self) -> None:
        await self._start_round()

    @property
    def round(self) -> RoundState:
        assert self.game.round is not None
        return self.game.round

    async def action_toggle_reveal(self) -> None:
        self.reveal_enabled = not self.reveal_enabled
        self._refresh_ui()

    async def action_next_round(self) -> None:
        if not self.awaiting_next_round or self.game.is_over:
            return
        self.awaiting_next_round = False
        await self._start_round()

    async def _start_round(self) -> None:
        self.game.start_round()
        self.event_log.add(
            f"[bold cyan]Round {self.game.score.round_number}[/bold cyan] dealt, "
            f"discard shows {format_card(self.round.discard_pile[-1])}"
        )
        self._refresh_ui()
        await self._process_turn()

    async def _process_turn(self) -> None:
        state = self.round
        if state.is_over:
            await self._handle_round_end()
            return
        if state.current_player == HUMAN:
            self.status_strip.message = "[yellow]Your move[/yellow]"
            await self._prompt_human()
            return

        self.status_strip.message = "[cyan]AI is thinking…[/cyan]"
        action = self.policy.choose_action(state, COMPUTER)
        description = describe_action(action, state)
        result = self.game.apply(COMPUTER, action)
        if not result.ok:  # pragma: no cover - policy only proposes legal moves
            raise RuntimeError(result.detail)
        self.event_log.add(f"AI: {description}")
        self._refresh_ui()
        await self._process_turn()

    async def _prompt_human(self) -> None:
        state = self.round
        self._pending = actions.legal_actions(state, HUMAN)
        entries = [describe_action(action, state) for action in self._pending]
        await self._dismiss_palette()
        self._palette = ActionPalette(entries)
        await self.actions_container.mount(self._palette)
        self._palette.focus()

    async def _dismiss_palette(self) -> None:
        if self._palette is None:
            return
        with suppress(Exception):  # pragma: no cover - defensive cleanup
            await self._palette.remove()
        self._palette = None

    @on(ActionPalette.Choice)
    def _on_palette_choice(self, message: ActionPalette.Choice) -> None:
        message.stop()
        if 0 <= message.index < len(self._pending):
            self.run_worker(self._handle_choice(message.index), group="input", exclusive=True)

    async def _handle_choice(self, index: int) -> None:
        action = self._pending[index]
        self._pending = []
        await self._dismiss_palette()
        state = self.round
        description = describe_action(action, state)
        result = self.game.apply(HUMAN, action)
        if not result.ok:
            self.event_log.add(f"[red]{result.detail}[/red]")
        else:
            self.event_log.add(f"You: {description}")
            if isinstance(action, (actions.DiscardAction, actions.CutAction)) and action.card is not None:
                self.policy.remember_card(action.card)
        self._refresh_ui()
        await self._process_turn()

    async def _handle_round_end(self) -> None:
        await self._dismiss_palette()
        summary = self.game.history.rounds[-1]
        if summary.winner_index is None:
            self.event_log.add("[yellow]Round ended without a cut[/yellow]")
        else:
            label = LABELS[summary.winner_index]
            gained = summary.delta.points[summary.winner_index]
            extra = " with [bold magenta]Chinchón[/bold magenta]" if summary.delta.chinchon_bonus else ""
            self.event_log.add(f"[bold green]{label} cut{extra}: +{gained}[/bold green]")
        self._refresh_ui(reveal_all=True)

        if self.game.is_over:
            winner = self.game.winner
            label = LABELS[winner] if winner is not None else "Nobody"
            self.status_strip.message = f"[bold green]{label} won the game![/bold green] Press Q to quit."
        else:
            self.awaiting_next_round = True
            self.status_strip.message = "[green]Round complete.[/green] Press [bold]N[/bold] for the next round."

    def _refresh_ui(self, *, reveal_all: bool = False) -> None:
        state = self.round
        reveal = {HUMAN, COMPUTER} if (reveal_all or self.reveal_enabled) else {HUMAN}
        self.table_panel.update(render_state(state, LABELS, reveal_players=reveal, title="Table"))
        analysis = self.game.analyses()[HUMAN]
        self.hand_panel.update(render_analysis(analysis, title="Your Hand"))
        self.score_panel.update(
            Panel(render_scores(self.game.score, self.game.history, LABELS), title="Score", border_style="bright_blue")
        )
        self.title = f"Chinchón • Round {self.game.score.round_number} • Turn {state.turn_index}"


def run_textual_app(
    *,
    difficulty: Difficulty,
    target_score: int,
    seed: int | None,
    reveal: bool,
) -> None:
    """Launch the Textual UI."""

    app = ChinchonTextualApp(difficulty=difficulty, target_score=target_score, seed=seed, reveal=reveal)
    app.run()
