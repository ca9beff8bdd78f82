"""Rich terminal frontend: styled card grid, panels and score table.

Cards are labelled ``a``-``z`` then ``A``-``F``; press a label to flip
that card, or move the cursor with the arrow keys and press Enter/Space.
The loop polls the keyboard with a short timeout and pumps the engine
between polls so the clock and delayed flips keep running.
"""

from __future__ import annotations

from datetime import datetime

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.config import GameRules
from backend.engine.gameplay import GamePlay
from backend.errors import ValidationError
from backend.models.highscore import ScoreRecord, ScoreStore
from backend.models.session import FlipResult, GamePhase, GameSnapshot
from frontend.cli.input_handler import get_key, get_key_timeout

console = Console()

LABELS = "abcdefghijklmnopqrstuvwxyzABCDEF"
POLL_SECONDS = 0.1


# -- helpers ------------------------------------------------------------------


def grid_columns(card_count: int) -> int:
    return 4 if card_count <= 16 else 8


def _format_date(iso: str) -> str:
    try:
        return datetime.fromisoformat(iso).astimezone().strftime("%Y-%m-%d")
    except ValueError:
        return iso


def _move_cursor(cursor: int, direction: str, count: int) -> int:
    cols = grid_columns(count)
    step = {"left": -1, "right": 1, "up": -cols, "down": cols}[direction]
    target = cursor + step
    return target if 0 <= target < count else cursor


# -- board rendering ----------------------------------------------------------


def _render_board(snap: GameSnapshot, cursor: int) -> Table:
    """Return a Rich Table with one cell per card."""
    cols = grid_columns(len(snap.cards))
    table = Table(
        show_header=False,
        show_edge=True,
        show_lines=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(cols):
        table.add_column(width=5, justify="center")

    row: list[Text] = []
    for card in snap.cards:
        label = LABELS[card.id]
        if card.is_matched:
            cell = Text(f"{card.symbol}", style="bold on green")
        elif card.face_up:
            cell = Text(f"{card.symbol}", style="bold on grey23")
        else:
            cell = Text(f" {label} ", style="bold white on blue")
        if card.id == cursor:
            cell.stylize("reverse")
        row.append(cell)
        if len(row) == cols:
            table.add_row(*row)
            row = []
    if row:
        table.add_row(*row)
    return table


# -- screens ------------------------------------------------------------------


def _draw_menu(rules: GameRules, name: str, status: str = "") -> None:
    console.clear()

    how = Text()
    how.append("How to Play\n", style="bold")
    how.append("  • Flip cards to find matching pairs\n", style="dim")
    how.append(
        f"  • Start with {rules.base_pairs} pairs and {rules.base_time_limit} seconds\n",
        style="dim",
    )
    how.append(f"  • Each level adds 1 pair and {rules.time_step} seconds\n", style="dim")
    how.append("  • Complete all pairs before time runs out!", style="dim")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Start Game    ")
    opts.append("2", style="bold magenta")
    opts.append("  High Scores    ")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    player = Text()
    player.append("  Player: ", style="dim")
    player.append(name or "(none yet)", style="bold yellow" if name else "dim")

    parts = [Text(""), how, Text(""), Align.center(player), Text(""), Align.center(opts)]
    if status:
        parts.append(Align.center(Text.from_markup(f"\n  {status}")))

    panel = Panel(
        Group(*parts),
        title="[bold]M E M O R Y   M A E S T R O[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )
    console.print()
    console.print(Align.center(panel))


def _draw_game(snap: GameSnapshot, cursor: int, status: str = "") -> None:
    console.clear()

    stats = Text()
    stats.append("  Level: ", style="dim")
    stats.append(str(snap.level), style="bold yellow")
    stats.append("    Pairs: ", style="dim")
    stats.append(f"{snap.matched_pairs}/{snap.pairs}", style="bold yellow")
    stats.append("    Time: ", style="dim")
    time_style = "bold red" if snap.time_left <= 3 else "bold yellow"
    stats.append(f"{snap.time_left}s", style=time_style)

    controls = Text()
    controls.append("  a-z", style="bold cyan")
    controls.append("  flip   ", style="dim")
    controls.append("↑↓←→", style="bold cyan")
    controls.append(" + ", style="dim")
    controls.append("Enter", style="bold cyan")
    controls.append("  flip at cursor   ", style="dim")
    controls.append("Esc", style="bold red")
    controls.append("  give up", style="dim")

    panel = Panel(
        Align.center(_render_board(snap, cursor)),
        title=f"[bold cyan]{snap.player_name}  —  Level {snap.level}[/bold cyan]",
        border_style="green" if snap.level_cleared else "bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(stats))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def _draw_game_over(snap: GameSnapshot, record: ScoreRecord | None) -> None:
    console.clear()

    body = Text(justify="center")
    body.append("\nGame Over!\n\n", style="bold red")
    body.append("Level Reached: ", style="dim")
    body.append(f"{snap.completed_level}\n", style="bold yellow")
    if record is not None:
        body.append("\nScore saved.\n", style="green")

    opts = Text()
    opts.append("  N", style="bold cyan")
    opts.append("  New Game    ")
    opts.append("H", style="bold magenta")
    opts.append("  High Scores    ")
    opts.append("Q", style="dim bold")
    opts.append("  Menu", style="dim")

    panel = Panel(
        Group(Align.center(body), Align.center(opts)),
        title=f"[bold]{snap.player_name}[/bold]",
        border_style="red",
        padding=(1, 4),
    )
    console.print()
    console.print(Align.center(panel))


def render_scores(scores: list[ScoreRecord]) -> Table | Text:
    """Top-N table; also used by ``main.py --scores``."""
    if not scores:
        return Text("  No scores yet. Be the first!", style="dim")

    table = Table(
        title="Top 10 High Scores",
        title_style="bold cyan",
        box=rich.box.ROUNDED,
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name", style="bold")
    table.add_column("Level", justify="right", style="yellow")
    table.add_column("Date", style="dim")
    for i, r in enumerate(scores, 1):
        table.add_row(str(i), r.name, str(r.level), _format_date(r.date))
    return table


def _draw_highscores(store: ScoreStore) -> None:
    """Full-screen high-scores view."""
    console.clear()
    panel = Panel(
        Align.center(render_scores(store.scores)),
        title="[bold]HIGH  SCORES[/bold]",
        border_style="magenta",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))
    get_key()


# -- game loops ---------------------------------------------------------------

_FLIP_STATUS = {
    FlipResult.MATCHED: "[green]Match![/green]",
    FlipResult.MISMATCHED: "[yellow]No match.[/yellow]",
    FlipResult.LEVEL_COMPLETE: "[bold green]Level complete![/bold green]",
}


def _play_level_loop(game: GamePlay) -> None:
    """Run until the session leaves the playing phase."""
    cursor = 0
    status = ""
    last: GameSnapshot | None = None
    level = 0

    while True:
        game.pump()
        snap = game.snapshot()
        if snap.phase is not GamePhase.PLAYING:
            return
        if snap.level != level:
            cursor, status, level = 0, "", snap.level
        if snap != last:
            _draw_game(snap, cursor, status)
            last = snap

        key = get_key_timeout(POLL_SECONDS)
        if key is None:
            continue

        count = len(snap.cards)
        card_id: int | None = None
        if key in ("up", "down", "left", "right"):
            cursor = _move_cursor(cursor, key, count)
        elif key in ("enter", "flip"):
            card_id = cursor
        elif len(key) == 1 and key in LABELS[:count]:
            card_id = cursor = LABELS.index(key)
        elif key in ("escape", "quit"):
            game.give_up()
            return

        if card_id is not None:
            status = _FLIP_STATUS.get(game.flip_card(card_id), "")
        # force a redraw for cursor moves and status changes
        last = None


def _session_loop(game: GamePlay, store: ScoreStore, name: str) -> None:
    """Play sessions back to back until the player returns to the menu."""
    while True:
        _play_level_loop(game)
        snap = game.snapshot()
        record = game.last_record
        _draw_game_over(snap, record)

        while True:
            key = get_key()
            if key in ("n", "N", "enter"):
                game.start_game(name)
                break
            if key in ("h", "H"):
                _draw_highscores(store)
                _draw_game_over(snap, record)
            elif key in ("q", "Q", "escape", "quit"):
                game.return_to_landing()
                return


def _ask_name(current: str) -> str:
    prompt = f"  Enter your name [{current}]: " if current else "  Enter your name: "
    raw = console.input(prompt)
    return raw.strip() or current


# -- menu loop ----------------------------------------------------------------


def _menu_loop(game: GamePlay, store: ScoreStore) -> None:
    name = ""
    status = ""

    while True:
        _draw_menu(game.rules, name, status)
        status = ""
        key = get_key()

        if key in ("q", "Q", "escape", "quit"):
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key in ("1", "enter"):
            candidate = _ask_name(name)
            try:
                game.start_game(candidate)
            except ValidationError as exc:
                status = f"[red]Name Required:[/red] {exc}"
                continue
            name = game.snapshot().player_name
            _session_loop(game, store, name)
        elif key in ("2", "h", "H"):
            _draw_highscores(store)


# -- public entry point -------------------------------------------------------


def run(game: GamePlay, store: ScoreStore) -> None:
    """Launch the Rich CLI with interactive menu."""
    store.load()
    _menu_loop(game, store)
