#!/usr/bin/env python3
"""Memory Maestro: a memory-matching card game.

Usage::

    python main.py                # interactive menu
    python main.py -f rich        # Rich terminal
    python main.py -f pygame      # Pygame GUI
    python main.py --scores       # view high scores
    python main.py --seed 7       # reproducible deals
"""

from __future__ import annotations

import importlib
import logging
import random
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import LOG_FILENAME, STORE_FILENAME  # noqa: E402
from backend.engine.gameplay import GamePlay  # noqa: E402
from backend.models.highscore import ScoreStore  # noqa: E402
from backend.storage import JsonFileStore, KeyValueStore, MemoryStore  # noqa: E402

logger = logging.getLogger("memory_maestro")


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    rich = "rich"
    pygame = "pygame"
    pyqt = "pyqt"


_RUNNERS = {
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
    Frontend.pyqt: "frontend.gui.pyqt.app",
}


class LogLevel(StrEnum):
    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"


# -- helpers ------------------------------------------------------------------


def configure_logging(level: LogLevel, log_file: Path | None) -> None:
    """Send records to *log_file*, or to stderr through Rich when it is ``None``."""
    handler: logging.Handler
    if log_file is None:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")
        )
    logging.basicConfig(level=level.value, handlers=[handler], force=True)


def build_store(data_dir: Path, persist: bool = True) -> ScoreStore:
    kv: KeyValueStore = JsonFileStore(data_dir / STORE_FILENAME) if persist else MemoryStore()
    return ScoreStore(kv)


def _print_highscores(store: ScoreStore) -> None:
    from frontend.cli.rich.app import render_scores

    console = Console()
    console.print()
    console.print(render_scores(store.load()))
    console.print()


def _menu_loop(game: GamePlay, store: ScoreStore) -> None:
    while True:
        print()
        print("  ====================================")
        print("         M E M O R Y   M A E S T R O  ")
        print("  ====================================")
        print()
        print("  1.  Play  (Rich Terminal)")
        print("  2.  Play  (Pygame GUI)")
        print("  3.  Play  (PyQt GUI)")
        print("  4.  View High Scores")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        frontend = {"1": Frontend.rich, "2": Frontend.pygame, "3": Frontend.pyqt}.get(choice)
        if frontend is not None:
            mod = importlib.import_module(_RUNNERS[frontend])
            mod.run(game, store)
        elif choice == "4":
            _print_highscores(store)
        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    scores: bool = typer.Option(
        False, "--scores",
        help="Show high scores and exit.",
    ),
    data_dir: Path = typer.Option(
        DATA_DIR, "--data-dir",
        envvar="MEMORY_MAESTRO_DATA_DIR",
        file_okay=False,
        help="Directory holding saved scores and the log file.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed the card shuffle for reproducible deals.",
    ),
    no_save: bool = typer.Option(
        False, "--no-save",
        help="Keep scores in memory only.",
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.warning, "--log-level",
        case_sensitive=False,
        help="Minimum level written to the log.",
    ),
) -> None:
    """Memory Maestro."""
    store = build_store(data_dir, persist=not no_save)

    if scores:
        configure_logging(log_level, None)
        _print_highscores(store)
        return

    configure_logging(log_level, data_dir / LOG_FILENAME)
    game = GamePlay(store, rng=random.Random(seed))
    logger.info("Launching %s (data dir %s)", frontend or "menu", data_dir)

    if frontend is None:
        store.load()
        _menu_loop(game, store)
        return

    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(game, store)


if __name__ == "__main__":
    app()
