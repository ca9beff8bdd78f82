"""PyQt6 window for the memory game.

Includes the landing page with name entry, gameplay, game-over page and
the high-score table.  A ``QTimer`` pumps the engine so the level clock
and delayed flips run inside Qt's event loop.
"""

from __future__ import annotations

import sys
from datetime import datetime

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QFont, QKeyEvent
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QSpacerItem,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from backend.engine.gameplay import GamePlay
from backend.errors import ValidationError
from backend.models.highscore import ScoreStore
from backend.models.session import GamePhase, GameSnapshot

# ---------------------------------------------------------------------------
# Catppuccin Mocha CSS colours
# ---------------------------------------------------------------------------
_BASE = "#1e1e2e"
_MANTLE = "#181825"
_SURFACE0 = "#313244"
_SURFACE1 = "#45475a"
_OVERLAY0 = "#6c7086"
_TEXT = "#cdd6f4"
_SUBTEXT = "#a6adc8"
_BLUE = "#89b4fa"
_BLUE_H = "#a4c4fc"
_GREEN = "#a6e3a1"
_GREEN_H = "#b8ecb4"
_MAUVE = "#cba6f7"
_MAUVE_H = "#dcbefa"
_YELLOW = "#f9e2af"
_RED = "#f38ba8"
_RED_H = "#f5a0b8"
_LAVENDER = "#b4befe"

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_BASE}; }}
    QLabel {{ color: {_TEXT}; }}
"""

_PUMP_MS = 100


def _styled_btn(
    text: str,
    *,
    bg: str = _SURFACE0,
    hover: str = _SURFACE1,
    fg: str = _TEXT,
    font_size: int = 14,
    min_w: int = 0,
    min_h: int = 44,
) -> QPushButton:
    btn = QPushButton(text)
    btn.setFont(QFont("Helvetica", font_size, QFont.Weight.Bold))
    btn.setMinimumHeight(min_h)
    if min_w:
        btn.setMinimumWidth(min_w)
    btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    btn.setStyleSheet(
        f"QPushButton {{ background:{bg}; color:{fg};"
        f" border:none; border-radius:8px; padding:6px 18px; }}"
        f" QPushButton:hover {{ background:{hover}; }}"
    )
    return btn


def _label(text: str, size: int, colour: str = _TEXT, bold: bool = False) -> QLabel:
    lbl = QLabel(text)
    lbl.setFont(QFont("Helvetica", size, QFont.Weight.Bold if bold else QFont.Weight.Normal))
    lbl.setStyleSheet(f"color:{colour};")
    lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
    return lbl


# ═══════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════


class _LandingPage(QWidget):
    """Name entry, how-to-play, start / scores / quit."""

    def __init__(self, game: GamePlay) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(12)
        root.setContentsMargins(30, 30, 30, 30)

        root.addWidget(_label("Memory Maestro", 34, bold=True))
        root.addSpacerItem(QSpacerItem(0, 18))
        root.addWidget(_label("Enter your name:", 15, _SUBTEXT))

        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("Your name")
        self.name_edit.setFont(QFont("Helvetica", 15))
        self.name_edit.setMaximumWidth(300)
        self.name_edit.setStyleSheet(
            f"QLineEdit {{ background:{_MANTLE}; color:{_TEXT};"
            f" border:2px solid {_SURFACE1}; border-radius:8px; padding:8px; }}"
        )
        root.addWidget(self.name_edit, alignment=Qt.AlignmentFlag.AlignCenter)

        rules = game.rules
        for tip in (
            "• Flip cards to find matching pairs",
            f"• Start with {rules.base_pairs} pairs and {rules.base_time_limit} seconds",
            f"• Each level adds 1 pair and {rules.time_step} seconds",
            "• Complete all pairs before time runs out!",
        ):
            root.addWidget(_label(tip, 12, _OVERLAY0))

        root.addSpacerItem(QSpacerItem(0, 12))

        self.start_btn = _styled_btn(
            "Start Game", bg=_BLUE, hover=_LAVENDER, fg=_BASE,
            font_size=16, min_w=240, min_h=52,
        )
        root.addWidget(self.start_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.scores_btn = _styled_btn(
            "High Scores", bg=_MAUVE, hover=_MAUVE_H, fg=_BASE, min_w=240, font_size=13
        )
        root.addWidget(self.scores_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.quit_btn = _styled_btn(
            "Q U I T", bg=_RED, hover=_RED_H, fg=_BASE, min_w=240, font_size=13
        )
        root.addWidget(self.quit_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.status = _label("", 13, _RED, bold=True)
        root.addWidget(self.status)


class _GamePage(QWidget):
    """The card grid with level, clock and give-up button."""

    def __init__(self, game: GamePlay) -> None:
        super().__init__()
        self.setObjectName("page")
        self.game = game
        self._shown_level = 0

        root = QVBoxLayout(self)
        root.setSpacing(6)
        root.setContentsMargins(16, 10, 16, 10)

        header = QHBoxLayout()
        self._level = _label("", 17, bold=True)
        self._time = _label("", 17, _YELLOW, bold=True)
        self.give_up_btn = _styled_btn(
            "Give Up", bg=_RED, hover=_RED_H, fg=_BASE, font_size=12, min_h=36
        )
        header.addWidget(self._level)
        header.addWidget(self._time)
        header.addWidget(self.give_up_btn)
        root.addLayout(header)

        self._frame = QFrame()
        self._frame.setStyleSheet(f"background:{_MANTLE}; border-radius:10px;")
        self._grid = QGridLayout(self._frame)
        self._grid.setSpacing(6)
        self._grid.setContentsMargins(10, 10, 10, 10)
        root.addWidget(self._frame, alignment=Qt.AlignmentFlag.AlignCenter)

        self._hint = _label("Click cards to flip     Esc  give up", 11, _OVERLAY0)
        root.addWidget(self._hint)

        self._btns: list[QPushButton] = []

    def _rebuild(self, snap: GameSnapshot) -> None:
        for b in self._btns:
            self._grid.removeWidget(b)
            b.deleteLater()
        self._btns = []

        cols = 4 if len(snap.cards) <= 16 else 8
        side = 84 if cols == 4 else 56
        for card in snap.cards:
            b = QPushButton()
            b.setFixedSize(side, int(side * 1.4))
            b.setFont(QFont("Helvetica", side // 3))
            b.setFocusPolicy(Qt.FocusPolicy.NoFocus)
            b.clicked.connect(lambda _, cid=card.id: self._flip(cid))
            self._grid.addWidget(b, card.id // cols, card.id % cols)
            self._btns.append(b)
        self._shown_level = snap.level

    def _flip(self, card_id: int) -> None:
        self.game.flip_card(card_id)
        self.sync()

    def sync(self) -> None:
        snap = self.game.snapshot()
        if snap.phase is not GamePhase.PLAYING:
            return
        if snap.level != self._shown_level or len(self._btns) != len(snap.cards):
            self._rebuild(snap)

        self._level.setText(f"Level: {snap.level}")
        self._time.setText(f"Time: {snap.time_left}s")
        self._time.setStyleSheet(f"color:{_RED if snap.time_left <= 3 else _YELLOW};")

        for card, b in zip(snap.cards, self._btns):
            if card.is_matched:
                bg, hv, text = _GREEN, _GREEN_H, str(card.symbol)
            elif card.face_up:
                bg, hv, text = _SURFACE1, _SURFACE1, str(card.symbol)
            else:
                bg, hv, text = _BLUE, _BLUE_H, "♠"
            b.setText(text)
            b.setStyleSheet(
                f"QPushButton{{background:{bg};color:{_BASE};"
                f"border:none;border-radius:8px;}}"
                f"QPushButton:hover{{background:{hv};}}"
            )

    def reset(self) -> None:
        self._shown_level = 0


class _GameOverPage(QWidget):
    """Level reached plus navigation buttons."""

    def __init__(self) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(10)
        root.setContentsMargins(30, 30, 30, 30)

        root.addWidget(_label("Game Over!", 32, _RED, bold=True))
        root.addSpacerItem(QSpacerItem(0, 16))
        self.reached = _label("", 20, _YELLOW, bold=True)
        root.addWidget(self.reached)
        self.saved = _label("", 13, _GREEN)
        root.addWidget(self.saved)
        root.addSpacerItem(QSpacerItem(0, 20))

        self.again_btn = _styled_btn(
            "New Game", bg=_GREEN, hover=_GREEN_H, fg=_BASE,
            font_size=16, min_w=240, min_h=50,
        )
        root.addWidget(self.again_btn, alignment=Qt.AlignmentFlag.AlignCenter)
        self.scores_btn = _styled_btn(
            "View High Scores", bg=_MAUVE, hover=_MAUVE_H, fg=_BASE, min_w=240, font_size=13
        )
        root.addWidget(self.scores_btn, alignment=Qt.AlignmentFlag.AlignCenter)
        self.menu_btn = _styled_btn("M E N U", min_w=240, font_size=13)
        root.addWidget(self.menu_btn, alignment=Qt.AlignmentFlag.AlignCenter)

    def show_result(self, completed_level: int, saved: bool) -> None:
        self.reached.setText(f"Level Reached: {completed_level}")
        self.saved.setText("Score saved" if saved else "")


class _ScoresPage(QWidget):
    """Top-10 table with a back button."""

    def __init__(self) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setSpacing(8)
        root.setContentsMargins(24, 20, 24, 16)
        root.addWidget(_label("Top 10 High Scores", 24, bold=True))

        self._content = QWidget()
        self._content.setObjectName("page")
        self._rows = QVBoxLayout(self._content)
        self._rows.setSpacing(2)
        self._rows.setContentsMargins(10, 10, 10, 10)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._content)
        scroll.setStyleSheet(f"QScrollArea {{ border:none; background:{_BASE}; }}")
        root.addWidget(scroll)

        self.back_btn = _styled_btn("B A C K", min_w=200, font_size=13)
        root.addWidget(self.back_btn, alignment=Qt.AlignmentFlag.AlignCenter)

    def populate(self, store: ScoreStore) -> None:
        while self._rows.count():
            item = self._rows.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        scores = store.scores
        if not scores:
            self._rows.addWidget(_label("No scores yet. Be the first!", 14, _OVERLAY0))
            return
        for i, r in enumerate(scores, 1):
            day = datetime.fromisoformat(r.date).astimezone().strftime("%Y-%m-%d")
            row = QLabel(f"  {i:>2}.   {r.name:<20}  Level {r.level:<3}  {day}")
            row.setFont(QFont("Menlo", 12))
            row.setStyleSheet(f"color:{_SUBTEXT};")
            self._rows.addWidget(row)
        self._rows.addStretch(1)


# ═══════════════════════════════════════════════════════════════════════════
# Main window
# ═══════════════════════════════════════════════════════════════════════════

_IDX_LANDING = 0
_IDX_GAME = 1
_IDX_OVER = 2
_IDX_SCORES = 3


class _MainWindow(QMainWindow):
    def __init__(self, game: GamePlay, store: ScoreStore) -> None:
        super().__init__()
        self._game = game
        self._hs = store

        self.setWindowTitle("Memory Maestro")
        self.setStyleSheet(_GLOBAL_CSS)
        self.setMinimumSize(520, 680)

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._landing = _LandingPage(game)
        self._landing.start_btn.clicked.connect(self._on_start)
        self._landing.name_edit.returnPressed.connect(self._on_start)
        self._landing.scores_btn.clicked.connect(self._show_scores)
        self._landing.quit_btn.clicked.connect(self.close)
        self._stack.addWidget(self._landing)

        self._game_page = _GamePage(game)
        self._game_page.give_up_btn.clicked.connect(self._game.give_up)
        self._stack.addWidget(self._game_page)

        self._over = _GameOverPage()
        self._over.again_btn.clicked.connect(self._on_start)
        self._over.scores_btn.clicked.connect(self._show_scores)
        self._over.menu_btn.clicked.connect(self._show_landing)
        self._stack.addWidget(self._over)

        self._scores = _ScoresPage()
        self._scores.back_btn.clicked.connect(self._show_landing)
        self._stack.addWidget(self._scores)

        self._stack.setCurrentIndex(_IDX_LANDING)

        self._pump = QTimer(self)
        self._pump.timeout.connect(self._on_pump)
        self._pump.start(_PUMP_MS)

    # -- navigation ---

    def _on_start(self) -> None:
        try:
            self._game.start_game(self._landing.name_edit.text())
        except ValidationError as exc:
            self._landing.status.setText(f"Name Required: {exc}")
            self._stack.setCurrentIndex(_IDX_LANDING)
            return
        self._landing.status.setText("")
        self._game_page.reset()
        self._game_page.sync()
        self._stack.setCurrentIndex(_IDX_GAME)

    def _show_landing(self) -> None:
        self._game.return_to_landing()
        self._stack.setCurrentIndex(_IDX_LANDING)

    def _show_scores(self) -> None:
        self._game.return_to_landing()
        self._scores.populate(self._hs)
        self._stack.setCurrentIndex(_IDX_SCORES)

    # -- engine pump ---

    def _on_pump(self) -> None:
        self._game.pump()
        if self._stack.currentIndex() != _IDX_GAME:
            return
        snap = self._game.snapshot()
        if snap.phase is GamePhase.GAME_OVER:
            self._over.show_result(snap.completed_level, self._game.last_record is not None)
            self._stack.setCurrentIndex(_IDX_OVER)
        else:
            self._game_page.sync()

    # -- keyboard ---

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()
        idx = self._stack.currentIndex()

        if idx == _IDX_GAME and key == Qt.Key.Key_Escape:
            self._game.give_up()
        elif idx == _IDX_OVER:
            if key in (Qt.Key.Key_N, Qt.Key.Key_Return):
                self._on_start()
            elif key in (Qt.Key.Key_M, Qt.Key.Key_Escape):
                self._show_landing()
        elif idx == _IDX_SCORES and key in (Qt.Key.Key_Escape, Qt.Key.Key_Backspace):
            self._show_landing()
        else:
            super().keyPressEvent(event)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(game: GamePlay, store: ScoreStore) -> None:
    """Launch the PyQt6 GUI (opens on the landing page)."""
    store.load()
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(game, store)
    window.show()
    qapp.exec()
