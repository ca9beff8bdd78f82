"""Pygame window for the memory game.

Includes the landing screen with name entry, gameplay, game-over screen
and the high-score table, all drawn from engine snapshots.
"""

from __future__ import annotations

import enum
from datetime import datetime

import pygame

from backend.engine.gameplay import GamePlay
from backend.errors import ValidationError
from backend.models.highscore import ScoreStore
from backend.models.session import CardView, FlipResult, GamePhase

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_MAUVE = (203, 166, 247)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

# Face colours, one per palette position, so symbols stay distinguishable
# even when the system font has no emoji glyphs.
FACE_COLOURS = [
    (249, 226, 175), (245, 194, 231), (137, 180, 250), (243, 139, 168),
    (250, 179, 135), (203, 166, 247), (166, 227, 161), (148, 226, 213),
    (235, 160, 172), (116, 199, 236), (242, 205, 205), (180, 190, 254),
    (245, 224, 220), (137, 220, 235), (238, 153, 160), (205, 214, 244),
]

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 520, 680
CARD_GAP = 8
MARGIN = 24
BOARD_TOP = 96
NAME_MAX = 20


class _Screen(enum.Enum):
    LANDING = "landing"
    PLAYING = "playing"
    GAME_OVER = "game_over"
    SCORES = "scores"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


def card_layout(count: int) -> tuple[int, int, int]:
    """Return (columns, card_w, card_h) for *count* cards."""
    cols = 4 if count <= 16 else 8
    card_w = (WIN_W - 2 * MARGIN - (cols - 1) * CARD_GAP) // cols
    rows = -(-count // cols)
    max_h = (WIN_H - BOARD_TOP - 90 - (rows - 1) * CARD_GAP) // max(rows, 1)
    card_h = min(int(card_w * 1.4), max_h)
    return cols, card_w, card_h


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(self, game: GamePlay, store: ScoreStore) -> None:
        self._game = game
        self._hs = store
        self._name = ""
        self._status_msg = ""

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Memory Maestro")
        self._clock = pygame.time.Clock()

        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)
        self._f_card = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_emoji = pygame.font.SysFont(
            "applecoloremoji,segoeuiemoji,notocoloremoji,notoemoji", 30
        )

        self._screen = _Screen.LANDING
        self._build_landing_btns()
        self._build_over_btns()
        self._score_back = _Btn((_cx(180), WIN_H - 64, 180, 46), "B A C K", self._f_btn)
        self._give_up = _Btn(
            (WIN_W - MARGIN - 110, 40, 110, 36), "GIVE UP", self._f_small,
            bg=COL_RED, hover=(255, 170, 185), fg=COL_BASE,
        )

    # ── buttons ─────────────────────────────────────────────────────────────

    def _build_landing_btns(self) -> None:
        bw = 240
        self._name_rect = pygame.Rect(_cx(bw + 60), 230, bw + 60, 44)
        self._play_btn = _Btn(
            (_cx(bw), 420, bw, 50), "START GAME", self._f_btn,
            bg=COL_BLUE, hover=COL_LAVENDER, fg=COL_BASE,
        )
        self._hs_btn = _Btn(
            (_cx(bw), 484, bw, 44), "HIGH SCORES", self._f_btn,
            bg=COL_MAUVE, hover=(220, 190, 250), fg=COL_BASE,
        )
        self._quit_btn = _Btn(
            (_cx(bw), 542, bw, 44), "Q U I T", self._f_btn,
            bg=COL_RED, hover=(255, 170, 185), fg=COL_BASE,
        )
        self._landing_all = [self._play_btn, self._hs_btn, self._quit_btn]

    def _build_over_btns(self) -> None:
        bw = 240
        self._again_btn = _Btn(
            (_cx(bw), 360, bw, 50), "NEW GAME", self._f_btn,
            bg=COL_GREEN, hover=(190, 240, 190), fg=COL_BASE,
        )
        self._over_hs_btn = _Btn(
            (_cx(bw), 424, bw, 46), "VIEW HIGH SCORES", self._f_btn,
            bg=COL_MAUVE, hover=(220, 190, 250), fg=COL_BASE,
        )
        self._over_menu_btn = _Btn((_cx(bw), 484, bw, 46), "M E N U", self._f_btn)
        self._over_all = [self._again_btn, self._over_hs_btn, self._over_menu_btn]

    # ── helpers ─────────────────────────────────────────────────────────────

    def _card_rects(self, count: int) -> list[pygame.Rect]:
        cols, cw, ch = card_layout(count)
        ox = _cx(cols * cw + (cols - 1) * CARD_GAP)
        return [
            pygame.Rect(
                ox + (i % cols) * (cw + CARD_GAP),
                BOARD_TOP + (i // cols) * (ch + CARD_GAP),
                cw,
                ch,
            )
            for i in range(count)
        ]

    def _face_label(self, card: CardView) -> pygame.Surface:
        glyph = self._f_emoji.render(str(card.symbol), True, COL_BASE)
        if glyph.get_width() > 4:
            return glyph
        return self._f_card.render(card.symbol.name.title(), True, COL_BASE)

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_landing(self) -> None:
        self._surf.fill(COL_BASE)
        _blit_center(self._surf, self._f_big.render("MEMORY  MAESTRO", True, COL_TEXT), 80)
        _blit_center(
            self._surf, self._f_body.render("Enter your name:", True, COL_SUBTEXT), 200
        )

        pygame.draw.rect(self._surf, COL_MANTLE, self._name_rect, border_radius=8)
        pygame.draw.rect(self._surf, COL_BLUE, self._name_rect, width=2, border_radius=8)
        caret = "|" if (pygame.time.get_ticks() // 500) % 2 == 0 else ""
        shown = self._f_title.render(self._name + caret, True, COL_TEXT)
        self._surf.blit(
            shown,
            (self._name_rect.x + 12, self._name_rect.centery - shown.get_height() // 2),
        )

        rules = self._game.rules
        tips = [
            "Flip cards to find matching pairs",
            f"Start with {rules.base_pairs} pairs and {rules.base_time_limit} seconds",
            f"Each level adds 1 pair and {rules.time_step} seconds",
            "Complete all pairs before time runs out!",
        ]
        y = 296
        for tip in tips:
            _blit_center(self._surf, self._f_small.render(tip, True, COL_OVERLAY0), y)
            y += 22

        for btn in self._landing_all:
            btn.draw(self._surf)

        if self._status_msg:
            _blit_center(
                self._surf, self._f_body.render(self._status_msg, True, COL_RED), 604
            )

    def _draw_game(self) -> None:
        self._surf.fill(COL_BASE)
        snap = self._game.snapshot()

        self._surf.blit(
            self._f_title.render(f"Level {snap.level}", True, COL_TEXT), (MARGIN, 16)
        )
        time_col = COL_RED if snap.time_left <= 3 else COL_YELLOW
        self._surf.blit(
            self._f_title.render(f"Time: {snap.time_left}s", True, time_col), (MARGIN, 48)
        )
        self._give_up.draw(self._surf)

        for card, rect in zip(snap.cards, self._card_rects(len(snap.cards))):
            if card.is_matched:
                pygame.draw.rect(self._surf, COL_GREEN, rect, border_radius=8)
            elif card.face_up:
                colour = FACE_COLOURS[list(self._game.rules.palette).index(card.symbol)]
                pygame.draw.rect(self._surf, colour, rect, border_radius=8)
            else:
                pygame.draw.rect(self._surf, COL_BLUE, rect, border_radius=8)
                pygame.draw.rect(
                    self._surf, COL_LAVENDER, rect.inflate(-12, -12), width=2, border_radius=6
                )
                continue
            lbl = self._face_label(card)
            self._surf.blit(
                lbl,
                (rect.centerx - lbl.get_width() // 2, rect.centery - lbl.get_height() // 2),
            )

        footer = self._status_msg or "Click cards to flip     Esc  give up"
        _blit_center(self._surf, self._f_small.render(footer, True, COL_OVERLAY0), WIN_H - 36)

    def _draw_game_over(self) -> None:
        self._surf.fill(COL_BASE)
        snap = self._game.snapshot()
        _blit_center(self._surf, self._f_big.render("Game Over!", True, COL_RED), 120)
        _blit_center(
            self._surf,
            self._f_title.render(f"Level Reached: {snap.completed_level}", True, COL_YELLOW),
            210,
        )
        if self._game.last_record is not None:
            _blit_center(
                self._surf, self._f_body.render("Score saved", True, COL_GREEN), 260
            )
        for btn in self._over_all:
            btn.draw(self._surf)

    def _draw_scores(self) -> None:
        self._surf.fill(COL_BASE)
        _blit_center(
            self._surf, self._f_big.render("TOP 10 HIGH SCORES", True, COL_TEXT), 24
        )
        scores = self._hs.scores
        y = 100
        if not scores:
            _blit_center(
                self._surf,
                self._f_body.render("No scores yet. Be the first!", True, COL_OVERLAY0),
                y + 30,
            )
        for i, r in enumerate(scores, 1):
            day = datetime.fromisoformat(r.date).astimezone().strftime("%Y-%m-%d")
            cols = [(f"{i}.", 50), (r.name[:NAME_MAX], 90), (f"Lv {r.level}", 320), (day, 390)]
            for text, x in cols:
                self._surf.blit(self._f_body.render(text, True, COL_SUBTEXT), (x, y))
            y += 40
        self._score_back.draw(self._surf)

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_landing(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._landing_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._play_btn.hit(ev.pos):
                self._start_game()
            elif self._hs_btn.hit(ev.pos):
                self._screen = _Screen.SCORES
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.TEXTINPUT:
            if len(self._name) < NAME_MAX:
                self._name += ev.text
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key == pygame.K_BACKSPACE:
                self._name = self._name[:-1]
            elif ev.key == pygame.K_ESCAPE:
                return False
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._give_up.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._give_up.hit(ev.pos):
                self._game.give_up()
                return True
            snap = self._game.snapshot()
            for card, rect in zip(snap.cards, self._card_rects(len(snap.cards))):
                if rect.collidepoint(ev.pos):
                    result = self._game.flip_card(card.id)
                    if result is FlipResult.LEVEL_COMPLETE:
                        self._status_msg = "Level complete!"
                    elif result is not FlipResult.IGNORED:
                        self._status_msg = ""
                    return True
        elif ev.type == pygame.KEYDOWN and ev.key == pygame.K_ESCAPE:
            self._game.give_up()
        return True

    def _ev_game_over(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._over_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._again_btn.hit(ev.pos):
                self._start_game()
            elif self._over_hs_btn.hit(ev.pos):
                self._game.return_to_landing()
                self._screen = _Screen.SCORES
            elif self._over_menu_btn.hit(ev.pos):
                self._to_landing()
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_n, pygame.K_RETURN):
                self._start_game()
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._to_landing()
        return True

    def _ev_scores(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._score_back.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._score_back.hit(ev.pos):
                self._screen = _Screen.LANDING
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_m):
                self._screen = _Screen.LANDING
        return True

    # ── game state ──────────────────────────────────────────────────────────

    def _start_game(self) -> None:
        try:
            self._game.start_game(self._name)
        except ValidationError as exc:
            self._status_msg = str(exc)
            self._screen = _Screen.LANDING
            return
        self._status_msg = ""
        self._screen = _Screen.PLAYING

    def _to_landing(self) -> None:
        self._game.return_to_landing()
        self._screen = _Screen.LANDING

    def _sync_screen(self) -> None:
        """Follow the engine when the clock or the last level ends the game."""
        if (
            self._screen == _Screen.PLAYING
            and self._game.snapshot().phase is GamePhase.GAME_OVER
        ):
            self._status_msg = ""
            self._screen = _Screen.GAME_OVER

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.LANDING: self._ev_landing,
            _Screen.PLAYING: self._ev_game,
            _Screen.GAME_OVER: self._ev_game_over,
            _Screen.SCORES: self._ev_scores,
        }
        _draw = {
            _Screen.LANDING: self._draw_landing,
            _Screen.PLAYING: self._draw_game,
            _Screen.GAME_OVER: self._draw_game_over,
            _Screen.SCORES: self._draw_scores,
        }

        pygame.key.start_text_input()
        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            self._game.pump()
            self._sync_screen()

            drawer = _draw.get(self._screen)
            if drawer:
                drawer()
            pygame.display.flip()
            self._clock.tick(30)

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(game: GamePlay, store: ScoreStore) -> None:
    """Launch the Pygame GUI (opens on the landing screen)."""
    store.load()
    app = PygameApp(game, store)
    app.run_loop()
