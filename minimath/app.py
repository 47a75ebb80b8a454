"""Pygame front-end for MiniMath.

Main menu -> mode -> level -> practice screen -> results.  All game rules
live in ``session``; this module renders ``GameState`` snapshots and turns key
presses into session actions.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import pygame

from .clock import RealClock
from .config import GameConfig, default_store_path
from .core import Level, Mode, Problem
from .hints import ArrayHint, GroupsHint, Hint, NumberLineHint, TakeAwayHint, TilesHint
from .persistence import PreferenceStore, SqliteKeyValueStore
from .registry import ModeConfig, build_default_registry
from .results import SessionStats
from .session import FeedbackKind, GameSession, SessionPhase

log = logging.getLogger(__name__)

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60
MAX_INPUT_CHARS = 5

PALETTES: dict[str, dict[str, tuple[int, int, int]]] = {
    "dark": {
        "bg": (10, 10, 14),
        "text": (235, 235, 245),
        "muted": (140, 140, 150),
        "good": (180, 220, 180),
        "bad": (220, 180, 180),
        "accent": (244, 248, 255),
        "accent_text": (14, 26, 74),
    },
    "light": {
        "bg": (244, 244, 248),
        "text": (20, 20, 30),
        "muted": (110, 110, 125),
        "good": (30, 120, 50),
        "bad": (160, 40, 40),
        "accent": (14, 26, 74),
        "accent_text": (244, 248, 255),
    },
}

KEYPAD_LAYOUT: tuple[tuple[str, ...], ...] = (
    ("7", "8", "9"),
    ("4", "5", "6"),
    ("1", "2", "3"),
    ("-", "0", "<"),
    ("OK",),
)


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...
    def refresh(self) -> None: ...


@dataclass(frozen=True, slots=True)
class MenuItem:
    label: str
    action: Callable[[], None]


class App:
    def __init__(self, surface: pygame.Surface, font: pygame.font.Font, prefs: PreferenceStore) -> None:
        self._surface = surface
        self._font = font
        self._prefs = prefs
        self._screens: list[Screen] = []
        self._running = True
        self._theme = prefs.get_theme() or "dark"

    @property
    def running(self) -> bool:
        return self._running

    @property
    def font(self) -> pygame.font.Font:
        return self._font

    @property
    def prefs(self) -> PreferenceStore:
        return self._prefs

    @property
    def palette(self) -> dict[str, tuple[int, int, int]]:
        return PALETTES[self._theme]

    @property
    def theme(self) -> str:
        return self._theme

    def toggle_theme(self) -> None:
        self._theme = "light" if self._theme == "dark" else "dark"
        self._prefs.save_theme(self._theme)

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def pop(self) -> None:
        # Never pop the root screen; it handles its own quit.
        if len(self._screens) > 1:
            self._screens.pop()
            self._screens[-1].refresh()

    def pop_to_root(self) -> None:
        del self._screens[1:]
        if self._screens:
            self._screens[-1].refresh()

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if not self._screens:
            return
        self._screens[-1].handle_event(event)

    def render(self) -> None:
        if not self._screens:
            return
        self._screens[-1].render(self._surface)


class MenuScreen:
    def __init__(
        self,
        app: App,
        title: str,
        items: Callable[[], list[MenuItem]],
        *,
        is_root: bool = False,
        info: Callable[[], list[str]] | None = None,
        selected: int = 0,
    ) -> None:
        self._app = app
        self._title = title
        self._item_source = items
        self._info_source = info
        self._items: list[MenuItem] = []
        self._info: list[str] = []
        self._selected = selected
        self._is_root = is_root
        self.refresh()

    def refresh(self) -> None:
        """Re-read menu labels and info lines; called when the menu is shown or changed."""
        self._items = self._item_source()
        self._info = [] if self._info_source is None else self._info_source()

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        items = self._items
        if event.key in (pygame.K_UP, pygame.K_w):
            self._selected = (self._selected - 1) % len(items)
        elif event.key in (pygame.K_DOWN, pygame.K_s):
            self._selected = (self._selected + 1) % len(items)
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            items[self._selected % len(items)].action()
            self.refresh()
        elif event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            if self._is_root:
                self._app.quit()
            else:
                self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        pal = self._app.palette
        font = self._app.font
        surface.fill(pal["bg"])
        surface.blit(font.render(self._title, True, pal["text"]), (40, 40))

        y = 100
        for idx, item in enumerate(self._items):
            selected = idx == self._selected
            row = pygame.Rect(40, y - 4, 420, 34)
            if selected:
                pygame.draw.rect(surface, pal["accent"], row)
            color = pal["accent_text"] if selected else pal["text"]
            surface.blit(font.render(item.label, True, color), (52, y))
            y += 40

        if self._info:
            y += 10
            for line in self._info:
                surface.blit(font.render(line, True, pal["muted"]), (40, y))
                y += 32

        hint = font.render("Enter: Select  |  Esc: Back", True, pal["muted"])
        surface.blit(hint, (40, surface.get_height() - 50))


class PracticeScreen:
    """Runs one session: problem, feedback, hint, and finally the results."""

    def __init__(self, app: App, *, session: GameSession, mode: ModeConfig, level: Level) -> None:
        self._app = app
        self._session = session
        self._mode = mode
        self._input = ""
        self._keypad = app.prefs.get_keypad_mode()
        self._keypad_cursor = (0, 0)
        session.start_game(level, mode.id)

    def refresh(self) -> None:
        pass

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        state = self._session.state
        phase = state.phase

        if event.key == pygame.K_ESCAPE:
            if phase is SessionPhase.COMPLETE:
                self._app.pop_to_root()
            else:
                self._session.complete_session()
            return
        if phase is SessionPhase.COMPLETE:
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
                self._app.pop_to_root()
            return
        if phase in (SessionPhase.FEEDBACK_CORRECT, SessionPhase.FEEDBACK_REVEALED):
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
                self._input = ""
                self._session.next_problem()
            return

        if event.key == pygame.K_F2:
            self._keypad = not self._keypad
            self._app.prefs.save_keypad_mode(self._keypad)
        elif event.key == pygame.K_TAB:
            self._input = ""
            self._session.skip_problem()
        elif event.key == pygame.K_h:
            self._session.show_hint()
        elif self._keypad and event.key in (pygame.K_UP, pygame.K_DOWN, pygame.K_LEFT, pygame.K_RIGHT):
            self._move_keypad_cursor(event.key)
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            if self._keypad:
                self._press(self._keypad_label())
            else:
                self._press("OK")
        elif event.key == pygame.K_BACKSPACE:
            self._press("<")
        elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self._press("-")
        elif event.unicode and event.unicode.isdigit():
            self._press(event.unicode)

    def _press(self, label: str) -> None:
        if self._session.state.phase is SessionPhase.FEEDBACK_RETRY:
            self._session.retry_problem()
            self._input = ""
            if label == "OK":
                return
        if label == "OK":
            self._submit()
        elif label == "<":
            self._input = self._input[:-1]
        elif label == "-":
            if not self._input:
                self._input = "-"
        elif len(self._input) < MAX_INPUT_CHARS:
            self._input += label

    def _submit(self) -> None:
        try:
            answer: int | None = int(self._input) if self._input not in ("", "-") else None
        except ValueError:
            answer = None
        self._input = ""
        self._session.submit_answer(answer)

    def _keypad_label(self) -> str:
        row, col = self._keypad_cursor
        keys = KEYPAD_LAYOUT[row]
        return keys[min(col, len(keys) - 1)]

    def _move_keypad_cursor(self, key: int) -> None:
        row, col = self._keypad_cursor
        if key == pygame.K_UP:
            row = (row - 1) % len(KEYPAD_LAYOUT)
        elif key == pygame.K_DOWN:
            row = (row + 1) % len(KEYPAD_LAYOUT)
        elif key == pygame.K_LEFT:
            col = max(0, col - 1)
        else:
            col = min(len(KEYPAD_LAYOUT[row]) - 1, col + 1)
        self._keypad_cursor = (row, min(col, len(KEYPAD_LAYOUT[row]) - 1))

    def render(self, surface: pygame.Surface) -> None:
        pal = self._app.palette
        font = self._app.font
        surface.fill(pal["bg"])
        state = self._session.state

        if state.is_complete and state.session_stats is not None:
            lines = results_lines(state.session_stats)
            lines += ["", "Press Enter to return to the menu"]
            y = 40
            for line in lines:
                surface.blit(font.render(line, True, pal["text"]), (40, y))
                y += 32
            return

        problem = state.current_problem
        if problem is None:
            return

        header = f"{self._mode.display_name} - {state.level.label}"
        surface.blit(font.render(header, True, pal["text"]), (40, 30))
        progress = f"Problem {state.problem_number} of {state.total_problems}"
        if not state.is_finalized:
            progress += f"   Attempt {state.current_attempt} of {state.max_attempts}"
        surface.blit(font.render(progress, True, pal["muted"]), (40, 70))

        shown = with_answer(problem, self._input or "?")
        surface.blit(font.render(shown, True, pal["text"]), (60, 130))

        y = 180
        feedback = state.feedback
        if feedback.kind is not None:
            color = pal["good"] if feedback.kind is FeedbackKind.CORRECT else pal["bad"]
            surface.blit(font.render(feedback.message, True, color), (60, y))
            y += 40

        hint = self._session.current_hint()
        if hint is not None:
            for line in describe_hint(hint):
                surface.blit(font.render(line, True, pal["muted"]), (60, y))
                y += 30

        if self._keypad:
            self._render_keypad(surface, x=surface.get_width() - 260, y=120)

        footer = "Enter: Submit/Next  |  Tab: Skip  |  H: Hint  |  F2: Keypad  |  Esc: Finish"
        surface.blit(font.render(footer, True, pal["muted"]), (40, surface.get_height() - 50))

    def _render_keypad(self, surface: pygame.Surface, *, x: int, y: int) -> None:
        pal = self._app.palette
        font = self._app.font
        for r, keys in enumerate(KEYPAD_LAYOUT):
            for c, label in enumerate(keys):
                width = 200 if len(keys) == 1 else 60
                rect = pygame.Rect(x + c * 70, y + r * 50, width, 42)
                selected = (r, c) == self._keypad_cursor
                pygame.draw.rect(surface, pal["accent"] if selected else pal["muted"], rect, 0 if selected else 1)
                color = pal["accent_text"] if selected else pal["text"]
                text = font.render(label, True, color)
                surface.blit(text, text.get_rect(center=rect.center))


def describe_hint(hint: Hint) -> list[str]:
    """Text rendering of a hint visual; tiles are drawn as # and taken tiles as x."""

    if isinstance(hint, TilesHint):
        parts = ["#" * g.count for g in hint.groups]
        return ["Count the tiles:", "  +  ".join(parts)]
    if isinstance(hint, TakeAwayHint):
        return ["Take away the crossed tiles:", "x" * hint.taken + "#" * hint.remaining]
    if isinstance(hint, ArrayHint):
        return ["Count the dots:"] + ["o " * hint.cols for _ in range(hint.rows)]
    if isinstance(hint, GroupsHint):
        return [f"Share into groups of {hint.per_group}. How many groups?"] + [
            "o" * hint.per_group for _ in range(hint.groups)
        ]
    if isinstance(hint, NumberLineHint):
        stops = [hint.start]
        for step in hint.steps:
            stops.append(stops[-1] + step)
        return ["Hop along the number line:", " > ".join(str(s) for s in stops)]
    return []


def with_answer(problem: Problem, text: str) -> str:
    """Prompt with the placeholder filled in; equations get a trailing x = ...."""
    if "?" in problem.prompt:
        return problem.prompt.replace("?", text)
    return f"{problem.prompt},  x = {text}"


def results_lines(stats: SessionStats) -> list[str]:
    lines = [
        "Session Complete",
        "",
        f"Correct: {stats.correct} of {stats.total}",
        f"Accuracy: {stats.accuracy}%",
        f"Best streak: {stats.best_streak}",
        f"Avg time (correct): {stats.avg_time_ms / 1000.0:.1f} s",
    ]
    if stats.mistakes:
        lines.append("")
        lines.append("Review:")
        for m in stats.mistakes:
            given = "skipped" if m.user_answer is None else f"you said {m.user_answer}"
            lines.append(f"  {with_answer(m.problem, str(m.problem.answer))}  ({given})")
    return lines


def last_session_lines(prefs: PreferenceStore) -> list[str]:
    stats = prefs.get_last_session()
    if stats is None:
        return []
    return [f"Last session: {stats.correct}/{stats.total} correct, {stats.accuracy}%"]


def _new_seed() -> int:
    return random.SystemRandom().randint(1, 2**31 - 1)


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    store_path: Path | None = None,
    config: GameConfig | None = None,
) -> int:
    pygame.init()

    pygame.display.set_caption("MiniMath")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    font = pygame.font.Font(None, 36)
    clock = pygame.time.Clock()

    prefs = PreferenceStore(SqliteKeyValueStore(store_path or default_store_path()))
    app = App(surface=surface, font=font, prefs=prefs)
    cfg = config or GameConfig()
    real_clock = RealClock()

    def open_practice(mode: Mode, level: Level) -> None:
        session = GameSession(config=cfg, clock=real_clock, store=prefs, seed=_new_seed())
        mode_config = session.engine.registry.get_mode_config(mode)
        app.push(PracticeScreen(app, session=session, mode=mode_config, level=level))

    def open_levels(mode: ModeConfig) -> None:
        last_level = prefs.get_last_level()
        items = [MenuItem(lvl.label, lambda lvl=lvl: open_practice(mode.id, lvl)) for lvl in Level]
        items.append(MenuItem("Back", app.pop))
        app.push(
            MenuScreen(
                app,
                f"{mode.display_name}: choose a level",
                lambda: items,
                selected=0 if last_level is None else int(last_level) - 1,
            )
        )

    catalogue = build_default_registry().get_implemented_modes()
    last_mode = prefs.get_last_mode()
    mode_items = [MenuItem(f"{m.display_name}", lambda m=m: open_levels(m)) for m in catalogue]
    selected = next((i for i, m in enumerate(catalogue) if m.id is last_mode), 0)

    def main_items() -> list[MenuItem]:
        keypad = "On" if prefs.get_keypad_mode() else "Off"
        return [
            *mode_items,
            MenuItem(f"Keypad: {keypad}", lambda: prefs.save_keypad_mode(not prefs.get_keypad_mode())),
            MenuItem(f"Theme: {app.theme.title()}", app.toggle_theme),
            MenuItem("Quit", app.quit),
        ]

    app.push(
        MenuScreen(
            app,
            "MiniMath",
            main_items,
            is_root=True,
            info=lambda: last_session_lines(prefs),
            selected=selected,
        )
    )
    log.info("front-end started (store=%s)", store_path or default_store_path())

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            clock.tick(TARGET_FPS)
    finally:
        pygame.quit()

    return 0
