from __future__ import annotations

import os
from pathlib import Path


def _key(key: int, unicode: str = "") -> None:
    import pygame

    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": key, "unicode": unicode}))


def test_ui_smoke_play_and_finish_addition_session(tmp_path: Path) -> None:
    # Headless SDL for CI.
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    import pygame

    from minimath.app import run
    from minimath.core import Level, Mode
    from minimath.persistence import PreferenceStore, SqliteKeyValueStore

    store_path = tmp_path / "store.sqlite3"

    def inject(frame: int) -> None:
        # Main menu -> Addition -> Beginner -> type, skip, next, finish early
        if frame == 1:
            _key(pygame.K_RETURN)
        elif frame == 2:
            _key(pygame.K_RETURN)
        elif frame == 3:
            _key(pygame.K_5, "5")
        elif frame == 4:
            _key(pygame.K_BACKSPACE)
        elif frame == 5:
            _key(pygame.K_TAB)
        elif frame == 6:
            _key(pygame.K_RETURN)
        elif frame == 7:
            _key(pygame.K_ESCAPE)
        elif frame == 8:
            _key(pygame.K_RETURN)

    assert run(max_frames=15, event_injector=inject, store_path=store_path) == 0

    prefs = PreferenceStore(SqliteKeyValueStore(store_path))
    assert prefs.get_last_mode() is Mode.ADDITION
    assert prefs.get_last_level() is Level.BEGINNER
    stats = prefs.get_last_session()
    assert stats is not None
    assert stats.total == 1
    assert stats.correct == 0
    assert stats.mistakes[0].user_answer is None


def test_ui_smoke_toggle_theme_and_keypad(tmp_path: Path) -> None:
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    import pygame

    from minimath.app import run
    from minimath.persistence import PreferenceStore, SqliteKeyValueStore

    store_path = tmp_path / "store.sqlite3"

    def inject(frame: int) -> None:
        # Six modes, then Keypad, Theme, Quit.
        if frame == 1:
            _key(pygame.K_UP)
        elif frame == 2:
            _key(pygame.K_UP)
        elif frame == 3:
            _key(pygame.K_RETURN)
        elif frame == 4:
            _key(pygame.K_UP)
        elif frame == 5:
            _key(pygame.K_RETURN)
        elif frame == 6:
            _key(pygame.K_ESCAPE)

    assert run(max_frames=20, event_injector=inject, store_path=store_path) == 0

    prefs = PreferenceStore(SqliteKeyValueStore(store_path))
    assert prefs.get_theme() == "light"
    assert prefs.get_keypad_mode() is False
