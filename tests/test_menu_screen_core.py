from __future__ import annotations

import os

# Use the dummy drivers before importing pygame or the application
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")


def test_menu_reads_its_sources_only_when_shown_or_selected() -> None:
    import pygame

    from minimath.app import App, MenuItem, MenuScreen
    from minimath.persistence import MemoryKeyValueStore, PreferenceStore

    pygame.init()
    try:
        app = App(
            surface=pygame.Surface((320, 240)),
            font=pygame.font.Font(None, 24),
            prefs=PreferenceStore(MemoryKeyValueStore()),
        )
        calls = {"items": 0, "info": 0}

        def items() -> list[MenuItem]:
            calls["items"] += 1
            return [MenuItem("Stay", lambda: None)]

        def info() -> list[str]:
            calls["info"] += 1
            return ["Last session: 9/10 correct, 90%"]

        root = MenuScreen(app, "Menu", items, is_root=True, info=info)
        app.push(root)
        for _ in range(30):
            app.render()
        assert calls == {"items": 1, "info": 1}

        app.push(MenuScreen(app, "Child", lambda: [MenuItem("Back", app.pop)]))
        app.render()
        app.pop()
        assert calls == {"items": 2, "info": 2}

        root.handle_event(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_RETURN, "unicode": ""}))
        assert calls == {"items": 3, "info": 3}

        root.handle_event(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_DOWN, "unicode": ""}))
        app.render()
        assert calls == {"items": 3, "info": 3}
    finally:
        pygame.quit()
