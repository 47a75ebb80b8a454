from __future__ import annotations

import logging
import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Put the repository root (parent of this package) on ``sys.path``.

    Needed when this file is run directly as a script rather than with
    ``python -m minimath``.
    """
    repo_root_str = str(Path(__file__).resolve().parent.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


try:
    from .app import run  # type: ignore[attr-defined]
    from .config import log_level_from_env  # type: ignore[attr-defined]
except ImportError:
    _ensure_repo_root_on_path()
    from minimath.app import run  # type: ignore[attr-defined]
    from minimath.config import log_level_from_env  # type: ignore[attr-defined]


def main() -> int:
    """Entry point for running MiniMath from the command line."""
    logging.basicConfig(level=log_level_from_env())
    return run()


if __name__ == "__main__":
    raise SystemExit(main())
