from __future__ import annotations

from .core import Level, Mode, Problem, SeededRng, make_problem, parse_level
from .sampling import DEFAULT_MAX_ATTEMPTS, SamplingPolicy, constrained_draw, problem_key

_RANGES: dict[Level, tuple[int, int]] = {
    Level.BEGINNER: (0, 9),
    Level.INTERMEDIATE: (10, 99),
    Level.ADVANCED: (100, 999),
}

_FALLBACKS: dict[Level, tuple[int, int]] = {
    Level.BEGINNER: (2, 3),
    Level.INTERMEDIATE: (12, 13),
    Level.ADVANCED: (112, 113),
}

BEGINNER_MAX_SUM = 18


class AdditionGenerator:
    """Generates ``a + b = ?`` problems.

    Level 1 uses single digits, never ``0 + 0`` and at most one problem with
    a zero operand per session.  Levels 2 and 3 use two- and three-digit
    operands.  A pair never repeats within a session in either order.
    """

    def __init__(self, *, seed: int | None = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        self._rng = SeededRng(seed)
        self._max_attempts = max_attempts
        self._used: set[str] = set()
        self._zero_operand_used = False

    def next_problem(self, level: int) -> Problem:
        lvl = parse_level(level)
        a, b = constrained_draw(
            lambda: self._draw(lvl),
            lambda ops: not self._should_reject(ops, lvl),
            SamplingPolicy(fallback=lambda: _FALLBACKS[lvl], max_attempts=self._max_attempts),
        )

        self._used.add(problem_key((a, b), "+"))
        if a == 0 or b == 0:
            self._zero_operand_used = True

        return make_problem(
            prefix="add",
            mode=Mode.ADDITION,
            level=lvl,
            prompt=f"{a} + {b} = ?",
            operands=(a, b),
            answer=a + b,
        )

    def reset(self) -> None:
        self._used.clear()
        self._zero_operand_used = False

    def _draw(self, level: Level) -> tuple[int, int]:
        lo, hi = _RANGES[level]
        return self._rng.randint(lo, hi), self._rng.randint(lo, hi)

    def _should_reject(self, ops: tuple[int, int], level: Level) -> bool:
        a, b = ops
        if problem_key(ops, "+") in self._used:
            return True
        if level is Level.BEGINNER:
            if a == 0 and b == 0:
                return True
            if a + b > BEGINNER_MAX_SUM:
                return True
            if (a == 0 or b == 0) and self._zero_operand_used:
                return True
        return False
