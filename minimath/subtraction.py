from __future__ import annotations

from .core import MINUS, Level, Mode, Problem, SeededRng, make_problem, parse_level
from .sampling import DEFAULT_MAX_ATTEMPTS, SamplingPolicy, constrained_draw, problem_key

_FALLBACKS: dict[Level, tuple[int, int]] = {
    Level.BEGINNER: (2, 1),
    Level.INTERMEDIATE: (12, 11),
    Level.ADVANCED: (11, 12),
}


class SubtractionGenerator:
    """Generates ``a − b = ?`` problems.

    Sign policy by level:

    * Level 1: a, b in [0, 9] with a >= b (non-negative result).
    * Level 2: a, b in [10, 99] with a >= b (non-negative result).
    * Level 3: a in [0, 98], b in [a + 1, 99] (strictly negative result).

    Across a session ``0 − 0`` never appears, a zero result (``a − a``)
    appears at most once, and at most one problem has a zero operand.
    Pairs are keyed in order, so ``7 − 3`` and ``3 − 7`` are distinct.
    """

    def __init__(self, *, seed: int | None = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        self._rng = SeededRng(seed)
        self._max_attempts = max_attempts
        self._used: set[str] = set()
        self._zero_result_used = False
        self._zero_operand_used = False

    def next_problem(self, level: int) -> Problem:
        lvl = parse_level(level)
        a, b = constrained_draw(
            lambda: self._draw(lvl),
            lambda ops: not self._should_reject(ops, lvl),
            SamplingPolicy(fallback=lambda: _FALLBACKS[lvl], max_attempts=self._max_attempts),
        )

        self._used.add(problem_key((a, b), "-"))
        if a == b:
            self._zero_result_used = True
        if a == 0 or b == 0:
            self._zero_operand_used = True

        return make_problem(
            prefix="sub",
            mode=Mode.SUBTRACTION,
            level=lvl,
            prompt=f"{a} {MINUS} {b} = ?",
            operands=(a, b),
            answer=a - b,
        )

    def reset(self) -> None:
        self._used.clear()
        self._zero_result_used = False
        self._zero_operand_used = False

    def _draw(self, level: Level) -> tuple[int, int]:
        if level is Level.BEGINNER:
            a = self._rng.randint(0, 9)
            return a, self._rng.randint(0, a)
        if level is Level.INTERMEDIATE:
            a = self._rng.randint(10, 99)
            return a, self._rng.randint(10, a)
        a = self._rng.randint(0, 98)
        return a, self._rng.randint(a + 1, 99)

    def _should_reject(self, ops: tuple[int, int], level: Level) -> bool:
        a, b = ops
        if level is Level.ADVANCED:
            if a >= b:
                return True
        elif a < b:
            return True
        if a == 0 and b == 0:
            return True
        if problem_key(ops, "-") in self._used:
            return True
        if a == b and self._zero_result_used:
            return True
        if (a == 0 or b == 0) and self._zero_operand_used:
            return True
        return False
