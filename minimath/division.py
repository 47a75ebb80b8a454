from __future__ import annotations

from .core import DIVIDE, Level, Mode, Problem, SeededRng, make_problem, parse_level
from .sampling import DEFAULT_MAX_ATTEMPTS, SamplingPolicy, constrained_draw, problem_key

MAX_TENS_DIVIDEND = 9900

_FALLBACKS: dict[Level, tuple[int, int]] = {
    Level.BEGINNER: (12, 3),
    Level.INTERMEDIATE: (200, 20),
    Level.ADVANCED: (126, 3),
}


class DivisionGenerator:
    """Generates exact ``dividend ÷ divisor = ?`` problems.

    Problems are built backwards from ``quotient × divisor`` so the quotient is
    always an integer:

    * Level 1: divisor in [1, 9], quotient in [0, 9] (dividend <= 81).
    * Level 2: divisor a multiple of ten in [10, 90], quotient in [1, 99],
      dividend capped at 9900.
    * Level 3: three-digit dividend, divisor in [2, 9].
    """

    def __init__(self, *, seed: int | None = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        self._rng = SeededRng(seed)
        self._max_attempts = max_attempts
        self._used: set[str] = set()

    def next_problem(self, level: int) -> Problem:
        lvl = parse_level(level)
        dividend, divisor = constrained_draw(
            lambda: self._draw(lvl),
            lambda ops: not self._should_reject(ops, lvl),
            SamplingPolicy(fallback=lambda: _FALLBACKS[lvl], max_attempts=self._max_attempts),
        )

        self._used.add(problem_key((dividend, divisor), "÷"))

        return make_problem(
            prefix="div",
            mode=Mode.DIVISION,
            level=lvl,
            prompt=f"{dividend} {DIVIDE} {divisor} = ?",
            operands=(dividend, divisor),
            answer=dividend // divisor,
        )

    def reset(self) -> None:
        self._used.clear()

    def _draw(self, level: Level) -> tuple[int, int]:
        if level is Level.BEGINNER:
            divisor = self._rng.randint(1, 9)
            quotient = self._rng.randint(0, 9)
        elif level is Level.INTERMEDIATE:
            divisor = self._rng.randint(1, 9) * 10
            quotient = self._rng.randint(1, 99)
            if quotient * divisor > MAX_TENS_DIVIDEND:
                quotient = self._rng.randint(1, MAX_TENS_DIVIDEND // divisor)
        else:
            divisor = self._rng.randint(2, 9)
            quotient = self._rng.randint(-(-100 // divisor), 999 // divisor)
        return quotient * divisor, divisor

    def _should_reject(self, ops: tuple[int, int], level: Level) -> bool:
        dividend, divisor = ops
        if divisor == 0 or dividend % divisor != 0:
            return True
        if problem_key(ops, "÷") in self._used:
            return True
        quotient = dividend // divisor
        if level is Level.BEGINNER:
            return not (1 <= divisor <= 9 and 0 <= quotient <= 9)
        if level is Level.INTERMEDIATE:
            return divisor % 10 != 0 or not (10 <= divisor <= 90) or dividend > MAX_TENS_DIVIDEND
        return not (100 <= dividend <= 999 and 2 <= divisor <= 9)
