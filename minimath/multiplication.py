from __future__ import annotations

from .core import TIMES, Level, Mode, Problem, SeededRng, make_problem, parse_level
from .sampling import DEFAULT_MAX_ATTEMPTS, SamplingPolicy, constrained_draw, problem_key

TEN_MULTIPLES: tuple[int, ...] = (10, 20, 30, 40, 50, 60, 70, 80, 90)

_FALLBACKS: dict[Level, tuple[int, int]] = {
    Level.BEGINNER: (2, 3),
    Level.INTERMEDIATE: (20, 30),
    Level.ADVANCED: (2, 11),
}


class MultiplicationGenerator:
    """Generates ``a × b = ?`` problems.

    * Level 1: single-digit factors; at most one problem with a factor of 0
      and at most one with a factor of 1 per session.
    * Level 2: about half the time two multiples of ten, otherwise a digit in
      [2, 9] crossed with a multiple of ten; at most one problem with a
      factor of 10 per session.
    * Level 3: a digit in [2, 9] crossed with a two-digit number, in random
      order.
    """

    def __init__(self, *, seed: int | None = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        self._rng = SeededRng(seed)
        self._max_attempts = max_attempts
        self._used: set[str] = set()
        self._zero_factor_used = False
        self._one_factor_used = False
        self._ten_factor_used = False

    def next_problem(self, level: int) -> Problem:
        lvl = parse_level(level)
        a, b = constrained_draw(
            lambda: self._draw(lvl),
            lambda ops: not self._should_reject(ops, lvl),
            SamplingPolicy(fallback=lambda: _FALLBACKS[lvl], max_attempts=self._max_attempts),
        )

        self._used.add(problem_key((a, b), "×"))
        if 0 in (a, b):
            self._zero_factor_used = True
        if 1 in (a, b):
            self._one_factor_used = True
        if 10 in (a, b):
            self._ten_factor_used = True

        return make_problem(
            prefix="mul",
            mode=Mode.MULTIPLICATION,
            level=lvl,
            prompt=f"{a} {TIMES} {b} = ?",
            operands=(a, b),
            answer=a * b,
        )

    def reset(self) -> None:
        self._used.clear()
        self._zero_factor_used = False
        self._one_factor_used = False
        self._ten_factor_used = False

    def _draw(self, level: Level) -> tuple[int, int]:
        if level is Level.BEGINNER:
            return self._rng.randint(0, 9), self._rng.randint(0, 9)
        if level is Level.INTERMEDIATE:
            if self._rng.coin():
                return self._rng.choice(TEN_MULTIPLES), self._rng.choice(TEN_MULTIPLES)
            return self._shuffled(self._rng.randint(2, 9), self._rng.choice(TEN_MULTIPLES))
        return self._shuffled(self._rng.randint(2, 9), self._rng.randint(10, 99))

    def _shuffled(self, x: int, y: int) -> tuple[int, int]:
        return (x, y) if self._rng.coin() else (y, x)

    def _should_reject(self, ops: tuple[int, int], level: Level) -> bool:
        if problem_key(ops, "×") in self._used:
            return True
        if level is Level.BEGINNER:
            if 0 in ops and self._zero_factor_used:
                return True
            if 1 in ops and self._one_factor_used:
                return True
        elif level is Level.INTERMEDIATE:
            if 10 in ops and self._ten_factor_used:
                return True
        return False
