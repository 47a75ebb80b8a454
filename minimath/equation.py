"""Single-unknown equations, solved for ``x``.

Each level picks one of two algebraic forms with equal probability:

* Level 1: ``x + b = c`` or ``a − x = c``
* Level 2: ``x × b = c`` or ``a ÷ x = c``
* Level 3: ``a × (x + b) = c`` or ``a × (x − b) = c``

Operands hold the known numbers in prompt order (``[b, c]``, ``[a, c]`` or
``[a, b, c]``) and ``answer`` is ``x``.  Every number, including ``x``, stays
in [0, 99].  The form used is recorded in ``meta["equation_form"]``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .core import DIVIDE, MINUS, TIMES, Level, Mode, Problem, SeededRng, make_problem, parse_level
from .sampling import DEFAULT_MAX_ATTEMPTS, SamplingPolicy, constrained_draw

MAX_VALUE = 99
MAX_BRACKET_OFFSET = 20


class EquationForm(str, Enum):
    X_PLUS_B = "x_plus_b_eq_c"
    A_MINUS_X = "a_minus_x_eq_c"
    X_TIMES_B = "x_times_b_eq_c"
    A_DIV_X = "a_div_x_eq_c"
    A_TIMES_X_PLUS_B = "a_times_x_plus_b"
    A_TIMES_X_MINUS_B = "a_times_x_minus_b"


def evaluate_lhs(form: EquationForm, operands: Sequence[int], x: int) -> int | None:
    """Evaluate the left-hand side for a given ``x``.

    Returns None when the expression has no integer value (division by zero
    or an inexact quotient).
    """

    if form is EquationForm.X_PLUS_B:
        return x + operands[0]
    if form is EquationForm.A_MINUS_X:
        return operands[0] - x
    if form is EquationForm.X_TIMES_B:
        return x * operands[0]
    if form is EquationForm.A_DIV_X:
        if x == 0 or operands[0] % x != 0:
            return None
        return operands[0] // x
    if form is EquationForm.A_TIMES_X_PLUS_B:
        return operands[0] * (x + operands[1])
    return operands[0] * (x - operands[1])


def is_solution(problem: Problem, x: int) -> bool:
    form = EquationForm(problem.meta["equation_form"])
    return evaluate_lhs(form, problem.operands, x) == problem.operands[-1]


@dataclass(frozen=True, slots=True)
class _Equation:
    form: EquationForm
    prompt: str
    operands: tuple[int, ...]
    answer: int


def _x_plus_b(x: int, b: int) -> _Equation:
    c = x + b
    return _Equation(EquationForm.X_PLUS_B, f"x + {b} = {c}", (b, c), x)


def _a_minus_x(a: int, x: int) -> _Equation:
    c = a - x
    return _Equation(EquationForm.A_MINUS_X, f"{a} {MINUS} x = {c}", (a, c), x)


def _x_times_b(x: int, b: int) -> _Equation:
    c = x * b
    return _Equation(EquationForm.X_TIMES_B, f"x {TIMES} {b} = {c}", (b, c), x)


def _a_div_x(x: int, c: int) -> _Equation:
    a = x * c
    return _Equation(EquationForm.A_DIV_X, f"{a} {DIVIDE} x = {c}", (a, c), x)


def _a_times_x_plus_b(a: int, x: int, b: int) -> _Equation:
    c = a * (x + b)
    return _Equation(EquationForm.A_TIMES_X_PLUS_B, f"{a} {TIMES} (x + {b}) = {c}", (a, b, c), x)


def _a_times_x_minus_b(a: int, x: int, b: int) -> _Equation:
    c = a * (x - b)
    return _Equation(EquationForm.A_TIMES_X_MINUS_B, f"{a} {TIMES} (x {MINUS} {b}) = {c}", (a, b, c), x)


_FALLBACKS: dict[Level, _Equation] = {
    Level.BEGINNER: _x_plus_b(7, 5),
    Level.INTERMEDIATE: _x_times_b(5, 4),
    Level.ADVANCED: _a_times_x_plus_b(3, 3, 2),
}


class EquationGenerator:
    def __init__(self, *, seed: int | None = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        self._rng = SeededRng(seed)
        self._max_attempts = max_attempts
        self._used: set[str] = set()

    def next_problem(self, level: int) -> Problem:
        lvl = parse_level(level)
        eq = constrained_draw(
            lambda: self._draw(lvl),
            lambda candidate: not self._should_reject(candidate, lvl),
            SamplingPolicy(fallback=lambda: _FALLBACKS[lvl], max_attempts=self._max_attempts),
        )

        self._used.add(_key(eq))

        return make_problem(
            prefix="eq",
            mode=Mode.EQUATION,
            level=lvl,
            prompt=eq.prompt,
            operands=eq.operands,
            answer=eq.answer,
            equation_form=eq.form.value,
        )

    def reset(self) -> None:
        self._used.clear()

    def _draw(self, level: Level) -> _Equation:
        rng = self._rng
        if level is Level.BEGINNER:
            if rng.coin():
                x = rng.randint(0, MAX_VALUE - 1)
                return _x_plus_b(x, rng.randint(1, MAX_VALUE - x))
            a = rng.randint(1, MAX_VALUE)
            return _a_minus_x(a, rng.randint(0, a))

        if level is Level.INTERMEDIATE:
            if rng.coin():
                x = rng.randint(1, 9)
                return _x_times_b(x, rng.randint(2, min(9, MAX_VALUE // x)))
            x = rng.randint(2, 9)
            return _a_div_x(x, rng.randint(1, MAX_VALUE // x))

        a = rng.randint(2, 9)
        if rng.coin():
            inner = rng.randint(1, MAX_VALUE // a)
            b = rng.randint(1, inner)
            return _a_times_x_plus_b(a, inner - b, b)
        inner = rng.randint(0, MAX_VALUE // a)
        b = rng.randint(1, min(MAX_VALUE - inner, MAX_BRACKET_OFFSET))
        return _a_times_x_minus_b(a, inner + b, b)

    def _should_reject(self, eq: _Equation, level: Level) -> bool:
        if _key(eq) in self._used:
            return True
        if any(n < 0 or n > MAX_VALUE for n in (*eq.operands, eq.answer)):
            return True
        if evaluate_lhs(eq.form, eq.operands, eq.answer) != eq.operands[-1]:
            return True
        if level is Level.INTERMEDIATE and 1 in eq.operands:
            return True
        if level is Level.ADVANCED:
            a, _, c = eq.operands
            if c % a != 0:
                return True
        return False


def _key(eq: _Equation) -> str:
    return f"{eq.form.value}:{eq.prompt}"
