from __future__ import annotations

import pytest

from minimath.core import Mode
from minimath.equation import EquationForm, EquationGenerator, evaluate_lhs, is_solution

LEVEL_FORMS = {
    1: {EquationForm.X_PLUS_B, EquationForm.A_MINUS_X},
    2: {EquationForm.X_TIMES_B, EquationForm.A_DIV_X},
    3: {EquationForm.A_TIMES_X_PLUS_B, EquationForm.A_TIMES_X_MINUS_B},
}


@pytest.mark.parametrize("level", [1, 2, 3])
def test_answers_solve_their_equations(level: int) -> None:
    gen = EquationGenerator(seed=31)
    forms = set()
    for _ in range(40):
        p = gen.next_problem(level)
        form = EquationForm(p.meta["equation_form"])
        forms.add(form)
        assert p.mode is Mode.EQUATION
        assert "x" in p.prompt
        assert is_solution(p, p.answer)
        assert all(0 <= n <= 99 for n in (*p.operands, p.answer))
    assert forms == LEVEL_FORMS[level]


def test_intermediate_never_uses_one_as_operand() -> None:
    gen = EquationGenerator(seed=5)
    for _ in range(30):
        assert 1 not in gen.next_problem(2).operands


def test_advanced_right_side_divisible_by_multiplier() -> None:
    gen = EquationGenerator(seed=5)
    for _ in range(30):
        a, b, c = gen.next_problem(3).operands
        assert c % a == 0
        assert b >= 1


def test_prompts_do_not_repeat() -> None:
    gen = EquationGenerator(seed=17)
    prompts = [gen.next_problem(1).prompt for _ in range(30)]
    assert len(set(prompts)) == 30


def test_evaluate_lhs_handles_inexact_division() -> None:
    assert evaluate_lhs(EquationForm.A_DIV_X, (12, 4), 3) == 4
    assert evaluate_lhs(EquationForm.A_DIV_X, (12, 4), 5) is None
    assert evaluate_lhs(EquationForm.A_DIV_X, (12, 4), 0) is None
    assert evaluate_lhs(EquationForm.A_TIMES_X_MINUS_B, (3, 2, 15), 7) == 15


def test_rejected_draws_fall_back_to_fixed_equations(monkeypatch: pytest.MonkeyPatch) -> None:
    gen = EquationGenerator(seed=1, max_attempts=5)
    monkeypatch.setattr(gen, "_should_reject", lambda eq, level: True)

    fallbacks = [gen.next_problem(level) for level in (1, 2, 3)]

    assert [(p.prompt, p.answer) for p in fallbacks] == [
        ("x + 5 = 12", 7),
        ("x × 4 = 20", 5),
        ("3 × (x + 2) = 15", 3),
    ]
    assert all(is_solution(p, p.answer) for p in fallbacks)
