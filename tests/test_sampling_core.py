from __future__ import annotations

import pytest

from minimath.sampling import SamplingPolicy, constrained_draw, problem_key


def test_constrained_draw_returns_first_accepted_candidate() -> None:
    draws = iter(range(100))
    value = constrained_draw(
        lambda: next(draws),
        lambda v: v >= 3,
        SamplingPolicy(fallback=lambda: -1, max_attempts=10),
    )
    assert value == 3


def test_constrained_draw_uses_fallback_after_cap() -> None:
    calls = 0

    def draw() -> int:
        nonlocal calls
        calls += 1
        return calls

    value = constrained_draw(draw, lambda v: False, SamplingPolicy(fallback=lambda: 42, max_attempts=25))
    assert value == 42
    assert calls == 25


def test_policy_rejects_non_positive_cap() -> None:
    with pytest.raises(ValueError):
        SamplingPolicy(fallback=lambda: 0, max_attempts=0)


def test_problem_key_is_commutative_only_for_plus_and_times() -> None:
    assert problem_key((3, 5), "+") == problem_key((5, 3), "+")
    assert problem_key((3, 5), "×") == problem_key((5, 3), "×")
    assert problem_key((5, 3), "-") != problem_key((3, 5), "-")
    assert problem_key((12, 3), "÷") != problem_key((3, 12), "÷")
