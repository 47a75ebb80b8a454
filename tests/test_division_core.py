from __future__ import annotations

import pytest

from minimath.core import DIVIDE, Mode
from minimath.division import MAX_TENS_DIVIDEND, DivisionGenerator


@pytest.mark.parametrize("level", [1, 2, 3])
def test_quotients_are_always_exact(level: int) -> None:
    gen = DivisionGenerator(seed=21)
    for _ in range(30):
        p = gen.next_problem(level)
        dividend, divisor = p.operands
        assert divisor != 0
        assert dividend % divisor == 0
        assert p.answer == dividend // divisor
        assert p.prompt == f"{dividend} {DIVIDE} {divisor} = ?"
        assert p.mode is Mode.DIVISION


def test_beginner_ranges() -> None:
    gen = DivisionGenerator(seed=2)
    for _ in range(20):
        p = gen.next_problem(1)
        dividend, divisor = p.operands
        assert 1 <= divisor <= 9
        assert 0 <= p.answer <= 9
        assert dividend <= 81


def test_intermediate_divides_by_tens() -> None:
    gen = DivisionGenerator(seed=2)
    for _ in range(40):
        dividend, divisor = gen.next_problem(2).operands
        assert divisor in range(10, 100, 10)
        assert 1 <= dividend // divisor <= 99
        assert dividend <= MAX_TENS_DIVIDEND


def test_advanced_uses_three_digit_dividends() -> None:
    gen = DivisionGenerator(seed=2)
    for _ in range(40):
        dividend, divisor = gen.next_problem(3).operands
        assert 100 <= dividend <= 999
        assert 2 <= divisor <= 9


def test_no_repeats_within_session() -> None:
    gen = DivisionGenerator(seed=13)
    pairs = [gen.next_problem(2).operands for _ in range(30)]
    assert len(set(pairs)) == 30
