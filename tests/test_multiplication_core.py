from __future__ import annotations

from minimath.core import TIMES, Mode
from minimath.multiplication import TEN_MULTIPLES, MultiplicationGenerator
from minimath.sampling import problem_key


def test_generator_determinism_same_seed_same_sequence() -> None:
    gen1 = MultiplicationGenerator(seed=8)
    gen2 = MultiplicationGenerator(seed=8)

    assert [gen1.next_problem(3).operands for _ in range(15)] == [
        gen2.next_problem(3).operands for _ in range(15)
    ]


def test_beginner_caps_zero_and_one_factors() -> None:
    for seed in range(40):
        gen = MultiplicationGenerator(seed=seed)
        problems = [gen.next_problem(1) for _ in range(10)]
        assert sum(0 in p.operands for p in problems) <= 1
        assert sum(1 in p.operands for p in problems) <= 1
        assert len({problem_key(p.operands, "×") for p in problems}) == 10
        for p in problems:
            a, b = p.operands
            assert 0 <= a <= 9 and 0 <= b <= 9
            assert p.answer == a * b
            assert p.prompt == f"{a} {TIMES} {b} = ?"
            assert p.mode is Mode.MULTIPLICATION


def test_intermediate_involves_multiples_of_ten() -> None:
    for seed in range(20):
        gen = MultiplicationGenerator(seed=seed)
        problems = [gen.next_problem(2) for _ in range(10)]
        assert sum(10 in p.operands for p in problems) <= 1
        for p in problems:
            a, b = p.operands
            assert a in TEN_MULTIPLES or b in TEN_MULTIPLES
            others = [v for v in (a, b) if v not in TEN_MULTIPLES]
            assert all(2 <= v <= 9 for v in others)
            assert p.answer == a * b


def test_advanced_pairs_digit_with_two_digit_number() -> None:
    gen = MultiplicationGenerator(seed=4)
    orders = set()
    for _ in range(40):
        a, b = gen.next_problem(3).operands
        small, large = sorted((a, b))
        assert 2 <= small <= 9
        assert 10 <= large <= 99
        orders.add(a < b)
    assert orders == {True, False}
