from __future__ import annotations

from minimath.core import MINUS, Mode
from minimath.subtraction import SubtractionGenerator


def test_generator_determinism_same_seed_same_sequence() -> None:
    gen1 = SubtractionGenerator(seed=77)
    gen2 = SubtractionGenerator(seed=77)

    assert [gen1.next_problem(1).prompt for _ in range(10)] == [
        gen2.next_problem(1).prompt for _ in range(10)
    ]


def test_beginner_results_are_non_negative_and_fair() -> None:
    for seed in range(40):
        gen = SubtractionGenerator(seed=seed)
        zero_results = 0
        zero_operands = 0
        seen = set()
        for _ in range(10):
            p = gen.next_problem(1)
            a, b = p.operands
            assert 0 <= b <= a <= 9
            assert (a, b) != (0, 0)
            assert p.answer == a - b >= 0
            assert p.prompt == f"{a} {MINUS} {b} = ?"
            assert p.mode is Mode.SUBTRACTION
            seen.add((a, b))
            zero_results += a == b
            zero_operands += 0 in (a, b)
        assert len(seen) == 10
        assert zero_results <= 1
        assert zero_operands <= 1


def test_intermediate_uses_two_digit_operands() -> None:
    gen = SubtractionGenerator(seed=3)
    for _ in range(30):
        p = gen.next_problem(2)
        a, b = p.operands
        assert 10 <= b <= a <= 99
        assert p.answer == a - b


def test_advanced_results_are_strictly_negative() -> None:
    gen = SubtractionGenerator(seed=3)
    for _ in range(30):
        p = gen.next_problem(3)
        a, b = p.operands
        assert 0 <= a < b <= 99
        assert p.answer < 0
        assert p.answer == a - b


def test_pairs_are_ordered_for_deduplication() -> None:
    gen = SubtractionGenerator(seed=11)
    pairs = [gen.next_problem(2).operands for _ in range(25)]
    assert len(set(pairs)) == len(pairs)
