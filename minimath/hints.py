"""Hint visuals as plain data.

These builders describe what a hint shows for a beginner problem; drawing it
is left to the front-end.  Each returns None when the problem is too large to
visualise sensibly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .core import Level, Mode, Problem

ADD_EMOJIS = ("🟦", "🟨")
TAKE_AWAY_EMOJI = "🔳"
MAX_VISUAL_ITEMS = 81
MAX_ARRAY_SIDE = 9


@dataclass(frozen=True, slots=True)
class TileGroup:
    emoji: str
    count: int


@dataclass(frozen=True, slots=True)
class TilesHint:
    groups: tuple[TileGroup, ...]
    total: int


@dataclass(frozen=True, slots=True)
class TakeAwayHint:
    start: int
    taken: int
    remaining: int


@dataclass(frozen=True, slots=True)
class ArrayHint:
    rows: int
    cols: int


@dataclass(frozen=True, slots=True)
class GroupsHint:
    groups: int
    per_group: int


@dataclass(frozen=True, slots=True)
class NumberLineHint:
    start: int
    steps: tuple[int, ...]
    end: int


Hint = TilesHint | TakeAwayHint | ArrayHint | GroupsHint | NumberLineHint


def tiles_hint(problem: Problem) -> TilesHint | None:
    a, b = problem.operands[:2]
    if a + b > MAX_VISUAL_ITEMS:
        return None
    return TilesHint(
        groups=(TileGroup(ADD_EMOJIS[0], a), TileGroup(ADD_EMOJIS[1], b)),
        total=a + b,
    )


def take_away_hint(problem: Problem) -> TakeAwayHint | None:
    a, b = problem.operands[:2]
    if b > a or a > MAX_VISUAL_ITEMS:
        return None
    return TakeAwayHint(start=a, taken=b, remaining=a - b)


def array_hint(problem: Problem) -> ArrayHint | None:
    rows, cols = problem.operands[:2]
    if rows > MAX_ARRAY_SIDE or cols > MAX_ARRAY_SIDE or rows * cols > MAX_VISUAL_ITEMS:
        return None
    return ArrayHint(rows=rows, cols=cols)


def groups_hint(problem: Problem) -> GroupsHint | None:
    dividend, divisor = problem.operands[:2]
    if divisor == 0 or dividend > MAX_VISUAL_ITEMS or divisor > MAX_ARRAY_SIDE:
        return None
    return GroupsHint(groups=dividend // divisor, per_group=divisor)


def number_line_hint(problem: Problem) -> NumberLineHint | None:
    """Unit jumps from the first operand to the answer."""

    a, b = problem.operands[:2]
    if problem.mode is Mode.ADDITION:
        step = 1
    elif problem.mode is Mode.SUBTRACTION:
        step = -1
    else:
        return None
    if abs(b) > MAX_ARRAY_SIDE:
        return None
    return NumberLineHint(start=a, steps=(step,) * b, end=problem.answer)


def beginner_only(problem: Problem) -> bool:
    return problem.level is Level.BEGINNER


def first_of(*builders: Callable[[Problem], Hint | None]) -> Callable[[Problem], Hint | None]:
    """Builder that returns the first visual any of ``builders`` can draw."""

    def build(problem: Problem) -> Hint | None:
        for builder in builders:
            hint = builder(problem)
            if hint is not None:
                return hint
        return None

    return build
