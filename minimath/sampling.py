"""Shared rejection-sampling helpers for the problem generators.

Every generator draws candidate operands under level-specific range rules and
redraws until a candidate passes its hard rules and its session-fairness
rules.  ``constrained_draw`` bounds that loop: after ``max_attempts`` rejected
candidates it returns the policy's fixed fallback instead of looping forever.
The fallback always satisfies the arithmetic rules of its level; only the
uniqueness guarantee is relaxed for that one problem.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

log = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1000

COMMUTATIVE_OPS = frozenset({"+", "×"})


@dataclass(frozen=True, slots=True)
class SamplingPolicy(Generic[T]):
    fallback: Callable[[], T]
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")


def constrained_draw(
    draw: Callable[[], T],
    accept: Callable[[T], bool],
    policy: SamplingPolicy[T],
) -> T:
    """Return the first drawn candidate that ``accept`` approves.

    Falls back to ``policy.fallback()`` once ``policy.max_attempts`` draws
    have been rejected.
    """

    for _ in range(policy.max_attempts):
        candidate = draw()
        if accept(candidate):
            return candidate
    log.debug("no acceptable candidate after %d draws; using fallback", policy.max_attempts)
    return policy.fallback()


def problem_key(operands: Iterable[int], op: str) -> str:
    """Session de-duplication key; operand order is ignored for + and ×."""

    values = list(operands)
    if op in COMMUTATIVE_OPS:
        values.sort()
    return op.join(str(v) for v in values)
