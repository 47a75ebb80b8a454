from __future__ import annotations

import math
import random
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Protocol, TypeVar
from uuid import uuid4

T = TypeVar("T")

# Canonical operator glyphs used in every prompt.
MINUS = "−"
TIMES = "×"
DIVIDE = "÷"


class InvalidLevelError(ValueError):
    """Raised when a difficulty level outside 1..3 is requested."""


class UnknownModeError(LookupError):
    """Raised when a mode identifier is not registered."""


class Level(IntEnum):
    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3

    @property
    def label(self) -> str:
        return self.name.title()


class Mode(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"
    MIXED = "mixed"
    EQUATION = "equation"


def parse_level(value: object) -> Level:
    """Coerce ``value`` into a Level, failing fast on anything else."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidLevelError(f"Invalid level: {value!r}")
    try:
        return Level(value)
    except ValueError:
        raise InvalidLevelError(f"Invalid level: {value!r}") from None


def parse_mode(value: object) -> Mode:
    if isinstance(value, Mode):
        return value
    try:
        return Mode(str(value))
    except ValueError:
        raise UnknownModeError(f"Mode configuration not found for: {value!r}") from None


def new_problem_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


@dataclass(frozen=True, slots=True)
class Problem:
    """One generated question. Never mutated after creation."""

    id: str
    mode: Mode
    level: Level
    prompt: str
    operands: tuple[int, ...]
    answer: int
    meta: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "mode": self.mode.value,
            "level": int(self.level),
            "prompt": self.prompt,
            "operands": list(self.operands),
            "answer": self.answer,
            "meta": dict(self.meta),
        }

    @classmethod
    def from_dict(cls, data: object) -> "Problem":
        if not isinstance(data, dict):
            raise TypeError("problem payload must be an object")
        meta = data.get("meta") or {}
        if not isinstance(meta, dict):
            raise TypeError("problem meta must be an object")
        return cls(
            id=str(data["id"]),
            mode=parse_mode(data["mode"]),
            level=parse_level(data["level"]),
            prompt=str(data["prompt"]),
            operands=tuple(int(v) for v in data["operands"]),
            answer=int(data["answer"]),
            meta=dict(meta),
        )


def make_problem(
    *,
    prefix: str,
    mode: Mode,
    level: Level,
    prompt: str,
    operands: Sequence[int],
    answer: int,
    **meta: Any,
) -> Problem:
    return Problem(
        id=new_problem_id(prefix),
        mode=mode,
        level=level,
        prompt=prompt,
        operands=tuple(int(v) for v in operands),
        answer=int(answer),
        meta={"generated_at": time.time(), **meta},
    )


class ProblemGenerator(Protocol):
    """Session-scoped generator of problems for one mode."""

    def next_problem(self, level: int) -> Problem:
        ...

    def reset(self) -> None:
        """Forget all uniqueness/fairness bookkeeping for a new session."""
        ...


class SeededRng:
    """Simple seeded RNG wrapper to keep deterministic streams explicit."""

    def __init__(self, seed: int | None) -> None:
        self._rng = random.Random(seed)

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)

    def coin(self) -> bool:
        return self._rng.random() < 0.5

    def derive_seed(self) -> int:
        return self._rng.randint(1, 2**31 - 1)


def round_half_up(x: float) -> int:
    # Matches the rounding used for stored percentages and averages.
    return int(math.floor(x + 0.5))
