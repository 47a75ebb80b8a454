from __future__ import annotations

from .addition import AdditionGenerator
from .core import Problem, ProblemGenerator, SeededRng, parse_level
from .division import DivisionGenerator
from .multiplication import MultiplicationGenerator
from .sampling import DEFAULT_MAX_ATTEMPTS
from .subtraction import SubtractionGenerator


class MixedGenerator:
    """Dispatches each call to one of the four basic-operation generators.

    The pick is uniform.  Uniqueness and fairness come from the delegates
    themselves; the returned problem keeps the delegate's mode.
    """

    def __init__(self, *, seed: int | None = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        self._rng = SeededRng(seed)
        self._delegates: tuple[ProblemGenerator, ...] = (
            AdditionGenerator(seed=self._rng.derive_seed(), max_attempts=max_attempts),
            SubtractionGenerator(seed=self._rng.derive_seed(), max_attempts=max_attempts),
            MultiplicationGenerator(seed=self._rng.derive_seed(), max_attempts=max_attempts),
            DivisionGenerator(seed=self._rng.derive_seed(), max_attempts=max_attempts),
        )

    @property
    def delegates(self) -> tuple[ProblemGenerator, ...]:
        return self._delegates

    def next_problem(self, level: int) -> Problem:
        lvl = parse_level(level)
        return self._rng.choice(self._delegates).next_problem(lvl)

    def reset(self) -> None:
        for generator in self._delegates:
            generator.reset()
