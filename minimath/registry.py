from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .addition import AdditionGenerator
from .core import Mode, Problem, ProblemGenerator, SeededRng, UnknownModeError, parse_mode
from .division import DivisionGenerator
from .equation import EquationGenerator
from .hints import Hint, array_hint, beginner_only, first_of, groups_hint, number_line_hint, take_away_hint, tiles_hint
from .mixed import MixedGenerator
from .multiplication import MultiplicationGenerator
from .sampling import DEFAULT_MAX_ATTEMPTS
from .subtraction import SubtractionGenerator

HintPredicate = Callable[[Problem], bool]
HintBuilder = Callable[[Problem], Hint | None]
GeneratorFactory = Callable[..., ProblemGenerator]


@dataclass(frozen=True, slots=True)
class ModeRules:
    allow_negatives: bool = False
    integer_only: bool = True


@dataclass(frozen=True, slots=True)
class ModeConfig:
    id: Mode
    display_name: str
    icon: str
    generator: ProblemGenerator
    hint_eligible: HintPredicate | None = None
    hint_visual: HintBuilder | None = None
    rules: ModeRules = field(default_factory=ModeRules)
    implemented: bool = True

    def is_hint_eligible(self, problem: Problem) -> bool:
        return self.hint_eligible is not None and self.hint_eligible(problem)


class ModeRegistry:
    """Read-only lookup of mode configurations.

    A registry owns its generator instances; build one per session owner so
    generator bookkeeping never leaks between sessions.
    """

    def __init__(self, configs: Iterable[ModeConfig]) -> None:
        self._configs: dict[Mode, ModeConfig] = {}
        for config in configs:
            if config.id in self._configs:
                raise ValueError(f"duplicate mode configuration: {config.id.value}")
            self._configs[config.id] = config

    def get_mode_config(self, mode: Mode | str) -> ModeConfig:
        config = self._configs.get(parse_mode(mode))
        if config is None:
            raise UnknownModeError(f"Mode configuration not found for: {mode!r}")
        return config

    def get_available_modes(self) -> list[ModeConfig]:
        return list(self._configs.values())

    def get_implemented_modes(self) -> list[ModeConfig]:
        return [c for c in self._configs.values() if c.implemented]

    def is_hint_eligible(self, mode: Mode | str, problem: Problem) -> bool:
        return self.get_mode_config(mode).is_hint_eligible(problem)

    def build_hint(self, problem: Problem) -> Hint | None:
        """Hint visual for ``problem``, chosen by the problem's own mode."""

        config = self._configs.get(problem.mode)
        if config is None or config.hint_visual is None:
            return None
        return config.hint_visual(problem)


_DEFAULT_MODES: tuple[tuple[Mode, str, str, GeneratorFactory, HintPredicate | None, HintBuilder | None, bool], ...] = (
    (Mode.ADDITION, "Addition", "➕", AdditionGenerator, beginner_only, first_of(tiles_hint, number_line_hint), False),
    (Mode.SUBTRACTION, "Subtraction", "➖", SubtractionGenerator, beginner_only, first_of(take_away_hint, number_line_hint), True),
    (Mode.MULTIPLICATION, "Multiplication", "✖️", MultiplicationGenerator, beginner_only, array_hint, False),
    (Mode.DIVISION, "Division", "➗", DivisionGenerator, beginner_only, groups_hint, False),
    (Mode.MIXED, "Mixed", "🎲", MixedGenerator, beginner_only, None, True),
    (Mode.EQUATION, "Equations", "⚖️", EquationGenerator, None, None, False),
)


def build_default_registry(*, seed: int | None = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> ModeRegistry:
    """Registry with a fresh generator for every mode.

    Each generator gets its own seed derived from ``seed``.
    """

    rng = SeededRng(seed)
    configs = []
    for mode, name, icon, factory, eligible, visual, negatives in _DEFAULT_MODES:
        configs.append(
            ModeConfig(
                id=mode,
                display_name=name,
                icon=icon,
                generator=factory(seed=rng.derive_seed(), max_attempts=max_attempts),
                hint_eligible=eligible,
                hint_visual=visual,
                rules=ModeRules(allow_negatives=negatives),
            )
        )
    return ModeRegistry(configs)
