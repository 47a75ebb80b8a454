"""Session state machine for one fixed-length practice session.

``SessionEngine.reduce`` is a pure ``(state, action) -> state`` transition:
it never mutates the incoming ``GameState`` and returns the very same object
when an action does not apply (for example ``SubmitAnswer`` before
``StartGame``), so a misbehaving front-end cannot break a session.  The only
side effects are timestamp snapshots from the injected clock, draws from the
session's generator and the best-effort save of the final statistics.

``GameSession`` wraps an engine and the current state behind one method per
action for front-ends that do not want to manage state themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar

from .clock import Clock, RealClock
from .config import GameConfig
from .core import Level, Mode, Problem, ProblemGenerator, SeededRng, parse_level, parse_mode, round_half_up
from .hints import Hint
from .persistence import PreferenceStore
from .registry import ModeRegistry, build_default_registry
from .results import Result, SessionStats, calculate_session_stats

log = logging.getLogger(__name__)

CORRECT_MESSAGES: tuple[str, ...] = (
    "Great job! 🎉",
    "Yes, nice work!",
    "Awesome! 🌟",
    "Perfect! ⭐",
    "Excellent! 🎯",
)
RETRY_MESSAGE = "Almost there, try once more!"
INCORRECT_MESSAGE = "Not quite right, but keep trying!"


class FeedbackKind(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    RETRY = "retry"
    REVEALED = "revealed"


@dataclass(frozen=True, slots=True)
class NoFeedback:
    kind: ClassVar[FeedbackKind | None] = None
    message: ClassVar[str] = ""


@dataclass(frozen=True, slots=True)
class CorrectFeedback:
    kind: ClassVar[FeedbackKind] = FeedbackKind.CORRECT
    message: str


@dataclass(frozen=True, slots=True)
class IncorrectFeedback:
    kind: ClassVar[FeedbackKind] = FeedbackKind.INCORRECT
    message: str = INCORRECT_MESSAGE


@dataclass(frozen=True, slots=True)
class RetryFeedback:
    kind: ClassVar[FeedbackKind] = FeedbackKind.RETRY
    message: str = RETRY_MESSAGE


@dataclass(frozen=True, slots=True)
class RevealedFeedback:
    kind: ClassVar[FeedbackKind] = FeedbackKind.REVEALED
    answer: int

    @property
    def message(self) -> str:
        return f"The answer is {self.answer}. You'll get it next time!"


Feedback = NoFeedback | CorrectFeedback | IncorrectFeedback | RetryFeedback | RevealedFeedback

NO_FEEDBACK = NoFeedback()


@dataclass(frozen=True, slots=True)
class StartGame:
    level: int
    mode: Mode | str


@dataclass(frozen=True, slots=True)
class SubmitAnswer:
    answer: int | None


@dataclass(frozen=True, slots=True)
class SkipProblem:
    pass


@dataclass(frozen=True, slots=True)
class NextProblem:
    pass


@dataclass(frozen=True, slots=True)
class ShowHint:
    pass


@dataclass(frozen=True, slots=True)
class RetryProblem:
    pass


@dataclass(frozen=True, slots=True)
class CompleteSession:
    pass


Action = StartGame | SubmitAnswer | SkipProblem | NextProblem | ShowHint | RetryProblem | CompleteSession


class SessionPhase(str, Enum):
    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"
    FEEDBACK_CORRECT = "feedback_correct"
    FEEDBACK_RETRY = "feedback_retry"
    FEEDBACK_REVEALED = "feedback_revealed"
    COMPLETE = "complete"


@dataclass(frozen=True, slots=True)
class GameState:
    current_problem: Problem | None = None
    next_problem: Problem | None = None
    current_index: int = 0
    total_problems: int = 10
    level: Level = Level.BEGINNER
    mode: Mode = Mode.ADDITION
    results: tuple[Result, ...] = ()
    problems: tuple[Problem, ...] = ()
    session_stats: SessionStats | None = None
    problem_start_time: float | None = None
    is_complete: bool = False
    current_attempt: int = 1
    max_attempts: int = 2
    show_hint: bool = False
    feedback: Feedback = NO_FEEDBACK
    generator: ProblemGenerator | None = field(default=None, compare=False, repr=False)

    @property
    def is_active(self) -> bool:
        return (
            not self.is_complete
            and self.current_problem is not None
            and self.problem_start_time is not None
        )

    @property
    def is_finalized(self) -> bool:
        """True once the current problem has produced its Result."""
        return len(self.results) > self.current_index

    @property
    def problem_number(self) -> int:
        return self.current_index + 1

    @property
    def remaining_attempts(self) -> int:
        return 0 if self.is_finalized else self.max_attempts - self.current_attempt + 1

    @property
    def phase(self) -> SessionPhase:
        if self.is_complete:
            return SessionPhase.COMPLETE
        if self.current_problem is None:
            return SessionPhase.IDLE
        kind = self.feedback.kind
        if kind is FeedbackKind.CORRECT:
            return SessionPhase.FEEDBACK_CORRECT
        if kind is FeedbackKind.REVEALED:
            return SessionPhase.FEEDBACK_REVEALED
        if kind in (FeedbackKind.RETRY, FeedbackKind.INCORRECT):
            return SessionPhase.FEEDBACK_RETRY
        return SessionPhase.AWAITING_ANSWER


def initial_state(config: GameConfig | None = None) -> GameState:
    cfg = config or GameConfig()
    return GameState(total_problems=cfg.total_problems, max_attempts=cfg.max_attempts)


class SessionEngine:
    def __init__(
        self,
        *,
        registry: ModeRegistry,
        clock: Clock,
        store: PreferenceStore | None = None,
        config: GameConfig | None = None,
        seed: int | None = None,
    ) -> None:
        self._registry = registry
        self._clock = clock
        self._store = store
        self._config = config or GameConfig()
        self._rng = SeededRng(seed)

    @property
    def registry(self) -> ModeRegistry:
        return self._registry

    @property
    def config(self) -> GameConfig:
        return self._config

    def reduce(self, state: GameState, action: Action) -> GameState:
        if isinstance(action, StartGame):
            return self._start(action)
        if isinstance(action, SubmitAnswer):
            return self._submit(state, action.answer)
        if isinstance(action, SkipProblem):
            return self._skip(state)
        if isinstance(action, NextProblem):
            return self._next(state)
        if isinstance(action, ShowHint):
            return self._show_hint(state)
        if isinstance(action, RetryProblem):
            return self._retry(state)
        if isinstance(action, CompleteSession):
            return self._complete(state)
        raise TypeError(f"unknown action: {action!r}")

    def can_show_hint(self, state: GameState) -> bool:
        if not state.is_active or state.is_finalized or state.current_attempt <= 1:
            return False
        assert state.current_problem is not None
        return self._registry.is_hint_eligible(state.mode, state.current_problem)

    def _start(self, action: StartGame) -> GameState:
        level = parse_level(action.level)
        mode = parse_mode(action.mode)
        generator = self._registry.get_mode_config(mode).generator

        generator.reset()
        current = generator.next_problem(level)
        lookahead = generator.next_problem(level)

        if self._store is not None:
            self._store.save_last_mode(mode)
            self._store.save_last_level(level)
        log.info("session started: mode=%s level=%d problems=%d", mode.value, level, self._config.total_problems)

        return replace(
            initial_state(self._config),
            level=level,
            mode=mode,
            current_problem=current,
            next_problem=lookahead,
            problems=(current,),
            problem_start_time=self._clock.now(),
            generator=generator,
        )

    def _submit(self, state: GameState, answer: int | None) -> GameState:
        if not state.is_active or state.is_finalized:
            log.debug("ignoring answer: no live problem")
            return state
        problem = state.current_problem
        assert problem is not None

        time_ms = self._elapsed_ms(state)

        if answer is not None and answer == problem.answer:
            return replace(
                state,
                results=(*state.results, Result(correct=True, user_answer=answer, time_ms=time_ms)),
                feedback=CorrectFeedback(self._rng.choice(CORRECT_MESSAGES)),
                current_attempt=1,
                show_hint=False,
            )

        if state.current_attempt < state.max_attempts:
            auto_hint = self._config.auto_hint and self._registry.is_hint_eligible(state.mode, problem)
            return replace(
                state,
                current_attempt=state.current_attempt + 1,
                show_hint=state.show_hint or auto_hint,
                feedback=IncorrectFeedback() if answer is None else RetryFeedback(),
            )

        return replace(
            state,
            results=(*state.results, Result(correct=False, user_answer=answer, time_ms=time_ms)),
            feedback=RevealedFeedback(problem.answer),
            current_attempt=1,
            show_hint=False,
        )

    def _skip(self, state: GameState) -> GameState:
        if not state.is_active or state.is_finalized:
            log.debug("ignoring skip: no live problem")
            return state
        assert state.current_problem is not None
        return replace(
            state,
            results=(*state.results, Result(correct=False, user_answer=None, time_ms=self._elapsed_ms(state))),
            feedback=RevealedFeedback(state.current_problem.answer),
            current_attempt=1,
            show_hint=False,
        )

    def _show_hint(self, state: GameState) -> GameState:
        if state.show_hint or not self.can_show_hint(state):
            return state
        return replace(state, show_hint=True)

    def _retry(self, state: GameState) -> GameState:
        if not state.is_active or state.is_finalized:
            return state
        return replace(state, feedback=NO_FEEDBACK, problem_start_time=self._clock.now())

    def _next(self, state: GameState) -> GameState:
        if not state.is_active or not state.is_finalized:
            log.debug("ignoring next: current problem still live")
            return state

        if state.current_index + 1 >= state.total_problems:
            return self._finalize(state)

        generator = state.generator
        assert generator is not None
        promoted = state.next_problem
        assert promoted is not None
        return replace(
            state,
            current_problem=promoted,
            next_problem=generator.next_problem(state.level),
            problems=(*state.problems, promoted),
            current_index=state.current_index + 1,
            problem_start_time=self._clock.now(),
            current_attempt=1,
            show_hint=False,
            feedback=NO_FEEDBACK,
        )

    def _complete(self, state: GameState) -> GameState:
        if state.is_complete or state.current_problem is None:
            return state
        return self._finalize(state)

    def _finalize(self, state: GameState) -> GameState:
        stats = calculate_session_stats(state.results, state.problems)
        if self._store is not None:
            self._store.save_last_session(stats)
        log.info(
            "session complete: mode=%s level=%d accuracy=%d%% streak=%d",
            state.mode.value,
            state.level,
            stats.accuracy,
            stats.best_streak,
        )
        return replace(
            state,
            is_complete=True,
            session_stats=stats,
            feedback=NO_FEEDBACK,
            problem_start_time=None,
            show_hint=False,
        )

    def _elapsed_ms(self, state: GameState) -> int:
        assert state.problem_start_time is not None
        return max(0, round_half_up((self._clock.now() - state.problem_start_time) * 1000.0))


class GameSession:
    """Holds the current GameState and exposes one method per action."""

    def __init__(
        self,
        *,
        config: GameConfig | None = None,
        registry: ModeRegistry | None = None,
        clock: Clock | None = None,
        store: PreferenceStore | None = None,
        seed: int | None = None,
    ) -> None:
        cfg = config or GameConfig()
        rng = SeededRng(seed)
        if registry is None:
            registry = build_default_registry(seed=rng.derive_seed(), max_attempts=cfg.sampling_attempts)
        self._engine = SessionEngine(
            registry=registry,
            clock=clock or RealClock(),
            store=store,
            config=cfg,
            seed=rng.derive_seed(),
        )
        self._state = initial_state(cfg)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def engine(self) -> SessionEngine:
        return self._engine

    def dispatch(self, action: Action) -> GameState:
        self._state = self._engine.reduce(self._state, action)
        return self._state

    def start_game(self, level: int, mode: Mode | str) -> GameState:
        return self.dispatch(StartGame(level=level, mode=mode))

    def submit_answer(self, answer: int | None) -> GameState:
        return self.dispatch(SubmitAnswer(answer=answer))

    def skip_problem(self) -> GameState:
        return self.dispatch(SkipProblem())

    def next_problem(self) -> GameState:
        return self.dispatch(NextProblem())

    def show_hint(self) -> GameState:
        return self.dispatch(ShowHint())

    def retry_problem(self) -> GameState:
        return self.dispatch(RetryProblem())

    def complete_session(self) -> GameState:
        return self.dispatch(CompleteSession())

    def can_show_hint(self) -> bool:
        return self._engine.can_show_hint(self._state)

    def current_hint(self) -> Hint | None:
        """Hint visual for the current problem while the hint is showing."""
        problem = self._state.current_problem
        if not self._state.show_hint or problem is None:
            return None
        return self._engine.registry.build_hint(problem)
