from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .core import Problem, round_half_up


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of one finalized problem (correct, exhausted retries or skipped)."""

    correct: bool
    user_answer: int | None
    time_ms: int


@dataclass(frozen=True, slots=True)
class Mistake:
    problem: Problem
    user_answer: int | None


@dataclass(frozen=True, slots=True)
class SessionStats:
    """Persistable summary of a finished practice session.

    ``to_dict``/``from_dict`` use the camelCase keys of the stored browser
    format so blobs written by either front-end stay readable.
    """

    total: int
    correct: int
    accuracy: int
    best_streak: int
    avg_time_ms: int
    mistakes: tuple[Mistake, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "correct": self.correct,
            "accuracy": self.accuracy,
            "bestStreak": self.best_streak,
            "avgTimeMs": self.avg_time_ms,
            "mistakes": [
                {"problem": m.problem.to_dict(), "userAnswer": m.user_answer}
                for m in self.mistakes
            ],
        }

    @classmethod
    def from_dict(cls, data: object) -> "SessionStats":
        if not isinstance(data, dict):
            raise TypeError("session stats payload must be an object")
        mistakes = []
        for item in data.get("mistakes") or []:
            if not isinstance(item, dict):
                raise TypeError("mistake entry must be an object")
            raw_answer = item.get("userAnswer")
            mistakes.append(
                Mistake(
                    problem=Problem.from_dict(item["problem"]),
                    user_answer=None if raw_answer is None else int(raw_answer),
                )
            )
        return cls(
            total=int(data["total"]),
            correct=int(data["correct"]),
            accuracy=int(data["accuracy"]),
            best_streak=int(data["bestStreak"]),
            avg_time_ms=int(data["avgTimeMs"]),
            mistakes=tuple(mistakes),
        )


def calculate_session_stats(results: Sequence[Result], problems: Sequence[Problem]) -> SessionStats:
    """Aggregate ordered results into session statistics.

    ``problems`` is matched to ``results`` by position; a result without a
    problem at its index is left out of the mistake list.
    """

    total = len(results)
    correct_times = [r.time_ms for r in results if r.correct]
    correct = len(correct_times)
    accuracy = 0 if total == 0 else round_half_up(100.0 * correct / total)

    best_streak = 0
    streak = 0
    for r in results:
        if r.correct:
            streak += 1
            best_streak = max(best_streak, streak)
        else:
            streak = 0

    avg_time_ms = 0 if not correct_times else round_half_up(sum(correct_times) / len(correct_times))

    mistakes = tuple(
        Mistake(problem=problems[i], user_answer=r.user_answer)
        for i, r in enumerate(results)
        if not r.correct and i < len(problems)
    )

    return SessionStats(
        total=total,
        correct=correct,
        accuracy=accuracy,
        best_streak=best_streak,
        avg_time_ms=avg_time_ms,
        mistakes=mistakes,
    )
