from __future__ import annotations

from minimath.core import Level, Mode, make_problem
from minimath.results import Result, SessionStats, calculate_session_stats


def _problems(n: int):
    return [
        make_problem(prefix="add", mode=Mode.ADDITION, level=Level.BEGINNER, prompt=f"{i} + 1 = ?", operands=(i, 1), answer=i + 1)
        for i in range(n)
    ]


def test_empty_session_is_all_zero() -> None:
    stats = calculate_session_stats([], [])
    assert stats == SessionStats(total=0, correct=0, accuracy=0, best_streak=0, avg_time_ms=0)


def test_accuracy_streak_and_average() -> None:
    problems = _problems(5)
    results = [
        Result(True, 1, 1000),
        Result(True, 2, 2001),
        Result(False, 9, 500),
        Result(True, 4, 3000),
        Result(False, None, 0),
    ]

    stats = calculate_session_stats(results, problems)

    assert stats.total == 5
    assert stats.correct == 3
    assert stats.accuracy == 60
    assert stats.best_streak == 2
    # Only correct answers count toward the average: (1000 + 2001 + 3000) / 3.
    assert stats.avg_time_ms == 2000
    assert [m.problem for m in stats.mistakes] == [problems[2], problems[4]]
    assert [m.user_answer for m in stats.mistakes] == [9, None]


def test_accuracy_rounds_half_up() -> None:
    results = [Result(True, 0, 10)] + [Result(False, 1, 10)] * 7
    # 1 / 8 = 12.5%
    assert calculate_session_stats(results, _problems(8)).accuracy == 13


def test_stats_round_trip_through_stored_format() -> None:
    problems = _problems(2)
    stats = calculate_session_stats([Result(True, 1, 1500), Result(False, 7, 900)], problems)

    data = stats.to_dict()
    assert set(data) == {"total", "correct", "accuracy", "bestStreak", "avgTimeMs", "mistakes"}
    assert data["mistakes"][0]["userAnswer"] == 7

    restored = SessionStats.from_dict(data)
    assert restored.total == 2
    assert restored.mistakes[0].problem.prompt == problems[1].prompt
    assert restored.mistakes[0].problem.mode is Mode.ADDITION


def test_all_incorrect_has_no_streak_or_average() -> None:
    results = [Result(False, 3, 1200), Result(False, None, 800), Result(False, 1, 400)]

    stats = calculate_session_stats(results, _problems(3))

    assert stats.accuracy == 0
    assert stats.best_streak == 0
    assert stats.avg_time_ms == 0
    assert len(stats.mistakes) == 3


def test_result_without_problem_is_left_out_of_mistakes() -> None:
    problems = _problems(1)
    results = [Result(False, 2, 100), Result(False, 5, 100)]

    stats = calculate_session_stats(results, problems)

    assert stats.total == 2
    assert [(m.problem, m.user_answer) for m in stats.mistakes] == [(problems[0], 2)]


def test_same_input_gives_same_stats() -> None:
    problems = _problems(4)
    results = [Result(True, 1, 900), Result(False, 0, 300), Result(True, 3, 1100), Result(False, None, 0)]

    first = calculate_session_stats(results, problems)
    second = calculate_session_stats(results, problems)

    assert first == second
    assert [m.problem for m in first.mistakes] == [problems[1], problems[3]]
