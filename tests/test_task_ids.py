# tests/test_task_ids.py

from __future__ import annotations

from checkoff.tasks.task_ids import TaskIdGenerator


def test_ids_follow_the_clock_when_it_moves_forward() -> None:
    now = [1_000]
    gen = TaskIdGenerator(clock=lambda: now[0])

    assert gen.next_id() == "1000"
    now[0] = 5_000
    assert gen.next_id() == "5000"


def test_ids_stay_increasing_when_clock_stalls_or_goes_back() -> None:
    now = [1_000]
    gen = TaskIdGenerator(clock=lambda: now[0])

    first = gen.next_id()
    second = gen.next_id()
    now[0] = 10
    third = gen.next_id()

    assert [first, second, third] == ["1000", "1001", "1002"]


def test_observe_skips_non_numeric_ids() -> None:
    gen = TaskIdGenerator(clock=lambda: 1)
    gen.observe(["abc", "42", "", "²"])
    assert gen.next_id() == "43"
