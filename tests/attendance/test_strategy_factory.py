from datetime import time

from school_attendance.attendance.factory import LatenessStrategyFactory
from school_attendance.attendance.strategies.late_strategy import LateStrategy
from school_attendance.attendance.strategies.on_time_strategy import OnTimeStrategy


def _decide(time_in: time, start: time = time(7, 30), grace: int = 60):
    strategy = LatenessStrategyFactory().for_time_in(time_in=time_in, school_start=start, grace_seconds=grace)
    return strategy, strategy.decide_time_in(time_in=time_in, school_start=start, grace_seconds=grace)


def test_grace_boundary_is_on_time():
    strategy, decision = _decide(time(7, 31, 0))

    assert isinstance(strategy, OnTimeStrategy)
    assert decision.is_late is False
    assert decision.late_minutes == 0


def test_one_second_past_grace_is_late():
    strategy, decision = _decide(time(7, 31, 1))

    assert isinstance(strategy, LateStrategy)
    assert decision.is_late is True
    assert decision.late_minutes == 1


def test_late_minutes_are_whole_minutes_from_start():
    _, decision = _decide(time(8, 45, 59))
    assert decision.late_minutes == 75


def test_early_arrival_is_on_time():
    _, decision = _decide(time(6, 50))
    assert decision.is_late is False
