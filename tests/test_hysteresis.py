"""Test the TIMED mode schedule evaluation."""

from datetime import datetime, timedelta

import pytest

from heatpump_supervisor.supervisor.hysteresis import evaluate
from heatpump_supervisor.supervisor.states import ActuationState
from heatpump_supervisor.supervisor.timetable import TimeTable

TICK = timedelta(seconds=10)


def table_with(*hours: int) -> TimeTable:
    table = TimeTable()
    for hour in hours:
        table.set_hour(hour, True)
    return table


class TestEvaluate:
    """Test the look-ahead rule."""

    def test_empty_table_is_normal(self) -> None:
        """Test that nothing is suspended without flagged hours."""
        assert evaluate(TimeTable(), datetime(2024, 1, 15, 14, 0), TICK) is (
            ActuationState.NORMAL
        )

    def test_current_hour_suspends(self) -> None:
        """Test that a flagged current hour suspends."""
        assert evaluate(table_with(14), datetime(2024, 1, 15, 14, 30), TICK) is (
            ActuationState.SUSPENDED
        )

    @pytest.mark.parametrize(
        "now,expected",
        [
            (datetime(2024, 1, 15, 13, 59, 49), ActuationState.NORMAL),
            (datetime(2024, 1, 15, 13, 59, 50), ActuationState.SUSPENDED),
            (datetime(2024, 1, 15, 13, 59, 59), ActuationState.SUSPENDED),
        ],
    )
    def test_window_starts_one_tick_early(self, now, expected) -> None:
        """Test the start of a window at the next full hour."""
        assert evaluate(table_with(14), now, TICK) is expected

    @pytest.mark.parametrize(
        "now,expected",
        [
            (datetime(2024, 1, 15, 14, 59, 59), ActuationState.SUSPENDED),
            (datetime(2024, 1, 15, 15, 0, 0), ActuationState.NORMAL),
        ],
    )
    def test_window_ends_with_the_hour(self, now, expected) -> None:
        """Test the end of a window."""
        assert evaluate(table_with(14), now, TICK) is expected

    def test_lookahead_wraps_at_midnight(self) -> None:
        """Test that hour 0 is seen from 23:59:55."""
        assert evaluate(table_with(0), datetime(2024, 1, 15, 23, 59, 55), TICK) is (
            ActuationState.SUSPENDED
        )

    def test_lookahead_follows_tick_interval(self) -> None:
        """Test that a longer tick interval looks further ahead."""
        now = datetime(2024, 1, 15, 13, 59, 0)

        assert evaluate(table_with(14), now, TICK) is ActuationState.NORMAL
        assert evaluate(table_with(14), now, timedelta(seconds=60)) is (
            ActuationState.SUSPENDED
        )
