"""Schedule evaluation for TIMED mode.

The relays are switched based on the current hour and on the hour one tick
interval ahead. A suspend window therefore starts up to one tick early and
ends up to one tick late, so the relays never toggle twice around an hour
boundary.
"""

from datetime import datetime, timedelta

from heatpump_supervisor.supervisor.states import ActuationState
from heatpump_supervisor.supervisor.timetable import TimeTable


def evaluate(table: TimeTable, now: datetime, lookahead: timedelta) -> ActuationState:
    """Decides the actuation state the time table calls for.

    Args:
        table: The suspend schedule.
        now: Current wall-clock time.
        lookahead: How far ahead to look, normally the tick interval.

    Returns:
        SUSPENDED if the current hour or the hour at `now + lookahead` is
        flagged, NORMAL otherwise.
    """
    hour = now.hour
    hour_ahead = (now + lookahead).hour
    if table[hour] or table[hour_ahead]:
        return ActuationState.SUSPENDED
    return ActuationState.NORMAL
