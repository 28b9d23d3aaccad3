"""The 24 hour suspend schedule used while the supervisor runs in TIMED mode."""

from typing import Iterable, List, Tuple

from heatpump_supervisor.supervisor.states import HOURS_PER_DAY


class TimeTable:
    """One "suspend during this hour" flag per hour of day, index 0 = midnight.

    The table always holds exactly 24 entries. It is owned by the supervisor;
    everything handed out to other layers is an immutable copy.
    """

    def __init__(self, hours: Iterable[bool] | None = None) -> None:
        if hours is None:
            self._hours: List[bool] = [False] * HOURS_PER_DAY
            return
        hours = list(hours)
        if len(hours) != HOURS_PER_DAY or not all(isinstance(h, bool) for h in hours):
            raise ValueError(
                f"A time table needs exactly {HOURS_PER_DAY} booleans, got {hours!r}"
            )
        self._hours = hours

    def __getitem__(self, hour: int) -> bool:
        return self._hours[hour]

    def __len__(self) -> int:
        return HOURS_PER_DAY

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeTable):
            return NotImplemented
        return self._hours == other._hours

    def __repr__(self) -> str:
        return f"TimeTable(suspended_hours={self.suspended_hours()})"

    def set_hour(self, hour: int, suspend: bool) -> None:
        if not 0 <= hour < HOURS_PER_DAY:
            raise IndexError(f"Hour must be within 0..23, got {hour}")
        self._hours[hour] = bool(suspend)

    def suspended_hours(self) -> List[int]:
        """Indices of all hours flagged for suspension, ascending."""
        return [hour for hour, suspended in enumerate(self._hours) if suspended]

    def as_tuple(self) -> Tuple[bool, ...]:
        return tuple(self._hours)

    def as_list(self) -> List[bool]:
        return list(self._hours)
