"""Modes, actuation states and events of the heat pump supervisor.

The enum values are the names written to the snapshot file and to the
transition log, so they must stay stable across releases.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

HOURS_PER_DAY = 24


class SupervisorMode(Enum):
    """Operating intent of the supervisor."""

    NORMAL = "NORMALOPERATION"  # Normalbetrieb, no restrictions
    SUSPENDED = "SUSPENDED"  # heat pump blocked
    TIMED = "TIMED"  # blocked according to the time table
    UNDEFINED = "UNDEFINED"  # trap state after a malformed request

    def __str__(self) -> str:
        return self.value


class ActuationState(Enum):
    """State commanded to (and read back from) the smart grid relays."""

    NORMAL = "NORMALOPERATION"
    SUSPENDED = "SUSPENDED"
    UNDEFINED = "UNDEFINED"

    def __str__(self) -> str:
        return self.value


class EventKind(Enum):
    INIT = "INIT"
    SUSPEND = "SUSPEND"
    NORMAL = "NORMAL"
    TIMED = "TIMED"
    TICK = "TICK"
    TIMETABLE_CHANGED = "TIMETABLE_CHANGED"
    BAD_REQUEST = "BAD_REQUEST"


@dataclass(frozen=True)
class Event:
    """An input to the supervisor state machine.

    Only TIMETABLE_CHANGED events carry a payload: the hour of day (0-23)
    and whether that hour should be suspended. Use `Event.timetable_changed`
    to build one, it validates the hour.
    """

    kind: EventKind
    hour: Optional[int] = None
    suspend: bool = False

    def __post_init__(self) -> None:
        if self.kind is EventKind.TIMETABLE_CHANGED:
            if (
                isinstance(self.hour, bool)
                or not isinstance(self.hour, int)
                or not 0 <= self.hour < HOURS_PER_DAY
            ):
                raise ValueError(f"Hour must be within 0..23, got {self.hour!r}")
        elif self.hour is not None:
            raise ValueError(f"{self.kind.value} events carry no hour")

    @classmethod
    def timetable_changed(cls, hour: int, suspend: bool) -> "Event":
        return cls(EventKind.TIMETABLE_CHANGED, hour, bool(suspend))

    def __str__(self) -> str:
        if self.kind is EventKind.TIMETABLE_CHANGED:
            return f"{self.kind.value}({self.hour}, {self.suspend})"
        return self.kind.value


# Every accepted spelling of a requested mode. UNDEFINED can never be requested.
_REQUESTABLE_MODES: Dict[str, SupervisorMode] = {
    "NORMAL": SupervisorMode.NORMAL,
    "NORMALOPERATION": SupervisorMode.NORMAL,
    "SUSPEND": SupervisorMode.SUSPENDED,
    "SUSPENDED": SupervisorMode.SUSPENDED,
    "TIMED": SupervisorMode.TIMED,
}

_MODE_EVENTS: Dict[SupervisorMode, EventKind] = {
    SupervisorMode.NORMAL: EventKind.NORMAL,
    SupervisorMode.SUSPENDED: EventKind.SUSPEND,
    SupervisorMode.TIMED: EventKind.TIMED,
}


def parse_mode(name: Optional[str]) -> Optional[SupervisorMode]:
    """Parses a requested mode name.

    Args:
        name: Mode name as received from a client, case-insensitive.

    Returns:
        The requested mode, or None if the name is missing or unknown.
    """
    if not isinstance(name, str):
        return None
    return _REQUESTABLE_MODES.get(name.strip().upper())


def decode_state_request(name: Optional[str]) -> Event:
    """Turns a requested mode name into the event to apply.

    Unknown names are not an error here: they become a BAD_REQUEST event,
    which the state machine records.
    """
    mode = parse_mode(name)
    if mode is None:
        return Event(EventKind.BAD_REQUEST)
    return Event(_MODE_EVENTS[mode])


def mode_from_name(name: str) -> SupervisorMode:
    """Maps a persisted mode name back to `SupervisorMode`.

    Raises:
        ValueError: If the name is not one of the persisted values.
    """
    return SupervisorMode(name)


def actuation_from_name(name: str) -> ActuationState:
    """Maps a persisted actuation name back to `ActuationState`.

    Raises:
        ValueError: If the name is not one of the persisted values.
    """
    return ActuationState(name)
