"""Translation between client requests and supervisor events.

The functions here are independent of the message broker: `rpc.py` wires them
to Redis topics, tests call them directly.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from heatpump_supervisor.supervisor.state_machine import Supervisor, SupervisorStatus
from heatpump_supervisor.supervisor.states import (
    HOURS_PER_DAY,
    Event,
    SupervisorMode,
    decode_state_request,
)
from heatpump_supervisor.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)

TOGGLE_ACTIONS = {"suspend": True, "setNormal": False}


def status_payload(status: SupervisorStatus) -> Dict[str, Any]:
    """Builds the status message sent to clients.

    A supervisor trapped in UNDEFINED reports `ALERT` instead of `OK`, which
    is how a malformed request becomes visible to the user.
    """
    return {
        "status": "ALERT" if status.mode is SupervisorMode.UNDEFINED else "OK",
        "controllerState": status.actuation.value,
        "supervisorState": status.mode.value,
        "suspendedHours": list(status.timetable),
        "timestamp": datetime.now().astimezone().isoformat(),
    }


def apply_state_request(supervisor: Supervisor, request: Dict[str, Any]) -> Dict[str, Any]:
    """Applies a requested mode, e.g. `{"state": "timed"}`.

    Unknown mode names are applied as BAD_REQUEST.
    """
    requested = request.get("state")
    event = decode_state_request(requested)
    logger.info("State request %r decoded as %s", requested, event)
    supervisor.apply(event)
    return status_payload(supervisor.full_state())


def decode_toggle_request(request: Dict[str, Any]) -> Optional[Event]:
    """Decodes `{"hour": 14, "action": "suspend"}` into a TIMETABLE_CHANGED event.

    Returns:
        The event, or None if the hour or the action is out of range.
    """
    hour = request.get("hour")
    action = request.get("action")
    if isinstance(hour, str) and hour.strip().isdigit():
        hour = int(hour)
    if isinstance(hour, bool) or not isinstance(hour, int):
        return None
    if not 0 <= hour < HOURS_PER_DAY or action not in TOGGLE_ACTIONS:
        return None
    return Event.timetable_changed(hour, TOGGLE_ACTIONS[action])


def apply_toggle_request(
    supervisor: Supervisor, request: Dict[str, Any]
) -> Dict[str, Any]:
    """Sets one hour of the time table; invalid requests leave it untouched."""
    event = decode_toggle_request(request)
    if event is None:
        logger.info("Ignoring invalid time table request %s", request)
    else:
        supervisor.apply(event)
    return status_payload(supervisor.full_state())
