"""This module exposes the supervisor to clients over Redis.

It sets up a FastStream `RedisRouter` with three subscribers under the
`heatpump/` prefix:

- `state`: switch the operating mode, `{"state": "normal|suspended|timed"}`.
- `toggle_hour`: change one hour of the schedule,
  `{"hour": 0..23, "action": "suspend|setNormal"}`.
- `query`: return the current status.

Every subscriber replies with the status payload built in `commands.py`.
"""

from typing import Any, Dict

from faststream.redis import RedisRouter

from heatpump_supervisor.api.commands import (
    apply_state_request,
    apply_toggle_request,
    status_payload,
)
from heatpump_supervisor.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)

topic_prefix = "heatpump/"

heatpump_router = RedisRouter(prefix=topic_prefix)


@heatpump_router.subscriber("state")
async def handle_state_request(request: Dict[str, Any]) -> Dict[str, Any]:
    """Handles a mode change request."""
    from heatpump_supervisor.app import get_supervisor

    return apply_state_request(get_supervisor(), request)


@heatpump_router.subscriber("toggle_hour")
async def handle_toggle_hour(request: Dict[str, Any]) -> Dict[str, Any]:
    """Handles a time table change for a single hour."""
    from heatpump_supervisor.app import get_supervisor

    return apply_toggle_request(get_supervisor(), request)


@heatpump_router.subscriber("query")
async def handle_query(request: Dict[str, Any]) -> Dict[str, Any]:
    """Returns the current status without changing anything."""
    from heatpump_supervisor.app import get_supervisor

    logger.debug("Status query %s", request)
    return status_payload(get_supervisor().full_state())
