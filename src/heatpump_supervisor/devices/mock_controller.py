from typing import List

from heatpump_supervisor.devices.controller import HeatpumpController
from heatpump_supervisor.supervisor.states import ActuationState
from heatpump_supervisor.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)


class MockController(HeatpumpController):
    """In-memory `HeatpumpController` used when no Raspberry Pi is detected.

    Every commanded state is kept in `history` so tests can check what the
    supervisor actually switched.
    """

    def __init__(self) -> None:
        self._state = ActuationState.NORMAL
        self.history: List[ActuationState] = []
        self.is_shut_down = False

    def read(self) -> ActuationState:
        return self._state

    def write(self, state: ActuationState) -> ActuationState:
        self.check_commandable(state)
        self._state = state
        self.history.append(state)
        logger.debug("Mock heat pump set to %s", state)
        return state

    def shutdown(self) -> None:
        self._state = ActuationState.NORMAL
        self.is_shut_down = True
        logger.info("Mock controller shut down")
