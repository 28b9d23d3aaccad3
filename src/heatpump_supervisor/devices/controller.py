from abc import ABC, abstractmethod

from heatpump_supervisor.supervisor.states import ActuationState


class HeatpumpController(ABC):
    """Abstract base class for the smart grid input of the heat pump.

    The supervisor only talks to the heat pump through this interface, so
    the relay driver and the in-memory mock can be swapped without touching
    the state machine.
    """

    @abstractmethod
    def read(self) -> ActuationState:
        """Returns the state the heat pump input is actually in.

        Hardware backed implementations must read the outputs back instead
        of returning the last commanded value.
        """

    @abstractmethod
    def write(self, state: ActuationState) -> ActuationState:
        """Commands the heat pump input.

        Args:
            state: NORMAL or SUSPENDED.

        Returns:
            The commanded state.

        Raises:
            ValueError: If `state` is not NORMAL or SUSPENDED.
        """

    @abstractmethod
    def shutdown(self) -> None:
        """Returns the heat pump to normal operation and releases the hardware."""

    @staticmethod
    def check_commandable(state: ActuationState) -> None:
        if state not in (ActuationState.NORMAL, ActuationState.SUSPENDED):
            raise ValueError(f"State {state} cannot be commanded")
