"""This module drives the two smart grid relays of an Ochsner heat pump.

The heat pump evaluates two inputs (terminals 21 and 43). They are switched by
two toggle relays K1 and K2 on the GPIO header of a Raspberry Pi. When the
program is stopped the heat pump must fall back to normal operation, which
gives the following truth table (contact = relay output high):

    | K1 (21) | K2 (43) | mode
    | contact | contact | NORMALOPERATION
    | open    | contact | SUSPENDED

The two other combinations select the "precedence" and "enforced" modes of
the heat pump, which this supervisor never commands. Reading them back is
reported as UNDEFINED.
"""

from typing import Any

from heatpump_supervisor.devices.controller import HeatpumpController
from heatpump_supervisor.supervisor.states import ActuationState
from heatpump_supervisor.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)


class RelayController(HeatpumpController):
    """`HeatpumpController` backed by two GPIO outputs.

    `RPi.GPIO` is imported when the controller is created, since the module
    only loads on a Raspberry Pi. Tests pass a stand-in through `gpio`.
    """

    def __init__(self, k1_pin: int, k2_pin: int, gpio: Any = None) -> None:
        if gpio is None:
            import RPi.GPIO as gpio  # noqa: N813

        self._gpio = gpio
        self.k1_pin = k1_pin
        self.k2_pin = k2_pin
        self._gpio.setwarnings(False)
        self._gpio.setmode(self._gpio.BCM)
        self._gpio.setup(self.k1_pin, self._gpio.OUT, initial=self._gpio.HIGH)
        self._gpio.setup(self.k2_pin, self._gpio.OUT, initial=self._gpio.HIGH)
        logger.info("Relay controller ready on K1=%d, K2=%d", k1_pin, k2_pin)

    def read(self) -> ActuationState:
        k1 = bool(self._gpio.input(self.k1_pin))
        k2 = bool(self._gpio.input(self.k2_pin))
        if k1 and k2:
            return ActuationState.NORMAL
        if not k1 and k2:
            return ActuationState.SUSPENDED
        logger.warning("Unexpected relay levels K1=%s, K2=%s", k1, k2)
        return ActuationState.UNDEFINED

    def write(self, state: ActuationState) -> ActuationState:
        self.check_commandable(state)
        k1_level = self._gpio.HIGH if state is ActuationState.NORMAL else self._gpio.LOW
        self._gpio.output(self.k1_pin, k1_level)
        self._gpio.output(self.k2_pin, self._gpio.HIGH)
        logger.debug("Relays set for %s", state)
        return state

    def shutdown(self) -> None:
        self.write(ActuationState.NORMAL)
        self._gpio.cleanup((self.k1_pin, self.k2_pin))
        logger.info("Relay controller released")
