import platform

from heatpump_supervisor.devices.controller import HeatpumpController
from heatpump_supervisor.devices.mock_controller import MockController
from heatpump_supervisor.devices.relay_controller import RelayController
from heatpump_supervisor.util.config import HeatpumpConfig
from heatpump_supervisor.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)

RASPI_ARCHITECTURES = ("aarch64", "armv7l", "armv6l", "arm")


def is_raspi(machine: str | None = None) -> bool:
    """Checks whether the process runs on a Raspberry Pi class (ARM) machine.

    Args:
        machine: Architecture name to check, defaults to `platform.machine()`.
    """
    machine = platform.machine() if machine is None else machine
    return machine.lower() in RASPI_ARCHITECTURES


def create_controller(config: HeatpumpConfig) -> HeatpumpController:
    """Selects the controller implementation once, at process start.

    Returns a `RelayController` on a Raspberry Pi, a `MockController`
    everywhere else or when `config.force_mock` is set.
    """
    if config.force_mock:
        logger.info("Mock controller forced by configuration")
        return MockController()
    if is_raspi():
        return RelayController(config.k1_pin, config.k2_pin)
    logger.warning(
        "This is only a mockup! Must be run on a Raspberry Pi, architecture is %s",
        platform.machine(),
    )
    return MockController()
