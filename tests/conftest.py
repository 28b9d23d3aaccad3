"""Pytest configuration and shared fixtures."""

from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List

import pytest

from heatpump_supervisor.devices.mock_controller import MockController
from heatpump_supervisor.store.persistence import PersistenceStore
from heatpump_supervisor.supervisor.state_machine import Supervisor
from heatpump_supervisor.supervisor.states import Event, EventKind, SupervisorMode
from heatpump_supervisor.util.config import HeatpumpConfig


class FakeClock:
    """Wall clock the tests can set."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeGPIO:
    """Stand-in for the `RPi.GPIO` module keeping pin levels in a dict."""

    BCM = "BCM"
    OUT = "OUT"
    HIGH = 1
    LOW = 0

    def __init__(self) -> None:
        self.levels: Dict[int, int] = {}
        self.mode = None
        self.cleaned_up: List[int] = []

    def setwarnings(self, flag: bool) -> None:
        pass

    def setmode(self, mode: str) -> None:
        self.mode = mode

    def setup(self, pin: int, direction: str, initial: int = 0) -> None:
        self.levels[pin] = initial

    def output(self, pin: int, level: int) -> None:
        self.levels[pin] = level

    def input(self, pin: int) -> int:
        return self.levels[pin]

    def cleanup(self, pins=None) -> None:
        self.cleaned_up.extend(pins or self.levels.keys())


@pytest.fixture
def clock() -> FakeClock:
    """Clock pinned to 10:30, an hour no test flags by default."""
    return FakeClock(datetime(2024, 1, 15, 10, 30, 0))


@pytest.fixture
def config(tmp_path: Path) -> HeatpumpConfig:
    return HeatpumpConfig(state_dir=tmp_path / "state", tick_interval=10)


@pytest.fixture
def store(config: HeatpumpConfig) -> PersistenceStore:
    return PersistenceStore(config)


@pytest.fixture
def controller() -> MockController:
    return MockController()


@pytest.fixture
def make_supervisor(
    store: PersistenceStore, config: HeatpumpConfig, clock: FakeClock
) -> Callable[..., Supervisor]:
    """Factory building supervisors that share the test store and clock."""

    def _make(controller: MockController | None = None) -> Supervisor:
        return Supervisor(controller or MockController(), store, config, clock)

    return _make


@pytest.fixture
def supervisor(make_supervisor, controller: MockController) -> Supervisor:
    return make_supervisor(controller)


ENTRY_EVENTS = {
    SupervisorMode.NORMAL: [],
    SupervisorMode.SUSPENDED: [Event(EventKind.SUSPEND)],
    SupervisorMode.TIMED: [Event(EventKind.TIMED)],
    SupervisorMode.UNDEFINED: [Event(EventKind.BAD_REQUEST)],
}


def enter_mode(supervisor: Supervisor, mode: SupervisorMode) -> None:
    """Drives a freshly started supervisor into `mode`."""
    for event in ENTRY_EVENTS[mode]:
        supervisor.apply(event)
    assert supervisor.current_mode() is mode
