"""This module implements the supervisor state machine of the heat pump.

The `Supervisor` keeps the authoritative operating mode (normal, suspended,
timed) together with the 24 hour suspend schedule, and switches the heat pump
controller accordingly. All inputs arrive as `Event` objects through
`Supervisor.apply`, from the periodic ticker as well as from client requests.

Transitions:

    | mode      | event             | new mode  | actuation                  |
    | NORMAL    | SUSPEND           | SUSPENDED | SUSPENDED                  |
    | NORMAL    | TIMED             | TIMED     | from time table            |
    | SUSPENDED | NORMAL            | NORMAL    | NORMAL                     |
    | SUSPENDED | TIMED             | TIMED     | from time table            |
    | TIMED     | NORMAL            | NORMAL    | NORMAL                     |
    | TIMED     | SUSPEND           | SUSPENDED | SUSPENDED                  |
    | TIMED     | TICK              | TIMED     | from time table            |
    | any       | TIMETABLE_CHANGED | unchanged | time table, in TIMED only  |
    | any       | BAD_REQUEST       | UNDEFINED | unchanged                  |
    | UNDEFINED | any               | UNDEFINED | unchanged                  |

Every other combination is ignored. UNDEFINED has no way out: once a
malformed request has been received, only a restart of the process brings
the supervisor back, and a persisted UNDEFINED mode is not restored.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from heatpump_supervisor.devices.controller import HeatpumpController
from heatpump_supervisor.exceptions import (
    ActuationError,
    SnapshotError,
    SupervisorShutDownError,
)
from heatpump_supervisor.store.persistence import LogEntry, PersistenceStore, Snapshot
from heatpump_supervisor.supervisor import hysteresis
from heatpump_supervisor.supervisor.states import (
    ActuationState,
    Event,
    EventKind,
    SupervisorMode,
)
from heatpump_supervisor.supervisor.timetable import TimeTable
from heatpump_supervisor.util.config import HeatpumpConfig
from heatpump_supervisor.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)

# Explicit mode switches, (current mode, event) -> new mode
MODE_SWITCHES: Dict[Tuple[SupervisorMode, EventKind], SupervisorMode] = {
    (SupervisorMode.NORMAL, EventKind.SUSPEND): SupervisorMode.SUSPENDED,
    (SupervisorMode.NORMAL, EventKind.TIMED): SupervisorMode.TIMED,
    (SupervisorMode.SUSPENDED, EventKind.NORMAL): SupervisorMode.NORMAL,
    (SupervisorMode.SUSPENDED, EventKind.TIMED): SupervisorMode.TIMED,
    (SupervisorMode.TIMED, EventKind.NORMAL): SupervisorMode.NORMAL,
    (SupervisorMode.TIMED, EventKind.SUSPEND): SupervisorMode.SUSPENDED,
}

# Modes that force the actuation state regardless of the time table
FORCED_ACTUATION: Dict[SupervisorMode, ActuationState] = {
    SupervisorMode.NORMAL: ActuationState.NORMAL,
    SupervisorMode.SUSPENDED: ActuationState.SUSPENDED,
}

WRITE_ATTEMPTS = 2


@dataclass(frozen=True)
class SupervisorStatus:
    """Read-only view of the supervisor handed to presentation layers."""

    mode: SupervisorMode
    actuation: ActuationState
    timetable: Tuple[bool, ...]


class Supervisor:
    """Serialized state machine owning the controller and the time table.

    All public methods hold one re-entrant lock for their whole duration,
    including persistence. Concurrent callers (the ticker thread and request
    handlers) are therefore applied one after the other, and snapshots are
    written in the order the events were applied.
    """

    def __init__(
        self,
        controller: HeatpumpController,
        store: PersistenceStore,
        config: Optional[HeatpumpConfig] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Creates the supervisor and restores the last saved state.

        Args:
            controller: The heat pump controller, owned from now on.
            store: Snapshot and transition log storage.
            config: Supplies the tick interval used as hysteresis look-ahead.
            clock: Source of the current wall-clock time.

        Raises:
            ActuationError: If the restored state cannot be applied to the
                            controller.
        """
        config = config or HeatpumpConfig()
        self._controller = controller
        self._store = store
        self._clock = clock
        self._lookahead = timedelta(seconds=config.tick_interval)
        self._lock = threading.RLock()
        self._mode = SupervisorMode.NORMAL
        self._timetable = TimeTable()
        self._is_shut_down = False
        with self._lock:
            self._restore()

    def current_mode(self) -> SupervisorMode:
        with self._lock:
            return self._mode

    def current_actuation(self) -> ActuationState:
        with self._lock:
            self._check_running()
            return self._controller.read()

    def schedule(self) -> Tuple[bool, ...]:
        with self._lock:
            return self._timetable.as_tuple()

    def full_state(self) -> SupervisorStatus:
        """Mode, actuation and time table, taken consistently under the lock."""
        with self._lock:
            self._check_running()
            return SupervisorStatus(
                self._mode, self._controller.read(), self._timetable.as_tuple()
            )

    def apply(self, event: Event) -> Tuple[SupervisorMode, ActuationState]:
        """Applies one event to the state machine.

        Args:
            event: The event to apply.

        Returns:
            The mode and actuation state after the event.

        Raises:
            ActuationError: If the controller could not be switched.
            SupervisorShutDownError: If `shutdown` has been called.
        """
        with self._lock:
            self._check_running()
            self._apply(event)
            return self._mode, self._controller.read()

    def shutdown(self) -> None:
        """Releases the controller, leaving the heat pump in normal operation.

        The controller is not touched again afterwards: events and actuation
        queries raise `SupervisorShutDownError`, a second call does nothing.
        """
        with self._lock:
            if self._is_shut_down:
                return
            logger.info("Shutting down supervisor in mode %s", self._mode)
            self._is_shut_down = True
            self._controller.shutdown()

    def _check_running(self) -> None:
        if self._is_shut_down:
            raise SupervisorShutDownError("Supervisor has been shut down")

    def _apply(self, event: Event) -> None:
        mode = self._mode
        kind = event.kind
        persist = False
        actuation_changed = False

        if mode is SupervisorMode.UNDEFINED:
            logger.error("Fatal: supervisor is %s, ignoring event %s", mode, event)
            return

        if kind is EventKind.BAD_REQUEST:
            logger.error("Bad request received in mode %s", mode)
            self._mode = SupervisorMode.UNDEFINED
            self._apply(event)
            persist = True
        elif kind is EventKind.TIMETABLE_CHANGED:
            self._timetable.set_hour(event.hour, event.suspend)
            logger.info(
                "Hour %d set to %s", event.hour, "suspend" if event.suspend else "normal"
            )
            if mode is SupervisorMode.TIMED:
                actuation_changed = self._check_update_actuation()
                persist = True
        elif kind is EventKind.TICK:
            if mode is SupervisorMode.TIMED:
                actuation_changed = self._check_update_actuation()
        elif (mode, kind) in MODE_SWITCHES:
            new_mode = MODE_SWITCHES[(mode, kind)]
            # mode only changes once the controller followed
            if new_mode is SupervisorMode.TIMED:
                actuation_changed = self._check_update_actuation()
            else:
                self._actuate(FORCED_ACTUATION[new_mode])
            self._mode = new_mode
            logger.info("Mode change %s -> %s", mode, new_mode)
            persist = True
        else:
            logger.debug("Event %s ignored in mode %s", event, mode)

        if persist or actuation_changed:
            self._persist()

    def _check_update_actuation(self) -> bool:
        """Switches the controller as the time table demands.

        Returns:
            True if the actuation state changed.
        """
        target = hysteresis.evaluate(self._timetable, self._clock(), self._lookahead)
        current = self._controller.read()
        if target is current:
            return False
        self._actuate(target)
        logger.info("Time table switches heat pump %s -> %s", current, target)
        return True

    def _actuate(self, state: ActuationState) -> None:
        last_error: Optional[Exception] = None
        for attempt in range(1, WRITE_ATTEMPTS + 1):
            try:
                self._controller.write(state)
                observed = self._controller.read()
            except Exception as ex:
                last_error = ex
                logger.error(
                    "Attempt %d to switch heat pump to %s failed: %s", attempt, state, ex
                )
                continue
            if observed is state:
                return
            logger.error(
                "Attempt %d to switch heat pump to %s failed, controller reads %s",
                attempt,
                state,
                observed,
            )
        raise ActuationError(
            f"Heat pump did not switch to {state} after {WRITE_ATTEMPTS} attempts"
        ) from last_error

    def _persist(self) -> None:
        now = self._clock()
        actuation = self._controller.read()
        snapshot = Snapshot(now, self._mode, actuation, TimeTable(self._timetable.as_list()))
        entry = LogEntry(now, actuation, self._mode, self._timetable.suspended_hours())
        try:
            self._store.save(snapshot)
            self._store.append_log(entry)
        except OSError as ex:
            logger.error("Failed to persist supervisor state: %s", ex, exc_info=True)

    def _restore(self) -> None:
        try:
            snapshot = self._store.load()
        except SnapshotError as ex:
            logger.warning("Saved state unusable, starting with defaults: %s", ex)
            snapshot = None
        if snapshot is not None and snapshot.mode is SupervisorMode.UNDEFINED:
            logger.warning("Saved mode is %s, starting with defaults", snapshot.mode)
            snapshot = None
        if snapshot is None:
            snapshot = Snapshot.default(self._clock())

        self._mode = snapshot.mode
        self._timetable = snapshot.timetable
        if self._mode is SupervisorMode.TIMED:
            actuation = hysteresis.evaluate(
                self._timetable, self._clock(), self._lookahead
            )
        else:
            actuation = FORCED_ACTUATION[self._mode]
        self._actuate(actuation)
        logger.info(
            "Supervisor started in mode %s, heat pump %s, suspended hours %s",
            self._mode,
            actuation,
            self._timetable.suspended_hours(),
        )
