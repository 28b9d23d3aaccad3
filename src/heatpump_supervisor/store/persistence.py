"""This module makes the supervisor's mode and schedule durable across restarts.

It defines the `PersistenceStore` class which manages two files in the state
directory:

- a JSON snapshot of the current mode, actuation state and time table,
  overwritten after every recorded transition, and
- an append-only transition log with one human readable line per transition.

The store itself raises on unreadable snapshots (`SnapshotError`); falling
back to defaults is the responsibility of the supervisor.
"""

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from heatpump_supervisor.exceptions import PersistenceError, SnapshotError
from heatpump_supervisor.supervisor.states import (
    ActuationState,
    SupervisorMode,
    actuation_from_name,
    mode_from_name,
)
from heatpump_supervisor.supervisor.timetable import TimeTable
from heatpump_supervisor.util.config import HeatpumpConfig
from heatpump_supervisor.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)

# Attempts to create the state directory before giving up
DIRECTORY_ATTEMPTS = 2


@dataclass
class Snapshot:
    """Durable point-in-time record of the supervisor state."""

    timestamp: datetime
    mode: SupervisorMode
    actuation: ActuationState
    timetable: TimeTable = field(default_factory=TimeTable)

    @classmethod
    def default(cls, timestamp: datetime | None = None) -> "Snapshot":
        return cls(
            timestamp or datetime.now(),
            SupervisorMode.NORMAL,
            ActuationState.NORMAL,
            TimeTable(),
        )


@dataclass(frozen=True)
class LogEntry:
    """One line of the transition log."""

    timestamp: datetime
    actuation: ActuationState
    mode: SupervisorMode
    suspended_hours: List[int]


class PersistenceStore:
    """Reads and writes the snapshot file and appends to the transition log.

    The state directory is created when the store is constructed. If it is
    still missing after two attempts a `PersistenceError` is raised, which
    aborts the start of the supervisor.
    """

    def __init__(self, config: HeatpumpConfig) -> None:
        self._stamp_pattern = config.stamp_pattern
        self.directory = self._ensure_directory(Path(config.state_dir))
        self.state_path = self.directory / config.state_file
        self.log_path = self.directory / config.log_file

    @staticmethod
    def _ensure_directory(directory: Path) -> Path:
        for attempt in range(1, DIRECTORY_ATTEMPTS + 1):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as ex:
                logger.warning(
                    "Attempt %d to create state directory %s failed: %s",
                    attempt,
                    directory,
                    ex,
                )
            if directory.is_dir():
                return directory
        raise PersistenceError(f"State directory {directory} cannot be created")

    def save(self, snapshot: Snapshot) -> None:
        """Overwrites the snapshot file with `snapshot`.

        The file is written to a temporary file first and then moved into
        place, so a crash never leaves a half written snapshot behind.

        Raises:
            PersistenceError: If the state directory is gone and cannot be
                              created again.
        """
        self._ensure_directory(self.directory)
        content = json.dumps(self._encode(snapshot))
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self.state_path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        logger.debug("Saved snapshot to %s: %s", self.state_path, content)

    def load(self) -> Optional[Snapshot]:
        """Reads the last saved snapshot.

        Returns:
            The snapshot, or None if nothing has been saved yet.

        Raises:
            SnapshotError: If the file exists but cannot be read or decoded.
        """
        if not self.state_path.exists():
            logger.info("No saved state found at %s", self.state_path)
            return None
        try:
            with open(self.state_path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as ex:
            raise SnapshotError(f"Cannot read {self.state_path}: {ex}") from ex
        return self._decode(raw)

    def append_log(self, entry: LogEntry) -> None:
        """Appends one line to the transition log, recreating the directory if needed."""
        self._ensure_directory(self.directory)
        line = self.format_log_line(entry)
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

    def format_log_line(self, entry: LogEntry) -> str:
        return (
            f"{entry.timestamp.strftime(self._stamp_pattern)}: "
            f"{entry.actuation}, {entry.mode}, {entry.suspended_hours}"
        )

    def read_log(self) -> List[str]:
        """Returns all transition log lines, oldest first."""
        if not self.log_path.exists():
            return []
        with open(self.log_path, encoding="utf-8") as f:
            return f.read().splitlines()

    def _encode(self, snapshot: Snapshot) -> Dict[str, Any]:
        return {
            "timestamp": snapshot.timestamp.strftime(self._stamp_pattern),
            "supervisorState": snapshot.mode.value,
            "controlerState": snapshot.actuation.value,
            "timetable": snapshot.timetable.as_list(),
        }

    def _decode(self, raw: Any) -> Snapshot:
        if not isinstance(raw, dict):
            raise SnapshotError(f"Snapshot must be a JSON object, got {raw!r}")
        try:
            timestamp = datetime.strptime(raw["timestamp"], self._stamp_pattern)
            mode = mode_from_name(raw["supervisorState"])
            actuation = actuation_from_name(raw["controlerState"])
            timetable = TimeTable(raw["timetable"])
        except (KeyError, TypeError, ValueError) as ex:
            raise SnapshotError(f"Invalid snapshot in {self.state_path}: {ex}") from ex
        return Snapshot(timestamp, mode, actuation, timetable)
