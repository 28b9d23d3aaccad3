"""Exceptions raised by the heat pump supervisor."""


class HeatpumpError(Exception):
    """Base class for all supervisor errors."""


class PersistenceError(HeatpumpError):
    """The state directory cannot be created or used. Fatal at start-up."""


class SnapshotError(HeatpumpError):
    """A persisted snapshot exists but cannot be decoded."""


class ActuationError(HeatpumpError):
    """The controller did not reach the commanded state, even after a retry."""


class SupervisorShutDownError(HeatpumpError):
    """The supervisor was used after its controller had been released."""
