"""This package contains the supervisor logic of the heat pump.

The key modules within this package include:
- `states.py`: The `SupervisorMode`, `ActuationState` and `Event` types and the
  explicit parsing of requested mode names.
- `timetable.py`: The `TimeTable` class, a fixed 24 entry suspend schedule.
- `hysteresis.py`: The rule deciding the actuation state in TIMED mode from
  the current hour and the hour one tick ahead.
- `state_machine.py`: The `Supervisor` class, which applies events under a
  lock, switches the controller and persists every recorded transition.
"""
