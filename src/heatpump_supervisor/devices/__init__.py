"""This package defines the heat pump controllers the supervisor can actuate.

The key modules within this package include:
- `controller.py`: Defines the abstract base class `HeatpumpController` with
  the `read`, `write` and `shutdown` operations every controller provides.
- `relay_controller.py`: Implements `HeatpumpController` on top of two GPIO
  driven relays wired to the smart grid inputs of the heat pump.
- `mock_controller.py`: An in-memory implementation used on development
  machines and in tests.
- `helper.py`: Platform detection and `create_controller`, which picks the
  implementation once at process start.
"""
