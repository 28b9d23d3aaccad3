"""
The `util` package collects general-purpose helpers shared by the supervisor.

- [`logging.py`](src/heatpump_supervisor/util/logging.py): the `LoggingUtil`
  class handing out consistently formatted loggers whose level follows the
  `LOGLEVEL` environment variable.
- [`config.py`](src/heatpump_supervisor/util/config.py): the `HeatpumpConfig`
  dataclass with file locations, tick interval, timestamp pattern and relay
  wiring, read from environment variables.
"""
