"""
The `heatpump_supervisor` package operates the smart grid input of a heat pump.

It keeps one authoritative operating mode and drives two relays on the smart
grid terminals of the heat pump accordingly:

1.  **NORMAL:** the heat pump runs without restrictions.
2.  **SUSPENDED:** the heat pump is blocked until another mode is chosen.
3.  **TIMED:** the heat pump is blocked during the hours flagged in a 24 hour
    time table. The table is checked on every tick (every 10 seconds by
    default), looking one tick ahead so that the relays do not chatter at
    hour boundaries.

A malformed mode request moves the supervisor into the UNDEFINED trap state,
which is reported to clients as an alert and left only by restarting the
process. Mode and time table are saved after every recorded transition and
restored on start-up; a transition log keeps the history.

Sub-packages:
-------------
- `supervisor`:
  The state machine, its event and state types, the time table and the
  hysteresis rule used in TIMED mode.

- `store`:
  The JSON snapshot and the append-only transition log.

- `devices`:
  The `HeatpumpController` interface with a GPIO relay implementation for the
  Raspberry Pi and an in-memory mock for every other machine.

- `api`:
  Request decoding and the Redis RPC subscribers through which clients
  switch modes, edit the time table and query the status.

- `util`:
  Logging and environment based configuration.
"""
