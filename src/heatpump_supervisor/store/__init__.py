"""
The `store` package persists the supervisor state.

- [`persistence.py`](src/heatpump_supervisor/store/persistence.py): defines the
  `Snapshot` and `LogEntry` records and the `PersistenceStore`, which writes
  the JSON snapshot file, appends to the transition log and reloads the last
  snapshot when the supervisor starts.
"""
