"""This package connects clients to the supervisor.

- `commands.py`: decodes client requests into supervisor events and builds
  the status payload returned to clients.
- `rpc.py`: FastStream Redis subscribers for mode changes, time table edits
  and status queries.
"""
