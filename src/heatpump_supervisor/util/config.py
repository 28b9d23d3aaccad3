"""Runtime configuration of the heat pump supervisor.

All settings come from environment variables, read once at process start by
`HeatpumpConfig.from_env()`. Tests build `HeatpumpConfig` instances directly.
"""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_STATE_DIR = "~/.heatpump"
DEFAULT_STATE_FILE = "heatpumpstate.json"
DEFAULT_LOG_FILE = "heatpump.log"
DEFAULT_TICK_INTERVAL = 10
DEFAULT_STAMP_PATTERN = "%d.%m.%y %H:%M:%S"
# BCM numbering, K1 drives Ochsner input 21, K2 drives input 43
DEFAULT_K1_PIN = 17
DEFAULT_K2_PIN = 27


@dataclass(frozen=True)
class HeatpumpConfig:
    """Locations, timing and wiring used by the supervisor.

    Attributes:
        state_dir: Directory holding the snapshot file and the transition log.
        state_file: File name of the JSON snapshot inside `state_dir`.
        log_file: File name of the append-only transition log inside `state_dir`.
        tick_interval: Seconds between two TICK events. Also the look-ahead
                       of the hysteresis rule.
        stamp_pattern: `strftime` pattern for snapshot and log timestamps.
        k1_pin: BCM pin number of relay K1.
        k2_pin: BCM pin number of relay K2.
        force_mock: Use the in-memory controller even on a Raspberry Pi.
    """

    state_dir: Path = Path(DEFAULT_STATE_DIR).expanduser()
    state_file: str = DEFAULT_STATE_FILE
    log_file: str = DEFAULT_LOG_FILE
    tick_interval: int = DEFAULT_TICK_INTERVAL
    stamp_pattern: str = DEFAULT_STAMP_PATTERN
    k1_pin: int = DEFAULT_K1_PIN
    k2_pin: int = DEFAULT_K2_PIN
    force_mock: bool = False

    @property
    def state_path(self) -> Path:
        return self.state_dir / self.state_file

    @property
    def log_path(self) -> Path:
        return self.state_dir / self.log_file

    @classmethod
    def from_env(cls) -> "HeatpumpConfig":
        """Builds the configuration from the process environment.

        Raises:
            ValueError: If a numeric variable does not hold an integer.
        """
        return cls(
            state_dir=Path(os.getenv("HEATPUMP_DIR", DEFAULT_STATE_DIR)).expanduser(),
            state_file=os.getenv("HEATPUMP_STATE_FILE", DEFAULT_STATE_FILE),
            log_file=os.getenv("HEATPUMP_LOG_FILE", DEFAULT_LOG_FILE),
            tick_interval=int(os.getenv("TICK_INTERVAL", str(DEFAULT_TICK_INTERVAL))),
            stamp_pattern=os.getenv("STAMP_PATTERN", DEFAULT_STAMP_PATTERN),
            k1_pin=int(os.getenv("K1_PIN", str(DEFAULT_K1_PIN))),
            k2_pin=int(os.getenv("K2_PIN", str(DEFAULT_K2_PIN))),
            force_mock=os.getenv("HEATPUMP_MOCK", "false").lower()
            in ("1", "true", "yes"),
        )


def redis_url() -> str:
    """Assembles the broker URL from REDIS_HOST, REDIS_PORT and REDIS_PASSWORD."""
    redis_password = os.getenv("REDIS_PASSWORD", "")
    redis_host = os.getenv("REDIS_HOST", "localhost")
    redis_port = os.getenv("REDIS_PORT", "6379")
    return f"redis://:{redis_password}@{redis_host}:{redis_port}"
