"""Main application module of the heat pump supervisor.

This module wires the components of the application together:
- The single `Supervisor` of the process, created on first use from the
  environment configuration, with the controller matching the platform.
- A background scheduler firing a TICK event every tick interval, the only
  event source of the supervisor that is not a client request.
- A Redis-based message broker delivering client requests via RPC.
"""

import asyncio
import threading
from typing import Optional

from apscheduler.events import EVENT_JOB_ERROR, JobExecutionEvent
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from faststream import FastStream
from faststream.redis import RedisBroker

from heatpump_supervisor.api.rpc import heatpump_router
from heatpump_supervisor.devices.helper import create_controller
from heatpump_supervisor.store.persistence import PersistenceStore
from heatpump_supervisor.supervisor.state_machine import Supervisor
from heatpump_supervisor.supervisor.states import Event, EventKind
from heatpump_supervisor.util.config import HeatpumpConfig, redis_url
from heatpump_supervisor.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)
scheduler = BackgroundScheduler()
TICK_JOB_ID = "supervisor_tick"

_supervisor: Optional[Supervisor] = None
_supervisor_lock = threading.Lock()


def get_supervisor() -> Supervisor:
    """Returns the process wide supervisor, creating it on first call.

    Raises:
        PersistenceError: If the state directory cannot be created.
    """
    global _supervisor
    with _supervisor_lock:
        if _supervisor is None:
            config = HeatpumpConfig.from_env()
            _supervisor = Supervisor(
                create_controller(config), PersistenceStore(config), config
            )
        return _supervisor


def tick_failed_listener(event: JobExecutionEvent) -> None:
    """Listener called by the scheduler when a tick raised an exception.

    Args:
        event: The `JobExecutionEvent` carrying the exception.
    """
    logger.error("Tick %s failed: %s", event.job_id, event.exception)


scheduler.add_listener(tick_failed_listener, EVENT_JOB_ERROR)


def start_ticker(supervisor: Supervisor, tick_interval: int) -> None:
    """Schedules the periodic TICK event and starts the scheduler.

    A tick is never run twice in parallel, and ticks missed while the
    process was busy are coalesced into one.

    Args:
        supervisor: The supervisor receiving the ticks.
        tick_interval: Seconds between two ticks.
    """
    tick = Event(EventKind.TICK)
    logger.info("Scheduling supervisor tick every %d s", tick_interval)
    scheduler.add_job(
        supervisor.apply,
        trigger=IntervalTrigger(seconds=tick_interval),
        args=[tick],
        id=TICK_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    if not scheduler.running:
        scheduler.start()


def stop_ticker() -> None:
    """Stops the periodic TICK event, waiting for a running tick to finish."""
    if scheduler.running:
        logger.info("Stopping supervisor tick")
        scheduler.shutdown(wait=True)


def main() -> None:
    """Main entry point of the heat pump supervisor.

    Restores the supervisor, starts the ticker and serves client requests
    from Redis until the process is stopped. On the way out the ticker is
    stopped and the heat pump is returned to normal operation.
    """
    config = HeatpumpConfig.from_env()
    supervisor = get_supervisor()
    start_ticker(supervisor, config.tick_interval)

    # Redis event broker setup
    broker = RedisBroker(redis_url())
    broker.include_router(heatpump_router)
    broker_events_app = FastStream(broker)

    try:
        asyncio.run(broker_events_app.run())
    finally:
        stop_ticker()
        supervisor.shutdown()


if __name__ == "__main__":
    main()
