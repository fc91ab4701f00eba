"""Runtime services: telemetry and timer scheduling."""

from .scheduler import (
    AsyncioScheduler,
    PendingTimer,
    PollingScheduler,
    ScheduledTask,
    Scheduler,
)

__all__ = [
    "AsyncioScheduler",
    "PendingTimer",
    "PollingScheduler",
    "ScheduledTask",
    "Scheduler",
]
