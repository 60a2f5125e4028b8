"""Job scheduling module: worker pool fan-out with in-order fan-in."""

from src.scheduler.pool import Job, JobScheduler, default_worker_count
from src.scheduler.reorder import ReorderBuffer, SchedulerError

__all__ = [
    "Job",
    "JobScheduler",
    "ReorderBuffer",
    "SchedulerError",
    "default_worker_count",
]
