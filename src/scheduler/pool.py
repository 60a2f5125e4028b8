"""Concurrent job execution with in-order result streaming.

Pipeline: problems are pulled lazily from the caller's iterable, at most
`capacity` of them are outstanding (running, queued, or finished but held
in the reorder buffer), a fixed pool of workers runs them, and the single
consumer yields Results strictly in submission order.

Any capacity >= 1 is correct. The oldest outstanding id is never in the
buffer (it would have been drained), so it is always pending and waiting
on pending futures always makes progress.
"""

import logging
import os
import threading
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import (
    FIRST_COMPLETED,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)

from src.config.experiment import EXECUTORS, SchedulerConfig
from src.scheduler.reorder import ReorderBuffer
from src.simulation.job import SimulationJob
from src.simulation.types import Problem, Result

log = logging.getLogger(__name__)

# job(problem, should_stop) -> Result; should_stop is None in worker processes
Job = Callable[[Problem, Callable[[], bool] | None], Result]


def default_worker_count(reserve: int = 2) -> int:
    """Available CPUs minus a small reservation, never below 1."""
    return max(1, (os.cpu_count() or 1) - reserve)


class JobScheduler:
    """Fan Problems out to a worker pool and fan Results back in, in order.

    Jobs must be picklable for the process executor (module-level callables
    or SimulationJob instances). With the thread executor each job receives
    a stop check wired to cancel(); worker processes cannot share it and
    only their pending jobs are cancelled.
    """

    def __init__(
        self,
        job: Job | None = None,
        worker_count: int | None = None,
        capacity: int = 32,
        executor: str = "process",
    ) -> None:
        if worker_count is None:
            worker_count = default_worker_count()
        if worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {worker_count}")
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if executor not in EXECUTORS:
            raise ValueError(
                f"executor must be one of {EXECUTORS}, got {executor!r}"
            )

        self.job: Job = job if job is not None else SimulationJob()
        self.worker_count = worker_count
        self.capacity = capacity
        self.executor = executor
        self._stop = threading.Event()

    @classmethod
    def from_config(
        cls, config: SchedulerConfig, job: Job | None = None
    ) -> "JobScheduler":
        return cls(
            job=job,
            worker_count=config.workers,
            capacity=config.capacity,
            executor=config.executor,
        )

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def cancel(self) -> None:
        """Stop submitting, cancel queued jobs and end the result stream.

        Safe to call from another thread or a signal handler. Cancellation
        is permanent: a run started after cancel() yields nothing, so use a
        new scheduler for another sweep.
        """
        self._stop.set()

    def _make_executor(self) -> Executor:
        if self.executor == "thread":
            return ThreadPoolExecutor(
                max_workers=self.worker_count,
                thread_name_prefix="route-worker",
            )
        return ProcessPoolExecutor(max_workers=self.worker_count)

    def run(self, problems: Iterable[Problem]) -> Iterator[Result]:
        """Execute problems concurrently, yielding Results in id order.

        Args:
            problems: Problems with strictly increasing ids. Consumed lazily.

        Yields:
            One Result per Problem, in submission order, until the input is
            exhausted or cancel() is called.

        Raises:
            SchedulerError: If ids are not strictly increasing.
            Exception: Whatever a job raised; search failures are Results,
                so an exception here is a bug and aborts the run.
        """
        log.info(
            "Worker count: %d (%s executor, capacity %d)",
            self.worker_count, self.executor, self.capacity,
        )
        should_stop = self._stop.is_set if self.executor == "thread" else None
        source = iter(problems)
        exhausted = False
        buffer: ReorderBuffer[Result] = ReorderBuffer()
        pending: set[Future] = set()

        pool = self._make_executor()
        try:
            while True:
                # Top up to capacity; blocks the producer once the window is full
                while not exhausted and not self.cancelled and buffer.awaiting < self.capacity:
                    problem = next(source, None)
                    if problem is None:
                        exhausted = True
                        break
                    buffer.expect(problem.id)
                    pending.add(pool.submit(self.job, problem, should_stop))

                if self.cancelled:
                    log.info(
                        "Cancelled with %d jobs outstanding", buffer.awaiting
                    )
                    return
                if not pending:
                    break

                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    result = future.result()
                    buffer.push(result)
                    log.debug(
                        "Done: id=%d, next_id=%s, buffered=%d",
                        result.id, buffer.next_id, len(buffer),
                    )
                for result in buffer.drain():
                    if self.cancelled:
                        return
                    yield result
        finally:
            for future in pending:
                future.cancel()
            pool.shutdown(wait=True, cancel_futures=True)
