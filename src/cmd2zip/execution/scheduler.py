"""
Fan-out of commands over a fixed-size worker pool.

The dispatch loop submits each command without waiting for earlier ones;
the pool queues anything beyond its size. Every job blocks its worker for
the lifetime of its child process, which caps the number of concurrent
children at the pool size. Once input is exhausted the scheduler waits for
the in-flight counter to drop to zero and finalizes the archive once.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from cmd2zip.archive.sink import ArchiveSink
from cmd2zip.core.config import resolve_thread_count
from cmd2zip.execution.job_runner import JobResult, JobRunner
from cmd2zip.execution.sources import is_comment

logger = logging.getLogger(__name__)


class TaskCounter:
    """In-flight job counter that can be waited on until it reaches zero."""

    def __init__(self):
        self._count = 0
        self._condition = threading.Condition()

    @property
    def value(self) -> int:
        with self._condition:
            return self._count

    def increment(self) -> None:
        with self._condition:
            self._count += 1

    def decrement(self) -> None:
        with self._condition:
            if self._count == 0:
                raise RuntimeError("TaskCounter decremented below zero")
            self._count -= 1
            if self._count == 0:
                self._condition.notify_all()

    def wait_for_zero(self, timeout: Optional[float] = None) -> bool:
        """Block until no jobs are in flight; False if the timeout expired first."""
        with self._condition:
            return self._condition.wait_for(lambda: self._count == 0, timeout=timeout)


class RunSummary(BaseModel):
    """What a scheduler run dispatched and archived."""
    dispatched: int = 0
    comments: int = 0
    blank_lines: int = 0
    skipped: int = 0
    limit_reached: bool = False
    results: List[JobResult] = Field(default_factory=list)

    @property
    def failed(self) -> List[JobResult]:
        return [result for result in self.results if not result.success]

    @property
    def entry_names(self) -> List[str]:
        return [result.name for result in self.results]


class ExecutionScheduler:
    """
    Dispatches commands to a JobRunner on a thread pool.

    Args:
        runner: Job runner executed for every dispatched command
        sink: Archive the runner writes to; finalized once at the end of run()
        threads: Pool size; 0 uses every available core
        limit: Maximum number of commands to dispatch; comments don't count
    """

    def __init__(
        self,
        runner: JobRunner,
        sink: ArchiveSink,
        threads: int = 0,
        limit: Optional[int] = None,
    ):
        self.runner = runner
        self.sink = sink
        self.threads = resolve_thread_count(threads)
        self.limit = limit
        self.tasks = TaskCounter()
        self._abort = threading.Event()
        self._lock = threading.Lock()
        self._fatal: Optional[BaseException] = None
        self._results: List[JobResult] = []
        self._skipped = 0

    def run(self, commands: Iterable[str]) -> RunSummary:
        """
        Run every command and finalize the archive.

        Comment lines are echoed to the log and never dispatched. The first
        fatal error raised by a job stops further dispatch; jobs already
        running finish, queued ones are skipped, the archive is aborted and
        the error is re-raised here.

        Raises:
            Cmd2ZipError: The first fatal error raised by any job, or an
                archive error while finalizing
        """
        summary = RunSummary()
        logger.debug("Starting worker pool with %d threads", self.threads)

        try:
            with ThreadPoolExecutor(max_workers=self.threads, thread_name_prefix="cmd2zip-worker") as pool:
                self._dispatch(commands, pool, summary)
                logger.info("Waiting for all children to finish...")
                self.tasks.wait_for_zero()
        except BaseException:
            # The command source itself failed; running jobs have drained
            self.sink.abort()
            raise

        summary.results = list(self._results)
        summary.skipped = self._skipped

        if self._fatal is not None:
            self.sink.abort()
            raise self._fatal

        self.sink.finalize()
        logger.info("Done: %d entries written, %d failed", len(summary.results), len(summary.failed))
        return summary

    def _dispatch(self, commands: Iterable[str], pool: ThreadPoolExecutor, summary: RunSummary) -> None:
        for command in commands:
            if self._abort.is_set():
                break
            if not command.strip():
                summary.blank_lines += 1
                continue
            if is_comment(command):
                logger.info("## %s", command[1:])
                summary.comments += 1
                continue
            if self.limit is not None and summary.dispatched >= self.limit:
                logger.warning("Reached command limit of %d, ignoring remaining commands", self.limit)
                summary.limit_reached = True
                break

            self.tasks.increment()
            summary.dispatched += 1
            pool.submit(self._run_job, command)

    def _run_job(self, command: str) -> None:
        try:
            if self._abort.is_set():
                with self._lock:
                    self._skipped += 1
                return
            result = self.runner.run(command)
            with self._lock:
                self._results.append(result)
        except Exception as e:  # re-raised from run() once the pool drains
            logger.error("Aborting run: %s", e)
            with self._lock:
                if self._fatal is None:
                    self._fatal = e
            self._abort.set()
        finally:
            self.tasks.decrement()
