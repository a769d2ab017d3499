"""
Scheduler triggers.

A scheduler registers a one-shot future call of ``callback(job_id)``.  The
job manager never waits on it.  ``schedule`` raises when the registration
itself fails; it never reports errors raised later by the callback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
import logging
import time
from typing import Any, Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from simplequeue.utils import utcNow

LOG = logging.getLogger(__name__)

Callback = Callable[[int], Any]


class Scheduler(ABC):
    @abstractmethod
    def schedule(self, callback: Callback, job_id: int,
                 run_at: Optional[datetime] = None) -> None:
        """Register a single future ``callback(job_id)`` at ``run_at``."""


class InlineScheduler(Scheduler):
    """Runs the callback immediately, in the caller's thread."""

    def schedule(self, callback, job_id, run_at=None):
        LOG.debug("running job %d inline", job_id)
        callback(job_id)


class BackgroundJobScheduler(Scheduler):
    """
    One APScheduler "date" job per queued job, keyed by the job id.

    A second registration for an id that is still waiting raises
    ``ConflictingIdError``.  Date jobs are dropped by APScheduler once they
    have fired.
    """

    def __init__(self, scheduler: Optional[BackgroundScheduler] = None):
        self.scheduler = scheduler or BackgroundScheduler(timezone=timezone.utc)

    def schedule(self, callback, job_id, run_at=None):
        if not self.scheduler.running:
            self.scheduler.start()
        self.scheduler.add_job(
            callback,
            "date",
            run_date=run_at or utcNow(),
            args=[job_id],
            id=str(job_id),
            name="simplequeue job %d" % job_id,
            misfire_grace_time=None,
        )
        LOG.debug("scheduled job %d at %s", job_id, run_at)

    def pending(self) -> int:
        if not self.scheduler.running:
            return 0
        return len(self.scheduler.get_jobs())

    def wait(self, poll: float = 0.05) -> None:
        """Block until every registered job has fired, then shut down."""
        while self.pending():
            time.sleep(poll)
        self.shutdown(wait=True)

    def shutdown(self, wait: bool = False) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
