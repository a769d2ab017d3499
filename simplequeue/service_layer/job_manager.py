"""
Business logic for the job lifecycle.

This module contains the JobManager class which validates hooks, creates
and schedules jobs, executes them through the hook registry and records
their terminal state.  It is the only component that changes a job's
status.

Status moves along PENDING -> PROCESSING -> (COMPLETED | FAILED).  The
PROCESSING step is a conditional write (``JobRepository.claim``) so that a
job runs at most once even if the scheduler fires twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
import logging
from typing import Any, Optional

from simplequeue.domain import Job, JobStatus
from simplequeue.errors import (
    ExecutionFault,
    InvalidHook,
    InvalidStatus,
    JobNotPending,
    NoResults,
    NotQueueable,
    QueueError,
    ScheduleFailed,
)
from simplequeue.hooks import HookRegistry
from simplequeue.repository import JobRepository
from simplequeue.scheduler import Scheduler
from simplequeue.utils import utcNow

LOG = logging.getLogger(__name__)


@dataclass
class Outcome:
    """
    Result of one execution attempt.

    ``status`` is the status the attempt left in storage, or None when the
    job could not be read.  ``error`` is None only for a completed job.
    """

    job_id: int
    status: Optional[JobStatus] = None
    value: Any = None
    error: Optional[QueueError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class JobManager:
    """
    Service for the job lifecycle.

    Collaborators are passed in explicitly:
    - repo: persistence of job rows
    - registry: hook handlers and the queueable allow-list
    - scheduler: trigger that later calls ``execute`` with the job id
    """

    def __init__(
        self,
        repo: JobRepository,
        registry: HookRegistry,
        scheduler: Scheduler,
        schedule_delay: float = 0,
    ):
        self.repo = repo
        self.registry = registry
        self.scheduler = scheduler
        self.schedule_delay = schedule_delay

    def validate_hook(self, hook: str) -> bool:
        """
        Check that ``hook`` may be queued and has a handler.

        Raises:
            NotQueueable: If the hook is not on the allow-list
            InvalidHook: If no handler is registered for the hook
        """
        if not self.registry.is_queueable(hook):
            raise NotQueueable(data={"hook": hook})

        if not self.registry.has_listener(hook):
            raise InvalidHook(data={"hook": hook})

        return True

    def create(self, hook: str) -> int:
        """
        Create a pending job and schedule its execution.

        Returns:
            The new job id

        Raises:
            ValidationError: If the hook is not valid
            StorageFailure: If the job could not be stored
            ScheduleFailed: If the scheduler refused the job; the job row
                stays pending
        """
        self.validate_hook(hook)

        job_id = self.repo.create(hook)
        LOG.info("Created job %d for hook %r", job_id, hook)

        run_at = utcNow() + timedelta(seconds=self.schedule_delay)
        try:
            self.scheduler.schedule(self.execute, job_id, run_at)
        except Exception as exc:
            LOG.warning("Failed to schedule job %d", job_id, exc_info=True)
            error = ScheduleFailed(data={"job_id": job_id})
            error.add_data(exc, "event")
            raise error from exc

        return job_id

    def _record_failure(self, job: Job, error: QueueError) -> None:
        try:
            self.repo.failed(job.id, error)
        except QueueError as updateError:
            LOG.error("Failed to record failure of job %d: %s", job.id, updateError)
            error.add_data(updateError, "update")
        else:
            LOG.info("Job %d failed: %s", job.id, error)

    def execute(self, job_id: int) -> Outcome:
        """
        Run the handlers of a pending job and record the outcome.

        Nothing raised by the repository or the handlers escapes; every
        failure is reported through ``Outcome.error``.
        """
        try:
            job = self.repo.find(job_id)
            if job.is_pending():
                claimed = self.repo.claim(job.id)
                if not claimed:
                    # Another execution claimed it between find and claim.
                    job.status = JobStatus.PROCESSING
        except QueueError as error:
            LOG.warning("Cannot execute job %d: %s", job_id, error)
            return Outcome(job_id, error=error)

        if not job.is_pending():
            error = JobNotPending(data={"status": job.state_str()})
            LOG.warning("Job %d was not pending (%s)", job_id, job.state_str())
            return Outcome(job_id, status=JobStatus.fromCode(job.status), error=error)

        # The hook may have been unregistered since the job was created.
        try:
            self.validate_hook(job.hook)
        except QueueError as error:
            self._record_failure(job, error)
            return Outcome(job_id, status=JobStatus.FAILED, error=error)

        try:
            value = self.registry.dispatch(job.hook, None)
        except QueueError as error:
            self._record_failure(job, error)
            return Outcome(job_id, status=JobStatus.FAILED, error=error)
        except Exception as exc:  # pylint: disable=broad-except
            LOG.warning("Job %d raised", job_id, exc_info=True)
            error = ExecutionFault(str(exc) or None,
                                   data={"exception": type(exc).__name__})
            self._record_failure(job, error)
            return Outcome(job_id, status=JobStatus.FAILED, error=error)

        try:
            self.repo.complete(job.id, value)
        except QueueError as updateError:
            LOG.error("Failed to record completion of job %d: %s",
                      job_id, updateError)
            updateError.add_data(value, "result")
            return Outcome(job_id, status=JobStatus.PROCESSING, value=value,
                           error=updateError)

        LOG.info("Completed job %d", job_id)
        return Outcome(job_id, status=JobStatus.COMPLETED, value=value)

    def status(self, job_id: int) -> str:
        """
        Return the canonical status name of a job.

        Raises:
            NotFound: If the job does not exist
            InvalidStatus: If the stored status code is unknown
        """
        job = self.repo.find(job_id)
        if not isinstance(job.status, JobStatus):
            raise InvalidStatus(data={"status": job.status})
        return job.status.label

    def results(self, job_id: int) -> Any:
        """
        Return the results of a job.

        Raises:
            NotFound: If the job does not exist
            NoResults: If the job has not finished yet
        """
        job = self.repo.find(job_id)
        if not job.has_results():
            raise NoResults(data={"status": job.state_str()})
        return job.results

    def delete(self, job_id: int) -> bool:
        """
        Delete a job.

        Raises:
            NotFound: If the job does not exist
            DeleteFailure: If the job could not be removed
        """
        self.repo.find(job_id)
        self.repo.delete(job_id)
        LOG.info("Deleted job %d", job_id)
        return True

    def find(self, job_id: int) -> Job:
        return self.repo.find(job_id)
