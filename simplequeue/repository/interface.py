"""
Repository interface for job persistence.

This module defines the abstract interface that all repository
implementations must follow.  Repositories are a pure CRUD boundary: they
never validate hooks or decide on status transitions.
"""

from abc import ABC, abstractmethod
from typing import Any

from simplequeue.domain import Job, JobStatus
from simplequeue.errors import QueueError


class JobRepository(ABC):
    """
    Abstract repository for job persistence.

    Every operation raises a QueueError subclass when the storage medium
    cannot satisfy it.
    """

    @abstractmethod
    def create(self, hook: str) -> int:
        """
        Insert a new pending job with empty results.

        Args:
            hook: The hook name the job will invoke

        Returns:
            The new job id

        Raises:
            StorageFailure: If the insert failed
        """

    @abstractmethod
    def update(self, job_id: int, status: JobStatus, result: Any) -> bool:
        """
        Overwrite the status and results of an existing job.

        Raises:
            StorageFailure: If no row matched or the write failed
        """

    def complete(self, job_id: int, result: Any) -> bool:
        """Mark the job as completed with the handler result."""
        return self.update(job_id, JobStatus.COMPLETED, result)

    def failed(self, job_id: int, error: QueueError) -> bool:
        """Mark the job as failed with the error as its results."""
        return self.update(job_id, JobStatus.FAILED, error)

    @abstractmethod
    def claim(self, job_id: int) -> bool:
        """
        Move a pending job to processing.

        Returns:
            True if this call made the transition, False if the job was not
            pending any more

        Raises:
            StorageFailure: If the write failed
        """

    @abstractmethod
    def find(self, job_id: int) -> Job:
        """
        Fetch one job.

        Raises:
            NotFound: If no job has that id
        """

    @abstractmethod
    def delete(self, job_id: int) -> bool:
        """
        Remove a job.

        Raises:
            DeleteFailure: If the row could not be removed
        """

    @abstractmethod
    def close(self) -> None:
        """Close repository and release resources."""
