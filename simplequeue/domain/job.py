"""
Pure domain model for jobs.

This module contains the Job dataclass which represents a queued unit of
work with no coupling to the database layer. All persistence logic is
handled by the repository layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Optional, Union


class JobStatus(IntEnum):
    """Job lifecycle states, stored by their integer code."""

    PENDING = 0  # Created, waiting for the scheduler
    PROCESSING = 1  # Claimed by an execution
    COMPLETED = 2  # Handler chain returned a value
    FAILED = 3  # Validation, handler or execution error

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def fromCode(cls, code: int) -> Union[JobStatus, int]:
        """Return the matching status, or the raw code if it is unknown."""
        try:
            return cls(code)
        except ValueError:
            return code


@dataclass
class Job:
    """
    Pure domain model representing a queued job.

    ``status`` normally holds a JobStatus; a stored code outside the known
    range is kept as a plain int so that callers can report it.
    """

    id: int
    hook: str
    status: Union[JobStatus, int] = JobStatus.PENDING
    results: Any = None
    create_time: Optional[datetime] = None
    update_time: Optional[datetime] = None

    def is_pending(self) -> bool:
        return self.status == JobStatus.PENDING

    def has_results(self) -> bool:
        return self.results is not None and self.results != ""

    def state_str(self) -> str:
        """Return human-readable state string."""
        if isinstance(self.status, JobStatus):
            return self.status.label
        return f"unknown({self.status})"

    def __str__(self) -> str:
        return f"[{self.id}] {self.hook} {self.state_str()}"
