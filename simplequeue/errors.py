"""
Error taxonomy for the job queue.

Every failure the queue reports carries a machine readable ``code``, a human
readable ``message`` and a ``data`` dict of auxiliary context.  Secondary
failures (for example a failed write while recording another failure) are
attached to the primary error through ``add_data`` rather than replacing it.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class QueueError(Exception):
    """Base class for all job queue errors."""

    code = "queue_error"
    defaultMessage = "Job queue error."

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None,
                 data: Optional[Dict[str, Any]] = None):
        self.message = message or self.defaultMessage
        if code is not None:
            self.code = code
        self.data: Dict[str, Any] = dict(data) if data else {}
        super().__init__(self.message)

    def add_data(self, value: Any, key: str) -> None:
        """Attach auxiliary context under ``key``."""
        self.data[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "data": {key: _dataToDict(value) for key, value in self.data.items()},
        }

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueueError):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = Exception.__hash__


def _dataToDict(value):
    if isinstance(value, QueueError):
        return value.to_dict()
    if isinstance(value, BaseException):
        return {"code": type(value).__name__, "message": str(value), "data": {}}
    return value


class ValidationError(QueueError):
    code = "invalid_job"
    defaultMessage = "The job failed validation."


class NotQueueable(ValidationError):
    code = "not_queueable"
    defaultMessage = "The provided hook is not queueable."


class InvalidHook(ValidationError):
    code = "invalid_hook"
    defaultMessage = "No listeners found for the provided hook."


class StorageFailure(QueueError):
    code = "storage_failed"
    defaultMessage = "Failed to write the job."


class DeleteFailure(QueueError):
    code = "job_delete_failed"
    defaultMessage = "Failed to delete the specified job."


class NotFound(QueueError):
    code = "job_not_found"
    defaultMessage = "The specified job could not be found."


class ScheduleFailed(QueueError):
    code = "schedule_failed"
    defaultMessage = "Failed to schedule the job."


class InvalidStatus(QueueError):
    code = "invalid_status"
    defaultMessage = "The job has an invalid status."


class ExecutionFault(QueueError):
    code = "job_execution_failed"
    defaultMessage = "The job raised an unexpected error."


class HookError(QueueError):
    """Raised (or returned) by a hook handler to fail the job."""

    code = "hook_failed"
    defaultMessage = "The hook handler reported an error."


class JobNotPending(QueueError):
    code = "job_not_pending"
    defaultMessage = "The job is not pending and cannot be executed."


class NoResults(QueueError):
    code = "no_results"
    defaultMessage = "No results available for the specified job."


ERROR_TYPES = {
    cls.code: cls for cls in (
        ValidationError,
        NotQueueable,
        InvalidHook,
        StorageFailure,
        DeleteFailure,
        NotFound,
        ScheduleFailed,
        InvalidStatus,
        ExecutionFault,
        HookError,
        JobNotPending,
        NoResults,
    )
}
ERROR_TYPES["insert_failed"] = StorageFailure
ERROR_TYPES["update_failed"] = StorageFailure
ERROR_TYPES["select_failed"] = StorageFailure


def fromDict(payload: Dict[str, Any]) -> QueueError:
    """Rebuild an error from ``QueueError.to_dict`` output."""
    code = payload.get("code", QueueError.code)
    cls = ERROR_TYPES.get(code, QueueError)
    data = {}
    for key, value in (payload.get("data") or {}).items():
        if isinstance(value, dict) and isErrorDict(value):
            value = fromDict(value)
        data[key] = value
    return cls(payload.get("message"), code=code, data=data)


def isErrorDict(value: Dict[str, Any]) -> bool:
    return set(value) == {"code", "message", "data"}
