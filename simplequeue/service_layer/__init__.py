"""
Service layer for business logic.

This package contains the service layer which implements the job
lifecycle and orchestrates between the domain, the repository and the
hook registry.
"""

from .job_manager import JobManager, Outcome

__all__ = ["JobManager", "Outcome"]
