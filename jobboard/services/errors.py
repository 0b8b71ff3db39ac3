# jobboard/services/errors.py
"""Error taxonomy for the job listing core.

Routes map these to HTTP status codes; nothing here knows about HTTP.
"""


class JobBoardError(Exception):
    """Base class. ``str(err)`` is a human-readable message safe to show users."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidFilter(JobBoardError):
    """Malformed page / page size / filter values."""


class JobValidationError(JobBoardError):
    """A job draft failed local validation (raised before any remote call)."""


class Unauthenticated(JobBoardError):
    """A write was attempted without an acting user."""


class NotFound(JobBoardError):
    """The get/update/delete target does not exist."""

    def __init__(self, job_id: str, message: str = "Job not found"):
        super().__init__(message)
        self.job_id = job_id


class RemoteFailure(JobBoardError):
    """The store or auth call itself failed (network, server error, constraint)."""
