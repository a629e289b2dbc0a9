"""
Errors that cross the bridge's public operations.
"""
from typing import Optional


class BridgeError(Exception):
    """Base class for all SongBridge errors."""


class ProviderRejected(BridgeError):
    """The provider answered the submission but did not accept the job."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProviderUnreachable(BridgeError):
    """The submission never got an answer from the provider."""


class MalformedCallback(BridgeError):
    """A webhook payload did not have the expected shape."""


class StillPending(BridgeError):
    """
    The job did not finish within the poll budget.

    Recoverable: the caller should poll again later.
    """

    def __init__(self, job_id: str, attempts: int):
        super().__init__(f'Job {job_id} still pending after {attempts} attempt(s)')
        self.job_id = job_id
        self.attempts = attempts


class JobFailed(BridgeError):
    """The provider reported that the job failed."""

    def __init__(self, job_id: str, reason: str):
        super().__init__(f'Job {job_id} failed: {reason}')
        self.job_id = job_id
        self.reason = reason
