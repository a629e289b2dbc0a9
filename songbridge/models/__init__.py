"""
Domain models.
"""
from songbridge.models.job import DEFAULT_TITLE, Job, JobStatus, SongResult

__all__ = ['DEFAULT_TITLE', 'Job', 'JobStatus', 'SongResult']
