"""
Completion Registry Tests

Tests for job state transitions, first-write-wins and bounded retention.
"""
import threading
import time

import pytest

from songbridge.models.job import Job, JobStatus, SongResult
from songbridge.services.completion_registry import (
    CompletionRegistry,
    get_completion_registry,
    reset_completion_registry,
)


class TestJobModel:
    """Tests for the Job state machine."""

    def test_new_job_is_pending(self):
        """Test a new job starts pending with no result."""
        job = Job(job_id='abc')

        assert job.status == JobStatus.pending
        assert job.result is None
        assert job.failure_reason is None
        assert job.is_terminal is False

    def test_completed_returns_new_snapshot(self):
        """Test completing a job leaves the original snapshot untouched."""
        job = Job(job_id='abc')
        done = job.completed(SongResult(audio_url='u1'))

        assert job.status == JobStatus.pending
        assert done.status == JobStatus.complete
        assert done.result.title == 'Untitled'
        assert done.finished_at is not None

    def test_terminal_job_cannot_transition(self):
        """Test a terminal job refuses further transitions."""
        job = Job(job_id='abc').failed('boom')

        with pytest.raises(ValueError):
            job.completed(SongResult(audio_url='u1'))
        with pytest.raises(ValueError):
            job.failed('again')


class TestRegistryTransitions:
    """Tests for registry get/set operations."""

    def test_unknown_job_is_absent(self):
        """Test get returns None for a job never seen."""
        registry = CompletionRegistry()

        assert registry.get('missing') is None
        assert 'missing' not in registry

    def test_register_creates_pending_job(self):
        """Test register lazily creates a pending job."""
        registry = CompletionRegistry()
        job = registry.register('abc')

        assert job.status == JobStatus.pending
        assert registry.get('abc') is job
        assert registry.latest_job_id() == 'abc'

    def test_register_keeps_existing_job(self):
        """Test register does not reset a job the callback already finished."""
        registry = CompletionRegistry()
        registry.set_complete('abc', SongResult(audio_url='u1'))

        job = registry.register('abc')

        assert job.status == JobStatus.complete

    def test_set_complete_on_unknown_job(self):
        """Test a callback for an unseen job creates and completes it."""
        registry = CompletionRegistry()

        assert registry.set_complete('abc', SongResult(audio_url='u1', image_url='i1', title='T')) is True

        job = registry.get('abc')
        assert job.status == JobStatus.complete
        assert job.result == SongResult(audio_url='u1', image_url='i1', title='T')

    def test_set_failed_records_reason(self):
        """Test set_failed stores the provider's reason."""
        registry = CompletionRegistry()
        registry.register('abc')

        assert registry.set_failed('abc', 'quota exceeded') is True

        job = registry.get('abc')
        assert job.status == JobStatus.failed
        assert job.failure_reason == 'quota exceeded'
        assert job.result is None

    def test_first_terminal_write_wins(self):
        """Test a second completion does not overwrite the first."""
        registry = CompletionRegistry()
        registry.set_complete('abc', SongResult(audio_url='first'))

        assert registry.set_complete('abc', SongResult(audio_url='second')) is False
        assert registry.set_failed('abc', 'late failure') is False

        job = registry.get('abc')
        assert job.status == JobStatus.complete
        assert job.result.audio_url == 'first'

    def test_pending_count(self):
        """Test pending_count only counts non-terminal jobs."""
        registry = CompletionRegistry()
        registry.register('a')
        registry.register('b')
        registry.set_failed('b', 'nope')

        assert registry.pending_count() == 1
        assert len(registry) == 2

    def test_clear(self):
        """Test clear forgets every job."""
        registry = CompletionRegistry()
        registry.register('a')
        registry.clear()

        assert len(registry) == 0
        assert registry.latest_job_id() is None


class TestRegistryRetention:
    """Tests for bounded retention."""

    def test_rejects_invalid_capacity(self):
        """Test a registry needs room for at least one job."""
        with pytest.raises(ValueError):
            CompletionRegistry(max_entries=0)

    def test_evicts_oldest_terminal_first(self):
        """Test terminal jobs are evicted before pending ones."""
        registry = CompletionRegistry(max_entries=3)
        registry.register('pending-1')
        registry.set_complete('done-1', SongResult(audio_url='u'))
        registry.register('pending-2')

        registry.register('new')

        assert len(registry) == 3
        assert 'done-1' not in registry
        assert 'pending-1' in registry
        assert 'pending-2' in registry
        assert 'new' in registry

    def test_evicts_oldest_pending_when_all_pending(self):
        """Test the oldest pending job goes when nothing is terminal."""
        registry = CompletionRegistry(max_entries=2)
        registry.register('a')
        registry.register('b')
        registry.register('c')

        assert 'a' not in registry
        assert 'b' in registry
        assert 'c' in registry


class TestRegistryConcurrency:
    """Tests for concurrent writers."""

    def test_concurrent_writes_same_job_single_winner(self):
        """Test only one of many racing callbacks is stored."""
        registry = CompletionRegistry()
        registry.register('abc')
        barrier = threading.Barrier(8)
        wins = []

        def writer(index):
            barrier.wait()
            if registry.set_complete('abc', SongResult(audio_url=f'u{index}')):
                wins.append(index)

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(wins) == 1
        assert registry.get('abc').result.audio_url == f'u{wins[0]}'

    def test_eviction_during_transition_keeps_latest_write(self, monkeypatch):
        """Test a slow transition is not overwritten after eviction races it."""
        registry = CompletionRegistry(max_entries=1)
        registry.register('x')
        entered = threading.Event()
        original_completed = Job.completed
        outcomes = {}

        def slow_completed(job, result):
            if result.audio_url == 'A':
                entered.set()
                time.sleep(0.1)
            return original_completed(job, result)

        monkeypatch.setattr(Job, 'completed', slow_completed)

        def first_writer():
            outcomes['A'] = registry.set_complete('x', SongResult(audio_url='A'))

        def racer():
            registry.register('y')
            outcomes['C'] = registry.set_complete('x', SongResult(audio_url='C'))

        writer = threading.Thread(target=first_writer)
        writer.start()
        assert entered.wait(timeout=2.0)
        other = threading.Thread(target=racer)
        other.start()
        writer.join()
        other.join()

        # A finishes before the racer can evict, so C is a legitimate later write
        assert outcomes == {'A': True, 'C': True}
        assert registry.get('x').result.audio_url == 'C'
        assert len(registry) == 1

    def test_concurrent_writes_distinct_jobs(self):
        """Test writers for different jobs all succeed."""
        registry = CompletionRegistry()

        threads = [
            threading.Thread(target=registry.set_complete, args=(f'job-{i}', SongResult(audio_url=f'u{i}')))
            for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry) == 20
        for i in range(20):
            assert registry.get(f'job-{i}').result.audio_url == f'u{i}'


class TestRegistrySingleton:
    """Tests for the registry singleton."""

    def test_singleton(self):
        """Test get_completion_registry returns the same instance."""
        reset_completion_registry()

        registry1 = get_completion_registry()
        registry2 = get_completion_registry()

        assert registry1 is registry2

        reset_completion_registry()
