"""
Background job helpers for long-running recreations.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from i18n_recreate.exceptions import RecreateError, RecreationCancelled
from i18n_recreate.logger import get_logger
from i18n_recreate.translation import RecreationProgress, TreeRecreator

logger = get_logger(__name__)


@dataclass
class JobState:
    """In-memory representation of an asynchronous recreation job."""

    job_id: str
    target_language: str
    provider: str
    tree: Any = field(default=None, repr=False)
    existing: Any = field(default=None, repr=False)
    cancel_requested: bool = False
    state: str = "pending"  # pending|running|completed|failed|cancelled
    created_at: float = field(default_factory=time.time)
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    progress: Dict[str, Any] = field(default_factory=dict)
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = None
    last_update: float = field(default_factory=time.time)
    done: threading.Event = field(default_factory=threading.Event, repr=False)

    def request_cancel(self):
        """Mark this job as requested for cancellation."""
        self.cancel_requested = True
        self.last_update = time.time()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "target_language": self.target_language,
            "provider": self.provider,
            "cancel_requested": self.cancel_requested,
            "state": self.state,
            "created_at": self.created_at,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "progress": self.progress,
            "result": self.result,
            "error": self.error,
            "error_details": self.error_details,
            "last_update": self.last_update,
        }


_jobs: Dict[str, JobState] = {}
_jobs_lock = threading.Lock()
_JOB_RETENTION_SECONDS = 600  # Retain job info for 10 minutes after completion


def create_recreation_job(
    tree: Any,
    target_language: str,
    provider: str,
    make_recreator: Callable[..., TreeRecreator],
    existing: Any = None,
) -> JobState:
    """
    Create and launch a background recreation job.

    Args:
        tree: Source resource tree.
        target_language: Target language code.
        provider: Translator provider name (informational).
        make_recreator: Called with progress_callback and cancel_check
            keyword arguments; returns the TreeRecreator to run. Its
            translator is closed when the job ends.
        existing: Optional earlier translation to reuse.

    Returns:
        JobState for the new job (already registered and running in background).
    """
    job = JobState(
        job_id=uuid.uuid4().hex,
        target_language=target_language,
        provider=provider,
        tree=tree,
        existing=existing,
    )

    with _jobs_lock:
        _cleanup_jobs_locked()
        _jobs[job.job_id] = job

    thread = threading.Thread(
        target=_run_recreation_job,
        args=(job, make_recreator),
        name=f"recreation-job-{job.job_id}",
        daemon=True,
    )
    thread.start()
    logger.info("Recreation job %s started (target=%s, provider=%s)", job.job_id, target_language, provider)
    return job


def get_job(job_id: str) -> Optional[JobState]:
    """Fetch a job by ID (if still retained)."""
    with _jobs_lock:
        job = _jobs.get(job_id)
        if job and job.finished_at and (time.time() - job.finished_at) > _JOB_RETENTION_SECONDS:
            _jobs.pop(job_id, None)
            return None
        return job


def cancel_job(job_id: str) -> bool:
    """
    Request cancellation of a running job.

    Returns:
        True if job was found and cancellation requested, False otherwise.
    """
    with _jobs_lock:
        job = _jobs.get(job_id)
        if not job:
            return False
        if job.state in ("completed", "failed", "cancelled"):
            return False
        job.request_cancel()
        logger.info("Cancellation requested for job %s", job_id)
        return True


def serialize_job(job: JobState) -> Dict[str, Any]:
    """Convert JobState into JSON-safe dict."""
    with _jobs_lock:
        return job.to_dict()


def _finish(job: JobState, state: str) -> None:
    job.state = state
    job.finished_at = time.time()
    job.last_update = job.finished_at
    # Drop the input, only the result is needed from here on
    job.tree = None
    job.existing = None
    job.done.set()


def _run_recreation_job(job: JobState, make_recreator: Callable[..., TreeRecreator]):
    """Worker function executed in a background thread."""
    job.state = "running"
    job.started_at = time.time()
    job.last_update = job.started_at

    def on_progress(progress: RecreationProgress):
        with _jobs_lock:
            job.progress = progress.to_dict()
            job.last_update = time.time()
            return job.cancel_requested

    def check_cancel():
        with _jobs_lock:
            return job.cancel_requested

    recreator = None
    try:
        recreator = make_recreator(progress_callback=on_progress, cancel_check=check_cancel)
        result = recreator.recreate_with_stats(job.tree, job.target_language, existing=job.existing)
    except RecreationCancelled as exc:
        logger.info("Recreation job %s cancelled (%s/%s strings)", job.job_id, exc.completed, exc.total)
        with _jobs_lock:
            job.error = str(exc)
            _finish(job, "cancelled")
        return
    except RecreateError as exc:
        logger.error("Recreation job %s failed: %s", job.job_id, exc)
        with _jobs_lock:
            job.error = str(exc)
            job.error_details = {"code": exc.code, **exc.details}
            _finish(job, "failed")
        return
    except Exception as exc:
        logger.exception("✗ Recreation job %s failed: %s: %s", job.job_id, type(exc).__name__, exc)
        with _jobs_lock:
            job.error = f"{type(exc).__name__}: {exc}"
            _finish(job, "failed")
        return
    finally:
        if recreator is not None and hasattr(recreator.translator, "close"):
            recreator.translator.close()

    with _jobs_lock:
        job.result = {"tree": result.tree, "stats": result.stats.to_dict()}
        _finish(job, "completed")
    logger.info(
        "Recreation job %s finished (translated=%s, calls=%s)",
        job.job_id,
        result.stats.translated,
        result.stats.translator_calls,
    )


def _cleanup_jobs_locked():
    """Remove completed jobs that exceeded retention period (call with lock held)."""
    now = time.time()
    expired = [
        job_id
        for job_id, job in _jobs.items()
        if job.finished_at and (now - job.finished_at) > _JOB_RETENTION_SECONDS
    ]
    for job_id in expired:
        _jobs.pop(job_id, None)
