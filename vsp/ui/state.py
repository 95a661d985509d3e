import threading
import time
from typing import List, Optional
from vsp.domain.models import (
    JobStatus, ProcessingMode, ProcessingStats, Segment, SegmentStatus, VideoFilter, VideoJob
)

_ACTIVE_STATUSES = {JobStatus.CONVERTING, JobStatus.SPLITTING, JobStatus.PROCESSING, JobStatus.MERGING}

class JobState:
    """Thread-safe holder of the current job.

    Every mutator names the job it targets. Updates for any other job (one
    that was reset or replaced) are dropped and reported by returning False.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self.job: Optional[VideoJob] = None
        self.dropped_updates = 0
        self._run_started: Optional[float] = None
        self._run_finished: Optional[float] = None

    def load_job(self, job: VideoJob):
        with self._lock:
            self.job = job.model_copy(deep=True)
            self._run_started = None
            self._run_finished = None

    def clear(self):
        with self._lock:
            self.job = None
            self._run_started = None
            self._run_finished = None

    def is_current(self, job_id: str) -> bool:
        with self._lock:
            return self.job is not None and self.job.id == job_id

    def _reject(self) -> bool:
        self.dropped_updates += 1
        return False

    def start_run(self, job_id: str, mode: ProcessingMode, video_filter: VideoFilter) -> bool:
        with self._lock:
            if not self.is_current(job_id):
                return self._reject()
            self.job.mode = mode
            self.job.video_filter = video_filter
            self.job.stats = None
            self.job.error_message = None
            self._run_started = time.monotonic()
            self._run_finished = None
            return True

    def apply_segment_update(self, job_id: str, segment: Segment) -> bool:
        """Replaces the segment with the same id."""
        with self._lock:
            if not self.is_current(job_id):
                return self._reject()
            for idx, existing in enumerate(self.job.segments):
                if existing.id == segment.id:
                    self.job.segments[idx] = segment
                    return True
            return self._reject()

    def set_status(self, job_id: str, status: JobStatus, error_message: Optional[str] = None) -> bool:
        with self._lock:
            if not self.is_current(job_id):
                return self._reject()
            self.job.status = status
            if error_message is not None:
                self.job.error_message = error_message
            if status in (JobStatus.COMPLETED, JobStatus.ERROR):
                self._run_finished = time.monotonic()
            return True

    def attach_stats(self, job_id: str, stats: ProcessingStats) -> bool:
        with self._lock:
            if not self.is_current(job_id):
                return self._reject()
            self.job.stats = stats
            return True

    @property
    def segments(self) -> List[Segment]:
        with self._lock:
            return list(self.job.segments) if self.job else []

    @property
    def completed_count(self) -> int:
        with self._lock:
            return sum(1 for s in self.segments if s.status == SegmentStatus.COMPLETED)

    @property
    def overall_progress(self) -> float:
        with self._lock:
            segments = self.segments
            if not segments:
                return 0.0
            return sum(s.progress for s in segments) / len(segments)

    @property
    def is_processing(self) -> bool:
        with self._lock:
            return self.job is not None and self.job.status in _ACTIVE_STATUSES

    @property
    def elapsed_ms(self) -> float:
        with self._lock:
            if self._run_started is None:
                return 0.0
            end = self._run_finished if self._run_finished is not None else time.monotonic()
            return (end - self._run_started) * 1000.0
