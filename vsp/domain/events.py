from typing import Optional
from pydantic import BaseModel
from .models import JobStatus, ProcessingMode, ProcessingStats, Segment, VideoFilter, VideoJob

class Event(BaseModel):
    """Base class for all domain events."""
    pass

class JobEvent(Event):
    job_id: str

class JobCreated(Event):
    job: VideoJob

class RunStarted(JobEvent):
    mode: ProcessingMode
    video_filter: VideoFilter

class JobStatusChanged(JobEvent):
    status: JobStatus
    error_message: Optional[str] = None

class SegmentUpdated(JobEvent):
    """Snapshot of one segment; consumers replace by segment id."""
    segment: Segment

class StatsComputed(JobEvent):
    stats: ProcessingStats

class JobReset(Event):
    """Current job is discarded; later updates for it must be dropped."""
    pass
