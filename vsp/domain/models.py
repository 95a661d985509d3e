import random
import string
import time
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field

class ProcessingMode(str, Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"

class SegmentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

class JobStatus(str, Enum):
    IDLE = "idle"
    CONVERTING = "converting"
    SPLITTING = "splitting"
    PROCESSING = "processing"
    MERGING = "merging"
    COMPLETED = "completed"
    ERROR = "error"

class VideoFilter(str, Enum):
    NONE = "none"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    BLUR = "blur"

class Segment(BaseModel):
    """One time-bounded slice of the source video (seconds)."""
    id: int = Field(ge=0)
    status: SegmentStatus = SegmentStatus.PENDING
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    start_time: float = Field(ge=0.0)
    end_time: float
    processing_time_ms: Optional[float] = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

class ProcessingStats(BaseModel):
    """Timing snapshot of a completed run. All times are milliseconds."""
    total_time: float
    per_segment_times: List[float]
    cpu_cores: int
    speedup_factor: float
    sequential_time: float
    parallel_time: float
    segment_count: int

class VideoJob(BaseModel):
    id: str
    source: Optional[Path] = None
    duration_seconds: float
    mode: ProcessingMode = ProcessingMode.PARALLEL
    video_filter: VideoFilter = VideoFilter.GRAYSCALE
    segments: List[Segment] = Field(default_factory=list)
    stats: Optional[ProcessingStats] = None
    status: JobStatus = JobStatus.IDLE
    error_message: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)

_ID_ALPHABET = string.digits + string.ascii_lowercase

def generate_job_id() -> str:
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(9))
    return f"job_{int(time.time() * 1000)}_{suffix}"
