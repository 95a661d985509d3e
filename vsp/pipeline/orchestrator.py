import logging
import math
import os
from pathlib import Path
from typing import Optional
from vsp.config.models import AppConfig
from vsp.infrastructure.event_bus import EventBus
from vsp.domain.errors import InvalidDurationError
from vsp.domain.models import (
    JobStatus, ProcessingMode, ProcessingStats, Segment, SegmentStatus, VideoFilter, VideoJob,
    generate_job_id
)
from vsp.domain.events import (
    JobCreated, JobReset, JobStatusChanged, RunStarted, SegmentUpdated, StatsComputed
)
from vsp.pipeline.segments import partition
from vsp.pipeline.simulator import SegmentSimulator
from vsp.pipeline.scheduling import build_policy
from vsp.pipeline.stats import aggregate

DEFAULT_CPU_CORES = 4

def resolve_cpu_cores(configured: Optional[int] = None) -> int:
    """Explicit setting wins, otherwise ask the platform."""
    if configured:
        return configured
    return os.cpu_count() or DEFAULT_CPU_CORES

class Orchestrator:
    """Advances a job through convert, split, process, merge and publishes every change."""

    def __init__(
        self,
        config: AppConfig,
        event_bus: EventBus,
        simulator: Optional[SegmentSimulator] = None,
        cpu_cores: Optional[int] = None
    ):
        self.config = config
        self.event_bus = event_bus
        self.simulator = simulator or SegmentSimulator(config.engine)
        self.cpu_cores = cpu_cores or resolve_cpu_cores(config.general.cpu_cores)
        self.logger = logging.getLogger(__name__)

    def create_job(self, duration: float, source: Optional[Path] = None) -> VideoJob:
        """Validates the duration and builds an idle job with its pending segments."""
        valid = isinstance(duration, (int, float)) and not isinstance(duration, bool)
        if not valid or not math.isfinite(duration) or duration <= 0:
            raise InvalidDurationError(f"Video duration must be a positive finite number, got {duration!r}")

        segments = partition(duration, self.config.engine.segment_length_s)
        job = VideoJob(
            id=generate_job_id(),
            source=source,
            duration_seconds=duration,
            mode=self.config.general.mode,
            video_filter=self.config.general.video_filter,
            segments=segments,
        )
        self.logger.info(f"Job {job.id} created: duration={duration:.2f}s, segments={len(segments)}")
        self.event_bus.publish(JobCreated(job=job))
        return job

    def reset(self):
        """Discards the current job; updates still in flight for it will be dropped."""
        self.event_bus.publish(JobReset())

    def _set_status(self, job_id: str, status: JobStatus, error_message: Optional[str] = None):
        self.logger.debug(f"Job {job_id}: status -> {status.value}")
        self.event_bus.publish(JobStatusChanged(job_id=job_id, status=status, error_message=error_message))

    def _publish_segment(self, job_id: str, segment: Segment):
        self.event_bus.publish(SegmentUpdated(job_id=job_id, segment=segment))

    async def run(
        self,
        job: VideoJob,
        mode: Optional[ProcessingMode] = None,
        video_filter: Optional[VideoFilter] = None
    ) -> ProcessingStats:
        mode = mode or job.mode
        video_filter = video_filter or job.video_filter
        phases = self.config.phases

        self.logger.info(f"Job {job.id}: starting {mode.value} run with filter={video_filter.value}")
        self.event_bus.publish(RunStarted(job_id=job.id, mode=mode, video_filter=video_filter))

        try:
            self._set_status(job.id, JobStatus.CONVERTING)
            await self.simulator.wait_ms(phases.convert_delay_ms)
            self._set_status(job.id, JobStatus.SPLITTING)
            await self.simulator.wait_ms(phases.split_delay_ms)
            self._set_status(job.id, JobStatus.PROCESSING)

            segments = [
                s.model_copy(update={"status": SegmentStatus.PENDING, "progress": 0.0, "processing_time_ms": None})
                for s in job.segments
            ]
            for segment in segments:
                self._publish_segment(job.id, segment)

            policy = build_policy(mode, self.simulator, self.config.engine.cost_modifier(video_filter))
            self.logger.debug(f"Job {job.id}: {policy.mode.value} policy over {len(segments)} segments")
            times = await policy.run(segments, lambda s: self._publish_segment(job.id, s))

            self._set_status(job.id, JobStatus.MERGING)
            await self.simulator.wait_ms(phases.merge_delay_ms)
        except Exception as e:
            self.logger.error(f"Job {job.id}: processing failed: {e}")
            self._set_status(job.id, JobStatus.ERROR, error_message=str(e))
            raise

        stats = aggregate(times, policy.mode, self.config.engine.merge_overhead_ms, self.cpu_cores)
        self.logger.info(
            f"Job {job.id}: {stats.segment_count} segments, total={stats.total_time:.0f}ms, "
            f"sequential={stats.sequential_time:.0f}ms, parallel={stats.parallel_time:.0f}ms, "
            f"speedup={stats.speedup_factor}x"
        )
        self.event_bus.publish(StatsComputed(job_id=job.id, stats=stats))
        self._set_status(job.id, JobStatus.COMPLETED)
        return stats
