import logging
from vsp.infrastructure.event_bus import EventBus
from vsp.ui.state import JobState
from vsp.domain.events import (
    JobCreated, JobReset, JobStatusChanged, RunStarted, SegmentUpdated, StatsComputed
)

class UIManager:
    """Subscribes to EventBus and updates JobState."""

    def __init__(self, bus: EventBus, state: JobState):
        self.bus = bus
        self.state = state
        self.logger = logging.getLogger(__name__)
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self.bus.subscribe(JobCreated, self.on_job_created)
        self.bus.subscribe(JobReset, self.on_job_reset)
        self.bus.subscribe(RunStarted, self.on_run_started)
        self.bus.subscribe(JobStatusChanged, self.on_status_changed)
        self.bus.subscribe(SegmentUpdated, self.on_segment_updated)
        self.bus.subscribe(StatsComputed, self.on_stats_computed)

    def on_job_created(self, event: JobCreated):
        self.state.load_job(event.job)

    def on_job_reset(self, event: JobReset):
        self.state.clear()

    def on_run_started(self, event: RunStarted):
        self.state.start_run(event.job_id, event.mode, event.video_filter)

    def on_status_changed(self, event: JobStatusChanged):
        self.state.set_status(event.job_id, event.status, event.error_message)

    def on_segment_updated(self, event: SegmentUpdated):
        if not self.state.apply_segment_update(event.job_id, event.segment):
            self.logger.debug(f"Dropped stale update for segment {event.segment.id} of job {event.job_id}")

    def on_stats_computed(self, event: StatsComputed):
        self.state.attach_stats(event.job_id, event.stats)
