from vsp.domain.models import (
    JobStatus, ProcessingMode, ProcessingStats, SegmentStatus, VideoFilter, VideoJob
)
from vsp.pipeline.segments import partition
from vsp.ui.state import JobState

def _job(job_id: str, duration: float = 25.0) -> VideoJob:
    return VideoJob(id=job_id, duration_seconds=duration, segments=partition(duration, 10.0))

def test_apply_updates_by_id_in_any_order():
    state = JobState()
    state.load_job(_job("job_a"))

    s2 = state.segments[2].model_copy(update={"status": SegmentStatus.PROCESSING, "progress": 40.0})
    s0 = state.segments[0].model_copy(update={"status": SegmentStatus.COMPLETED, "progress": 100.0, "processing_time_ms": 812.0})
    assert state.apply_segment_update("job_a", s2)
    assert state.apply_segment_update("job_a", s0)

    segments = state.segments
    assert [s.id for s in segments] == [0, 1, 2]
    assert segments[0].status == SegmentStatus.COMPLETED
    assert segments[1].status == SegmentStatus.PENDING
    assert segments[2].progress == 40.0
    assert state.completed_count == 1
    assert state.overall_progress == (100.0 + 0.0 + 40.0) / 3

def test_stale_update_is_dropped_after_reset():
    state = JobState()
    old = _job("job_old")
    state.load_job(old)
    state.clear()
    state.load_job(_job("job_new"))

    stale = old.segments[1].model_copy(update={"status": SegmentStatus.COMPLETED, "progress": 100.0})
    assert not state.apply_segment_update("job_old", stale)
    assert not state.set_status("job_old", JobStatus.COMPLETED)

    seg = state.segments[1]
    assert seg.status == SegmentStatus.PENDING
    assert seg.progress == 0.0
    assert state.job.status == JobStatus.IDLE
    assert state.dropped_updates == 2

def test_updates_without_job_are_dropped():
    state = JobState()
    seg = partition(10.0, 10.0)[0]
    assert not state.apply_segment_update("job_x", seg)
    assert state.segments == []
    assert state.overall_progress == 0.0

def test_unknown_segment_id_is_dropped():
    state = JobState()
    state.load_job(_job("job_a", duration=10.0))
    foreign = partition(30.0, 10.0)[2]
    assert not state.apply_segment_update("job_a", foreign)
    assert len(state.segments) == 1

def test_load_job_copies_the_job():
    job = _job("job_a")
    state = JobState()
    state.load_job(job)
    state.set_status("job_a", JobStatus.PROCESSING)
    assert job.status == JobStatus.IDLE

def test_run_lifecycle():
    state = JobState()
    state.load_job(_job("job_a"))

    assert state.start_run("job_a", ProcessingMode.SEQUENTIAL, VideoFilter.BLUR)
    assert state.job.mode == ProcessingMode.SEQUENTIAL
    assert state.job.video_filter == VideoFilter.BLUR

    state.set_status("job_a", JobStatus.PROCESSING)
    assert state.is_processing
    assert state.elapsed_ms >= 0.0

    stats = ProcessingStats(
        total_time=1000, per_segment_times=[500, 500, 250], cpu_cores=4,
        speedup_factor=1.39, sequential_time=1250, parallel_time=900, segment_count=3
    )
    assert state.attach_stats("job_a", stats)
    state.set_status("job_a", JobStatus.COMPLETED)
    assert not state.is_processing
    assert state.job.stats == stats

    frozen = state.elapsed_ms
    assert state.elapsed_ms == frozen

def test_error_status_keeps_message():
    state = JobState()
    state.load_job(_job("job_a"))
    state.set_status("job_a", JobStatus.ERROR, error_message="Processing failed")
    assert state.job.status == JobStatus.ERROR
    assert state.job.error_message == "Processing failed"
    assert state.job.stats is None
