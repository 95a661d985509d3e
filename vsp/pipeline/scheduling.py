import asyncio
import logging
from typing import Callable, List, Sequence
from vsp.domain.models import ProcessingMode, Segment, SegmentStatus
from vsp.pipeline.simulator import SegmentSimulator

SegmentCallback = Callable[[Segment], None]

logger = logging.getLogger(__name__)

class SchedulingPolicy:
    """Drives the simulator over a segment set and returns per-segment times in id order."""

    mode: ProcessingMode

    def __init__(self, simulator: SegmentSimulator, cost_modifier: float = 1.0):
        self.simulator = simulator
        self.cost_modifier = cost_modifier

    async def run(self, segments: Sequence[Segment], on_update: SegmentCallback) -> List[float]:
        raise NotImplementedError

    async def _process_segment(self, segment: Segment, on_update: SegmentCallback) -> float:
        active = segment.model_copy(update={
            "status": SegmentStatus.PROCESSING,
            "progress": 0.0,
            "processing_time_ms": None,
        })
        on_update(active)

        def report(percent: float):
            on_update(active.model_copy(update={"progress": percent}))

        elapsed = await self.simulator.simulate(active, report, self.cost_modifier)

        on_update(active.model_copy(update={
            "status": SegmentStatus.COMPLETED,
            "progress": 100.0,
            "processing_time_ms": elapsed,
        }))
        logger.debug(f"Segment {segment.id} completed in {elapsed:.0f}ms")
        return elapsed

class SequentialPolicy(SchedulingPolicy):
    """One segment at a time; segment i+1 starts only after segment i completes."""

    mode = ProcessingMode.SEQUENTIAL

    async def run(self, segments: Sequence[Segment], on_update: SegmentCallback) -> List[float]:
        times = []
        for segment in sorted(segments, key=lambda s: s.id):
            times.append(await self._process_segment(segment, on_update))
        return times

class ParallelPolicy(SchedulingPolicy):
    """Fans out one task per segment, each delayed by id * stagger, and joins on all of them.

    The first failure cancels every other segment task before it is re-raised.
    """

    mode = ProcessingMode.PARALLEL

    def __init__(self, simulator: SegmentSimulator, cost_modifier: float = 1.0, stagger_ms: float = 30.0):
        super().__init__(simulator, cost_modifier)
        self.stagger_ms = stagger_ms

    async def _staggered(self, segment: Segment, on_update: SegmentCallback) -> float:
        if segment.id and self.stagger_ms:
            await self.simulator.wait_ms(segment.id * self.stagger_ms)
        return await self._process_segment(segment, on_update)

    async def run(self, segments: Sequence[Segment], on_update: SegmentCallback) -> List[float]:
        ordered = sorted(segments, key=lambda s: s.id)
        tasks = [asyncio.ensure_future(self._staggered(s, on_update)) for s in ordered]
        if not tasks:
            return []
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

def build_policy(
    mode: ProcessingMode,
    simulator: SegmentSimulator,
    cost_modifier: float = 1.0
) -> SchedulingPolicy:
    if mode == ProcessingMode.SEQUENTIAL:
        return SequentialPolicy(simulator, cost_modifier)
    return ParallelPolicy(simulator, cost_modifier, stagger_ms=simulator.config.stagger_ms)

async def process_sequentially(
    segments: Sequence[Segment],
    on_update: SegmentCallback,
    simulator: SegmentSimulator,
    cost_modifier: float = 1.0
) -> List[float]:
    return await SequentialPolicy(simulator, cost_modifier).run(segments, on_update)

async def process_parallel(
    segments: Sequence[Segment],
    on_update: SegmentCallback,
    simulator: SegmentSimulator,
    cost_modifier: float = 1.0
) -> List[float]:
    policy = ParallelPolicy(simulator, cost_modifier, stagger_ms=simulator.config.stagger_ms)
    return await policy.run(segments, on_update)
