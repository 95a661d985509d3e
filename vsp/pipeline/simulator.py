import asyncio
import logging
import random
import time
from typing import Awaitable, Callable, Optional
from vsp.config.models import EngineConfig
from vsp.domain.errors import SimulationError
from vsp.domain.models import Segment

ProgressCallback = Callable[[float], None]
SleepFunc = Callable[[float], Awaitable[None]]

class SegmentSimulator:
    """Stands in for per-segment video work by waiting a plausible amount of time.

    The wait is split into ``progress_steps`` equal ticks and a progress
    percentage is reported after each tick, ending at exactly 100.
    """

    def __init__(
        self,
        config: EngineConfig,
        rng: Optional[random.Random] = None,
        sleep: SleepFunc = asyncio.sleep,
        clock: Callable[[], float] = time.perf_counter
    ):
        self.config = config
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    def target_duration_ms(self, segment: Segment, cost_modifier: float = 1.0) -> float:
        """Simulated cost: base scaled by filter and by the segment's share of a nominal segment."""
        span_ratio = segment.duration / self.config.segment_length_s
        base = self.config.base_cost_ms * cost_modifier * span_ratio
        jitter = self.rng.uniform(-self.config.jitter_ms, self.config.jitter_ms)
        return max(self.config.min_cost_ms, base + jitter)

    async def wait_ms(self, delay_ms: float):
        try:
            await self.sleep(delay_ms / 1000.0)
        except (RuntimeError, OSError) as e:
            raise SimulationError(f"Timer could not be scheduled: {e}") from e

    async def simulate(
        self,
        segment: Segment,
        on_progress: ProgressCallback,
        cost_modifier: float = 1.0
    ) -> float:
        """Runs the simulated work and returns the measured wall time in ms."""
        target_ms = self.target_duration_ms(segment, cost_modifier)
        steps = self.config.progress_steps
        step_ms = target_ms / steps
        self.logger.debug(f"Segment {segment.id}: simulating {target_ms:.0f}ms in {steps} steps")

        start = self.clock()
        for step in range(1, steps + 1):
            await self.wait_ms(step_ms)
            on_progress(step / steps * 100)

        return (self.clock() - start) * 1000.0
