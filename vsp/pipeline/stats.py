import math
from typing import Sequence
from vsp.domain.models import ProcessingMode, ProcessingStats

def round_half_up(value: float, digits: int = 2) -> float:
    """Rounds .5 away from zero instead of to even, as dashboards display it."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor

def aggregate(
    per_segment_times: Sequence[float],
    mode: ProcessingMode,
    merge_overhead_ms: float,
    cpu_cores: int
) -> ProcessingStats:
    """Builds run statistics from per-segment times (ms, in segment id order).

    ``parallel_time`` is the slowest segment plus merge overhead and
    ``speedup_factor`` compares it with the summed sequential cost, whichever
    mode actually ran.
    """
    times = list(per_segment_times)
    sequential_time = sum(times)
    parallel_time = (max(times) if times else 0.0) + merge_overhead_ms

    total_time = sequential_time if mode == ProcessingMode.SEQUENTIAL else parallel_time
    speedup = sequential_time / parallel_time if parallel_time > 0 else 0.0

    return ProcessingStats(
        total_time=total_time,
        per_segment_times=times,
        cpu_cores=cpu_cores,
        speedup_factor=round_half_up(speedup, 2),
        sequential_time=sequential_time,
        parallel_time=parallel_time,
        segment_count=len(times),
    )
