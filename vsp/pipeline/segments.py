import math
from typing import List
from vsp.domain.errors import InvalidDurationError
from vsp.domain.models import Segment

def segment_count(duration: float, segment_length: float) -> int:
    if duration <= 0:
        return 0
    count = math.ceil(duration / segment_length)
    # float division can overshoot by one (e.g. 1.1 / 0.1), leaving an empty tail
    while count > 1 and (count - 1) * segment_length >= duration:
        count -= 1
    return count

def partition(duration: float, segment_length: float) -> List[Segment]:
    """Splits [0, duration) into pending segments of segment_length seconds.

    The last segment ends at the true duration and may be shorter. A duration
    of zero or less yields no segments.
    """
    if not math.isfinite(segment_length) or segment_length <= 0:
        raise InvalidDurationError(f"Segment length must be a positive number, got {segment_length}")
    if not math.isfinite(duration):
        raise InvalidDurationError(f"Duration must be finite, got {duration}")

    return [
        Segment(
            id=i,
            start_time=i * segment_length,
            end_time=min((i + 1) * segment_length, duration),
        )
        for i in range(segment_count(duration, segment_length))
    ]
