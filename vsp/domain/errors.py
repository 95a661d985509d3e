class EngineError(Exception):
    """Base error for the segment scheduling engine."""
    pass


class InvalidDurationError(EngineError, ValueError):
    """Duration or segment length is not a usable positive number."""
    pass


class SimulationError(EngineError, RuntimeError):
    """The timer backing a segment simulation could not be scheduled."""
    pass
