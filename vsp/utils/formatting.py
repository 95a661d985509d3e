import math

def format_time(ms: float) -> str:
    """'850ms' below one second, '1.25s' above."""
    if ms < 1000:
        return f"{int(math.floor(ms + 0.5))}ms"
    return f"{ms / 1000:.2f}s"

def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
