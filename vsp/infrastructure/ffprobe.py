import subprocess
import json
import math
from pathlib import Path

class FFprobeAdapter:
    """Wrapper around ffprobe to read a container's duration."""

    def get_duration(self, file_path: Path) -> float:
        """Executes ffprobe and returns the format duration in seconds."""
        cmd = [
            "ffprobe",
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            str(file_path)
        ]

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            raise RuntimeError("ffprobe not found on PATH; install ffmpeg or pass --duration")
        if result.returncode != 0:
            raise RuntimeError(f"ffprobe failed for {file_path}: {result.stderr}")

        data = json.loads(result.stdout)

        raw = data.get("format", {}).get("duration")
        if raw is None:
            raise ValueError(f"No duration reported for {file_path}")
        try:
            duration = float(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Unparsable duration {raw!r} for {file_path}")

        if not math.isfinite(duration):
            raise ValueError(f"Non-finite duration {raw!r} for {file_path}")
        return duration
