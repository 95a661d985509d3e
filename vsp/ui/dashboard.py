import threading
from typing import Optional
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from vsp.ui.state import JobState
from vsp.domain.models import JobStatus, SegmentStatus
from vsp.utils.formatting import format_time

_STATUS_STYLES = {
    JobStatus.IDLE: "dim",
    JobStatus.CONVERTING: "yellow",
    JobStatus.SPLITTING: "yellow",
    JobStatus.PROCESSING: "green",
    JobStatus.MERGING: "magenta",
    JobStatus.COMPLETED: "cyan",
    JobStatus.ERROR: "bright_red",
}

_SEGMENT_ICONS = {
    SegmentStatus.PENDING: ("·", "dim"),
    SegmentStatus.PROCESSING: ("◉", "yellow"),
    SegmentStatus.COMPLETED: ("✓", "green"),
    SegmentStatus.ERROR: ("✗", "red"),
}

class Dashboard:
    """Renders the live segment dashboard."""

    def __init__(
        self,
        state: JobState,
        console: Optional[Console] = None,
        max_rows: int = 20,
        refresh_interval: float = 0.1
    ):
        self.state = state
        self.console = console or Console()
        self.max_rows = max_rows
        self.refresh_interval = refresh_interval
        self._live: Optional[Live] = None
        self._refresh_thread: Optional[threading.Thread] = None
        self._stop_refresh = threading.Event()
        self._ui_lock = threading.Lock()

    def _generate_status_panel(self) -> Panel:
        with self.state._lock:
            job = self.state.job
            if job is None:
                return Panel("No video loaded", title="JOB", border_style="white")

            color = _STATUS_STYLES.get(job.status, "white")
            activity = "[green]●[/] " if self.state.is_processing else ""
            lines = [
                f"[dim]Job:[/] {job.id}",
                (
                    f"[dim]Status:[/] {activity}[bold {color}]{job.status.value.upper()}[/] | "
                    f"[dim]Mode:[/] {job.mode.value} | "
                    f"[dim]Filter:[/] {job.video_filter.value}"
                ),
                (
                    f"[dim]Duration:[/] {job.duration_seconds:.2f}s | "
                    f"[dim]Segments:[/] {self.state.completed_count}/{len(job.segments)} | "
                    f"[dim]Progress:[/] {self.state.overall_progress:.0f}% | "
                    f"[dim]Elapsed:[/] {format_time(self.state.elapsed_ms)}"
                ),
            ]
            if job.error_message:
                lines.append(f"[bright_red]{job.error_message}[/]")

        return Panel("\n".join(lines), title="JOB", border_style="cyan")

    def _generate_segments_panel(self) -> Panel:
        with self.state._lock:
            segments = self.state.segments
            if not segments:
                return Panel("No segments", title="SEGMENTS", border_style="yellow")

            table = Table(show_header=True, box=None, padding=(0, 1))
            table.add_column("", width=1)
            table.add_column("#", justify="right", style="cyan")
            table.add_column("Range", justify="right")
            table.add_column("Progress", width=24)
            table.add_column("%", justify="right")
            table.add_column("Time", justify="right", style="yellow")

            # Keep active segments in view once the list is longer than the panel
            visible = segments
            if len(segments) > self.max_rows:
                first_open = next((i for i, s in enumerate(segments) if s.status != SegmentStatus.COMPLETED), 0)
                start = max(0, min(first_open, len(segments) - self.max_rows))
                visible = segments[start:start + self.max_rows]

            for segment in visible:
                icon, style = _SEGMENT_ICONS[segment.status]
                table.add_row(
                    f"[{style}]{icon}[/]",
                    str(segment.id),
                    f"{segment.start_time:.1f}-{segment.end_time:.1f}s",
                    ProgressBar(total=100, completed=segment.progress, width=24),
                    f"{segment.progress:.0f}",
                    format_time(segment.processing_time_ms) if segment.processing_time_ms is not None else "",
                )

            hidden = len(segments) - len(visible)

        title = "SEGMENTS" if not hidden else f"SEGMENTS (+{hidden} more)"
        return Panel(table, title=title, border_style="yellow")

    def _generate_stats_panel(self) -> Panel:
        with self.state._lock:
            stats = self.state.job.stats if self.state.job else None
            if stats is None:
                return Panel("Waiting for all segments to complete", title="PERFORMANCE", border_style="green")

            content = (
                f"[dim]Speedup:[/] [bold green]{stats.speedup_factor:.2f}x[/] | "
                f"[dim]Sequential:[/] {format_time(stats.sequential_time)} | "
                f"[dim]Parallel:[/] {format_time(stats.parallel_time)} | "
                f"[dim]Total:[/] {format_time(stats.total_time)} | "
                f"[dim]Cores:[/] {stats.cpu_cores}"
            )
        return Panel(content, title="PERFORMANCE", border_style="green")

    def create_display(self) -> Group:
        return Group(
            self._generate_status_panel(),
            self._generate_segments_panel(),
            self._generate_stats_panel()
        )

    def _job_finished(self) -> bool:
        with self.state._lock:
            job = self.state.job
            return job is not None and job.status in (JobStatus.COMPLETED, JobStatus.ERROR)

    def _redraw(self):
        display = self.create_display()
        with self._ui_lock:
            if self._live:
                self._live.update(display, refresh=True)

    def _refresh_loop(self):
        """Redraws on every tick until stopped or until the job completes or fails.

        The final frame is drawn before the loop exits, so the summary stays on screen.
        """
        while not self._stop_refresh.is_set():
            self._redraw()
            if self._job_finished():
                break
            self._stop_refresh.wait(self.refresh_interval)

    def start(self):
        self._stop_refresh.clear()
        self._live = Live(self.create_display(), console=self.console, auto_refresh=False)
        self._live.start()
        self._refresh_thread = threading.Thread(target=self._refresh_loop, name="vsp-dashboard", daemon=True)
        self._refresh_thread.start()
        return self

    def stop(self):
        """Stops redrawing and leaves the last frame of the job in the terminal."""
        self._stop_refresh.set()
        if self._refresh_thread:
            self._refresh_thread.join(timeout=1.0)
            self._refresh_thread = None
        if self._live:
            self._redraw()
            self._live.stop()

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
