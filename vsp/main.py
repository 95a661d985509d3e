import asyncio
import typer
import yaml
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.table import Table

from vsp.config.loader import DEFAULT_CONFIG_PATH, load_config
from vsp.config.models import AppConfig
from vsp.infrastructure.logging import setup_logging
from vsp.infrastructure.event_bus import EventBus
from vsp.infrastructure.ffprobe import FFprobeAdapter
from vsp.domain.errors import EngineError
from vsp.domain.models import ProcessingMode, ProcessingStats, VideoFilter
from vsp.pipeline.orchestrator import Orchestrator
from vsp.pipeline.segments import partition
from vsp.ui.state import JobState
from vsp.ui.manager import UIManager
from vsp.ui.dashboard import Dashboard
from vsp.utils.formatting import format_file_size, format_time

app = typer.Typer(help="VSP (Video Segment Processing) - sequential vs parallel segment demo")

def _fail(message: str, code: int = 1):
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=code)

def _resolve_duration(video: Optional[Path], duration: Optional[float]) -> float:
    """Duration comes from ffprobe for a file, or straight from --duration."""
    if (video is None) == (duration is None):
        _fail("Provide either a VIDEO path or --duration, not both or neither.")
    if duration is not None:
        return duration
    if not video.exists():
        _fail(f"File {video} does not exist.")
    return FFprobeAdapter().get_duration(video)

def _load(config_path: Path, segment_length: Optional[float]) -> AppConfig:
    config = load_config(config_path)
    if segment_length is not None:
        config.engine.segment_length_s = segment_length
    return config

def _print_summary(console: Console, stats: ProcessingStats, mode: ProcessingMode):
    table = Table(title=f"Performance ({mode.value})", show_header=False)
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Total time", format_time(stats.total_time))
    table.add_row("Sequential time", format_time(stats.sequential_time))
    table.add_row("Parallel time", format_time(stats.parallel_time))
    table.add_row("Speedup factor", f"[bold green]{stats.speedup_factor:.2f}x[/]")
    table.add_row("Segments", str(stats.segment_count))
    table.add_row("CPU cores", str(stats.cpu_cores))
    console.print(table)

@app.command()
def run(
    video: Optional[Path] = typer.Argument(None, help="Video file whose duration is probed with ffprobe"),
    duration: Optional[float] = typer.Option(None, "--duration", "-d", help="Video duration in seconds (instead of a file)"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to YAML config"),
    mode: Optional[ProcessingMode] = typer.Option(None, "--mode", "-m", help="Scheduling policy"),
    video_filter: Optional[VideoFilter] = typer.Option(None, "--filter", "-f", help="Filter whose cost is simulated"),
    segment_length: Optional[float] = typer.Option(None, "--segment-length", "-s", help="Override segment length in seconds"),
    cores: Optional[int] = typer.Option(None, "--cores", min=1, help="CPU core count reported in the stats"),
    dashboard: Optional[bool] = typer.Option(None, "--dashboard/--no-dashboard", help="Show the live dashboard"),
    as_json: bool = typer.Option(False, "--json", help="Print the final stats as JSON"),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Enable verbose debug logging")
):
    """Splits a video into segments and runs the simulated processing."""
    try:
        config = _load(config_path, segment_length)
        if mode is not None: config.general.mode = mode
        if video_filter is not None: config.general.video_filter = video_filter
        if cores is not None: config.general.cpu_cores = cores
        if dashboard is not None: config.general.dashboard = dashboard
        if debug: config.general.debug = True

        logger = setup_logging(config.general.log_file, debug=config.general.debug)
        video_duration = _resolve_duration(video, duration)
        logger.info(f"VSP started: source={video or '-'}, duration={video_duration:.2f}s, mode={config.general.mode.value}")

        bus = EventBus()
        state = JobState()
        UIManager(bus, state)
        orchestrator = Orchestrator(config=config, event_bus=bus)

        job = orchestrator.create_job(video_duration, source=video)
        console = Console()
        if video is not None and not as_json:
            console.print(f"[dim]Source:[/] {video.name} ({format_file_size(video.stat().st_size)})")

        # the live view would share stdout with the JSON document
        if config.general.dashboard and not as_json:
            with Dashboard(state, console=console):
                stats = asyncio.run(orchestrator.run(job))
        else:
            stats = asyncio.run(orchestrator.run(job))

        if as_json:
            typer.echo(stats.model_dump_json(indent=2))
        else:
            _print_summary(console, stats, config.general.mode)

    except typer.Exit:
        raise
    except KeyboardInterrupt:
        typer.echo("\nInterrupted by user")
        raise typer.Exit(code=130)
    except (EngineError, OSError, RuntimeError, ValueError, yaml.YAMLError) as e:
        _fail(str(e))

@app.command()
def segments(
    video: Optional[Path] = typer.Argument(None, help="Video file whose duration is probed with ffprobe"),
    duration: Optional[float] = typer.Option(None, "--duration", "-d", help="Video duration in seconds (instead of a file)"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to YAML config"),
    segment_length: Optional[float] = typer.Option(None, "--segment-length", "-s", help="Override segment length in seconds"),
):
    """Prints how a video would be split, without processing it."""
    try:
        config = _load(config_path, segment_length)
        parts = partition(_resolve_duration(video, duration), config.engine.segment_length_s)
    except typer.Exit:
        raise
    except (EngineError, OSError, RuntimeError, ValueError, yaml.YAMLError) as e:
        _fail(str(e))

    table = Table(title=f"{len(parts)} segments")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Length", justify="right")
    for segment in parts:
        table.add_row(
            str(segment.id),
            f"{segment.start_time:.2f}s",
            f"{segment.end_time:.2f}s",
            f"{segment.duration:.2f}s",
        )
    Console().print(table)

if __name__ == "__main__":
    app()
