"""Command-line interface for wavspec.

Provides commands for:
- render: Compute a spectrogram and save it as an image
- info: Show audio file information
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from .core.constants import (
    DEFAULT_IMAGE_PATH,
    DEFAULT_KEEP_FRACTION,
    DEFAULT_START_TIME,
    DEFAULT_WINDOW_LENGTH,
)
from .core.errors import SpectrogramError

app = typer.Typer(
    name="wavspec",
    help="Audio to spectrogram conversion",
    rich_markup_mode="markdown",
)
console = Console()


@dataclass
class StageTimings:
    """Track timing of processing stages."""

    stages: Dict[str, float] = field(default_factory=dict)
    _current_stage: Optional[str] = field(default=None, repr=False)
    _start_time: float = field(default=0.0, repr=False)

    def start(self, stage: str) -> None:
        """Start timing a stage."""
        self._current_stage = stage
        self._start_time = time.perf_counter()

    def stop(self) -> float:
        """Stop timing the current stage, return duration."""
        if self._current_stage is None:
            return 0.0
        duration = time.perf_counter() - self._start_time
        self.stages[self._current_stage] = duration
        self._current_stage = None
        return duration

    @property
    def total_time(self) -> float:
        """Get total time across all stages."""
        return sum(self.stages.values())

    def print_summary(self) -> None:
        """Print timing summary to console."""
        console.print("\n[bold]Timing Summary:[/bold]")
        for stage, duration in self.stages.items():
            console.print(f"  {stage}: {duration:.2f}s")
        console.print(f"  [bold]Total: {self.total_time:.2f}s[/bold]")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "stages": self.stages,
            "total_time": self.total_time,
        }


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


@app.command()
def render(
    input_file: Path = typer.Argument(..., help="Input audio file (WAV, FLAC, MP3, ...)"),
    output: Path = typer.Option(
        Path(DEFAULT_IMAGE_PATH), "-o", "--output", help="Output image path"
    ),
    chunk_size: float = typer.Option(
        DEFAULT_WINDOW_LENGTH, "-c", "--chunk-size", help="Window length in seconds"
    ),
    step: Optional[float] = typer.Option(
        None, "-s", "--step", help="Time between windows in seconds (default: chunk size)"
    ),
    start: float = typer.Option(
        DEFAULT_START_TIME, "--start", help="Start time in seconds"
    ),
    duration: Optional[float] = typer.Option(
        None, "-d", "--duration", help="Seconds to analyze (default: rest of file)"
    ),
    keep_fraction: float = typer.Option(
        DEFAULT_KEEP_FRACTION, "-k", "--keep-fraction",
        help="Fraction of the half-spectrum to keep (lowest frequencies)",
    ),
    gain: Optional[float] = typer.Option(
        None, "-g", "--gain", help="Contrast gain k, maps x to (k*x)^2 before clamping"
    ),
    workers: int = typer.Option(
        1, "-w", "--workers", help="Worker threads for the window loop"
    ),
    colormap: str = typer.Option(
        "hwb", "--colormap", help="Pixel colors: hwb or gray"
    ),
    flip: bool = typer.Option(
        False, "--flip", help="Put low frequencies at the bottom"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Render a spectrogram image from an audio file.

    **Examples:**

        wavspec render song.wav

        wavspec render song.wav -c 0.05 -s 0.025 -o song.png

        wavspec render song.flac --gain 3 --colormap gray
    """
    from .input import AudioLoader
    from .analysis import SpectrogramConfig, SpectrogramEngine
    from .output import ImageRenderer, RenderConfig

    timings = StageTimings()

    try:
        config = SpectrogramConfig(
            start_time_s=start,
            window_length_s=chunk_size,
            step_s=step,
            duration_s=duration,
            frequency_keep_fraction=keep_fraction,
            amplifier_gain=gain,
            max_workers=workers,
        )
        engine = SpectrogramEngine(config)
        renderer = ImageRenderer(RenderConfig(colormap=colormap, flip=flip))

        if not json_output:
            console.print(f"[blue]Loading audio:[/blue] {input_file}")
        timings.start("load")
        store = AudioLoader().load(input_file)
        timings.stop()

        if verbose and not json_output:
            console.print(
                f"  Duration: {store.duration:.2f}s, Sample rate: {store.sampling_rate}Hz, "
                f"Channels: {store.channel_count}, Samples: {len(store):,}"
            )

        if not json_output:
            console.print("[blue]Computing spectrogram...[/blue]")
        timings.start("transform")
        transform_map = engine.run(store)
        timings.stop()

        plan = engine.plan
        frequencies = engine.bin_frequencies(transform_map.height)
        peak_window, peak_bin = transform_map.peak()
        peak_time = float(engine.window_times()[peak_window])
        peak_frequency = float(frequencies[peak_bin])
        if verbose and not json_output:
            console.print(
                f"  Window: {plan.window_length} samples, step: {plan.step} samples, "
                f"{plan.width} windows x {transform_map.height} bins"
            )
            console.print(f"  Global max: {transform_map.global_max:.4g}")
            console.print(f"  Peak: {peak_frequency:.1f} Hz at {peak_time:.3f}s")

        timings.start("render")
        written = renderer.save(transform_map, output)
        timings.stop()
    except FileNotFoundError as e:
        _fail(str(e))
    except SpectrogramError as e:
        _fail(str(e))
    except OSError as e:
        _fail(f"I/O error: {e}")

    if json_output:
        console.print_json(data={
            "input": str(input_file),
            "output": str(written),
            "sampling_rate": store.sampling_rate,
            "channels": store.channel_count,
            "window_length": plan.window_length,
            "step": plan.step,
            "width": transform_map.width,
            "height": transform_map.height,
            "max_frequency": float(frequencies[-1]),
            "global_max": transform_map.global_max,
            "peak_window": int(peak_window),
            "peak_time": peak_time,
            "peak_frequency": peak_frequency,
            "timings": timings.to_dict(),
        })
        return

    console.print(f"[green]Saved spectrogram:[/green] {written}")
    if verbose:
        timings.print_summary()


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input audio file"),
):
    """Show information about an audio file."""
    from .input import AudioLoader

    try:
        audio_info = AudioLoader().info(input_file)
    except FileNotFoundError as e:
        _fail(str(e))
    except SpectrogramError as e:
        _fail(str(e))

    table = Table(title=f"Audio Info: {input_file.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Duration", f"{audio_info.duration:.2f} s")
    table.add_row("Sample rate", f"{audio_info.sampling_rate} Hz")
    table.add_row("Channels", str(audio_info.channel_count))
    table.add_row("Frames", f"{audio_info.frames:,}")
    if audio_info.bit_depth is not None:
        table.add_row("Bit depth", f"{audio_info.bit_depth} ({audio_info.subtype})")

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
