"""CLI for karaoke captions module."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import config
from .ass_generator import CaptionCompiler
from .errors import NoTimingDataAvailable
from .models import CaptionStyle
from .resolver import WordTimingResolver
from .styles import CAPTION_PRESETS, PRESET_NAMES, get_preset, load_style_from_json

console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(rich_tracebacks=True, console=console)],
)

logger = logging.getLogger(__name__)

app = typer.Typer(help="Word-synchronized karaoke captions")

EXIT_NO_CAPTIONS = 2


def _read_transcript(path: Path):
    """Load a provider JSON payload, or the raw text of an SRT/plain file."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return text


@app.command("compile")
def compile_captions_command(
    transcript: Path = typer.Argument(
        ..., help="Transcription JSON, SRT or plain text file", exists=True, dir_okay=False
    ),
    output: Path = typer.Option(..., "--output", "-o", help="Path to output .ass file"),
    preset: str = typer.Option(config.DEFAULT_PRESET, "--preset", "-p", help="Caption preset id"),
    style_config: Optional[Path] = typer.Option(
        None, "--style-config", help="Path to style settings JSON (overrides --preset)"
    ),
    words_per_page: Optional[int] = typer.Option(
        None, "--words-per-page", "-w", help="Words shown together on screen"
    ),
    position: Optional[str] = typer.Option(
        None, "--position", help="Vertical position: top, center or bottom"
    ),
    vertical_percent: Optional[float] = typer.Option(
        None, "--vertical-percent", help="Vertical position, 0 (top) to 100 (bottom)"
    ),
    wpm: float = typer.Option(
        config.WORDS_PER_MINUTE, "--wpm", help="Speaking rate for untimed transcripts"
    ),
):
    """Compile a transcription into karaoke ASS captions.

    Example:
        python -m src.captions compile transcript.json --output subs.ass --preset neon-glow
    """
    if position is not None and vertical_percent is not None:
        console.print("[red]Error: use either --position or --vertical-percent, not both[/red]")
        raise typer.Exit(1)

    try:
        style = load_style_from_json(style_config) if style_config else get_preset(preset)
        if words_per_page is not None:
            style = CaptionStyle(**{**style.model_dump(), "words_per_page": words_per_page})
        if position is not None:
            style = style.with_position(position)
        if vertical_percent is not None:
            style = style.with_vertical_position(vertical_percent)
    except (KeyError, ValueError, FileNotFoundError, ValidationError) as e:
        console.print(f"[red]Error loading style: {e}[/red]")
        raise typer.Exit(1)

    try:
        payload = _read_transcript(transcript)
        resolver = WordTimingResolver(words_per_minute=wpm)
        strategy, words = resolver.resolve_with_strategy(payload)
    except NoTimingDataAvailable as e:
        console.print(f"[yellow]No captions generated: {e}[/yellow]")
        raise typer.Exit(EXIT_NO_CAPTIONS)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Error reading transcript: {e}[/red]")
        raise typer.Exit(1)

    compiler = CaptionCompiler(style)
    compiler.write(words, output)

    console.print(f"[bold green]✓ Captions written to {output}[/bold green]")
    console.print(f"  Words: {len(words)}")
    console.print(f"  Timing: {strategy.value}")
    console.print(f"  Position: {style.position} ({style.vertical_position_percent:.0f}%)")


@app.command()
def presets():
    """List the built-in caption presets."""
    table = Table(title="Caption Presets")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Font")
    table.add_column("Text")
    table.add_column("Highlight")
    table.add_column("Background")
    table.add_column("Words/Page", justify="right")

    for preset_id, style in CAPTION_PRESETS.items():
        background = style.background_color.to_hex() if style.background_color else "-"
        table.add_row(
            preset_id,
            PRESET_NAMES.get(preset_id, preset_id),
            f"{style.font_family} {style.font_size_pt}",
            style.text_color.to_hex(),
            style.highlight_color.to_hex(),
            background,
            str(style.words_per_page),
        )

    console.print(table)


if __name__ == "__main__":
    app()
