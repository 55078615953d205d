"""Command line interface for the strict_srt toolkit."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from .models import Subtitle
from .srt import ParserConfig, SrtParseError, parse, render, scale, shift
from .utils import read_text, write_text

app = typer.Typer(help="Strict SRT subtitle utilities")

_SRT_ARGUMENT_HELP = "SRT subtitle file, '-' or omitted for standard input"


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    allow_trailing_bytes: bool = typer.Option(
        False, help="Ignore characters after the ending timestamp"
    ),
    require_text: bool = typer.Option(False, help="Reject subtitles with an empty text section"),
) -> None:
    """Parse, check and retime SubRip subtitle files."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", force=True
        )
    ctx.obj = ParserConfig(
        allow_trailing_bytes=allow_trailing_bytes,
        allow_empty_text=not require_text,
    )


def _read_source(srt: Optional[Path]) -> str:
    try:
        if srt is None or str(srt) == "-":
            # Raw bytes keep lone carriage returns and reject invalid UTF-8.
            return typer.get_binary_stream("stdin").read().decode("utf-8-sig")
        return read_text(srt)
    except (OSError, UnicodeDecodeError) as exc:
        typer.secho(f"Error reading SRT file: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _load(ctx: typer.Context, srt: Optional[Path]) -> List[Subtitle]:
    text = _read_source(srt)
    config = ctx.obj if isinstance(ctx.obj, ParserConfig) else ParserConfig()
    try:
        return parse(text, config)
    except SrtParseError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _emit(subtitles: List[Subtitle], out: Optional[Path]) -> None:
    rendered = render(subtitles)
    if out is None:
        typer.echo(rendered, nl=False)
        return
    write_text(out, rendered)
    typer.secho(f"{len(subtitles)} subtitles written -> {out}", fg=typer.colors.GREEN, err=True)


@app.command("check")
def check(
    ctx: typer.Context,
    srt: Optional[Path] = typer.Argument(None, dir_okay=False, help=_SRT_ARGUMENT_HELP),
) -> None:
    """Validate an SRT file and report how many subtitles it holds."""
    subtitles = _load(ctx, srt)
    typer.secho(f"OK: {len(subtitles)} subtitles", fg=typer.colors.GREEN)


@app.command("show")
def show(
    ctx: typer.Context,
    srt: Optional[Path] = typer.Argument(None, dir_okay=False, help=_SRT_ARGUMENT_HELP),
) -> None:
    """Print one line per subtitle with its timing."""
    for index, subtitle in enumerate(_load(ctx, srt), start=1):
        text = subtitle.text.replace("\n", " | ")
        typer.echo(f"#{index} {subtitle.start} --> {subtitle.end} ({subtitle.duration}) {text}")


@app.command("shift")
def shift_command(
    ctx: typer.Context,
    by: int = typer.Option(..., "--by", help="Milliseconds to move subtitles, negative moves earlier"),
    srt: Optional[Path] = typer.Argument(None, dir_okay=False, help=_SRT_ARGUMENT_HELP),
    out: Optional[Path] = typer.Option(None, dir_okay=False, help="Output SRT file (default: stdout)"),
) -> None:
    """Move every subtitle earlier or later."""
    _emit(shift(_load(ctx, srt), by), out)


@app.command("scale")
def scale_command(
    ctx: typer.Context,
    factor: float = typer.Argument(..., help="Factor applied to start times and durations, e.g. 1.25"),
    srt: Optional[Path] = typer.Argument(None, dir_okay=False, help=_SRT_ARGUMENT_HELP),
    out: Optional[Path] = typer.Option(None, dir_okay=False, help="Output SRT file (default: stdout)"),
) -> None:
    """Stretch or compress subtitle timing."""
    _emit(scale(_load(ctx, srt), factor), out)


@app.command("fmt")
def fmt(
    ctx: typer.Context,
    srt: Optional[Path] = typer.Argument(None, dir_okay=False, help=_SRT_ARGUMENT_HELP),
    out: Optional[Path] = typer.Option(None, dir_okay=False, help="Output SRT file (default: stdout)"),
) -> None:
    """Re-render an SRT file in canonical form with sequential ids."""
    _emit(_load(ctx, srt), out)


if __name__ == "__main__":
    app()
