"""abcmode CLI entry point."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from abcmode import __version__
from abcmode.config import AppConfig, load_config
from abcmode.document import Document
from abcmode.errors import AbcModeError
from abcmode.highlight import highlight_text
from abcmode.instruments import INSTRUMENTS, canonical_names, midi_program_directive
from abcmode.line_classifier import classify_document
from abcmode.process_runner import ProcessResult, ProcessRunner
from abcmode.registry import commands
from abcmode.session import EditSession

DEFAULT_CONFIG = "abcmode.yaml"

_FILE = click.Path(exists=True, dir_okay=False, readable=True, path_type=Path)


class _DryRunRunner(ProcessRunner):
    """Prints each argv instead of executing it."""

    def run(self, argv: list[str]) -> ProcessResult:
        click.echo(" ".join(argv))
        return ProcessResult(argv=list(argv), returncode=0, output="")


def _open_session(ctx: click.Context, file: Path, dry_run: bool = False) -> EditSession:
    config: AppConfig = ctx.obj
    runner = _DryRunRunner() if dry_run else ProcessRunner(cwd=file.parent)
    try:
        return EditSession.open(file, config=config, runner=runner)
    except AbcModeError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)


def _finish(session: EditSession, in_place: bool) -> None:
    """Write the edited document back, or print it to stdout."""
    if in_place:
        path = session.document.save()
        click.echo(f"Wrote '{path}'.")
    else:
        click.echo(session.document.text, nl=False)


def _select_song(session: EditSession, song: int | None) -> None:
    if song is None:
        return
    try:
        record = session.index.find_record(song)
    except AbcModeError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    session.document.cursor = session.document.line_start(record.start_line)


def _report(session: EditSession, result: ProcessResult | None) -> None:
    for message in session.messages:
        click.echo(message.rstrip("\n"))
    if result is None or not result.ok:
        sys.exit(1)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="abcmode")
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG,
    show_default=True,
    metavar="PATH",
    help="YAML configuration file. Ignored if it does not exist.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool) -> None:
    """abcmode: structural editing tools for ABC music notation files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        ctx.obj = load_config(config_path)
    except (ValueError, OSError) as exc:
        click.echo(f"  ERROR: Could not load config: {exc}", err=True)
        sys.exit(1)


# ── Inspection ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("file", type=_FILE)
@click.option("--spans", is_flag=True, help="List recognised spans instead of highlighting.")
def classify(file: Path, spans: bool) -> None:
    """
    Highlight FILE, or list the category of every recognised span.

    \b
    Examples:
      abcmode classify tunes.abc
      abcmode classify tunes.abc --spans
    """
    text = file.read_text(encoding="utf-8")
    if not spans:
        Console(highlight=False).print(highlight_text(text))
        return

    lines = text.split("\n")
    for index, line_spans in classify_document(text):
        for span in line_spans:
            click.echo(
                f"{index + 1}:{span.start}-{span.end}  {span.category.value:<24}  "
                f"{span.text(lines[index])}"
            )


@main.command()
@click.argument("file", type=_FILE)
@click.pass_context
def titles(ctx: click.Context, file: Path) -> None:
    """List every title line of FILE with its line number."""
    session = _open_session(ctx, file)
    for line_number, title in commands.run("list-titles", session):
        click.echo(f"{line_number:6d}  {title}")


@main.command()
@click.argument("file", type=_FILE)
@click.argument("number", type=click.IntRange(min=0))
@click.pass_context
def song(ctx: click.Context, file: Path, number: int) -> None:
    """Print song X:NUMBER of FILE."""
    session = _open_session(ctx, file)
    text = commands.run("song-text", session, number=number)
    if text is None:
        for message in session.messages:
            click.echo(f"  ERROR: {message}", err=True)
        sys.exit(1)
    click.echo(text.rstrip("\n"))


@main.command()
@click.pass_context
def fields(ctx: click.Context) -> None:
    """List every field name with the marker the configuration gives it."""
    try:
        session = EditSession(Document(), config=ctx.obj)
    except AbcModeError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    for name, marker in commands.run("list-fields", session):
        click.echo(f"{name:<16}  {marker}")


@main.command()
@click.argument("name", required=False)
@click.option("--aliases", is_flag=True, help="Also list alternative instrument names.")
def instruments(name: str | None, aliases: bool) -> None:
    """Print the General MIDI program for NAME, or the whole table."""
    if name is not None:
        try:
            click.echo(midi_program_directive(name))
        except AbcModeError as exc:
            click.echo(f"  ERROR: {exc}", err=True)
            sys.exit(1)
        return
    if aliases:
        rows = sorted(INSTRUMENTS.items(), key=lambda item: (item[1], item[0]))
    else:
        rows = [(instrument, INSTRUMENTS[instrument]) for instrument in canonical_names()]
    for instrument, program in rows:
        click.echo(f"{program:3d}  {instrument}")


# ── Editing ────────────────────────────────────────────────────────────────────

_IN_PLACE = click.option(
    "--in-place", "-i", is_flag=True, help="Rewrite FILE instead of printing the result."
)


@main.command()
@click.argument("file", type=_FILE)
@_IN_PLACE
@click.pass_context
def renumber(ctx: click.Context, file: Path, in_place: bool) -> None:
    """Renumber the X: reference lines of FILE as 1, 2, 3, ..."""
    session = _open_session(ctx, file)
    commands.run("renumber", session)
    _finish(session, in_place)


@main.command("align-bars")
@click.argument("file", type=_FILE)
@_IN_PLACE
@click.pass_context
def align_bars(ctx: click.Context, file: Path, in_place: bool) -> None:
    """Normalise bar spacing and align bars across the music lines of FILE."""
    session = _open_session(ctx, file)
    commands.run("align-bars", session)
    _finish(session, in_place)


@main.command("extract-chords")
@click.argument("file", type=_FILE)
@_IN_PLACE
@click.pass_context
def extract_chords(ctx: click.Context, file: Path, in_place: bool) -> None:
    """Replace notes with x rests, keeping chords, bars and lengths."""
    session = _open_session(ctx, file)
    commands.run("extract-chords", session)
    _finish(session, in_place)


# ── External tools ─────────────────────────────────────────────────────────────

@main.command()
@click.argument("file", type=_FILE)
@click.option("--format", "format_name", default=None, metavar="NAME", help="Option set from the formats table.")
@click.option("--song", type=click.IntRange(min=0), default=None, metavar="N", help="Render only song X:N.")
@click.option("--flag", "flags", multiple=True, metavar="ARG", help="Extra argument for the renderer (repeatable).")
@click.option("--dry-run", is_flag=True, help="Print the command line instead of running it.")
@click.pass_context
def render(ctx: click.Context, file: Path, format_name: str | None, song: int | None, flags: tuple[str, ...], dry_run: bool) -> None:
    """
    Render FILE to PostScript with the configured renderer (abcm2ps).

    \b
    Examples:
      abcmode render tunes.abc --format pretty
      abcmode render tunes.abc --song 3 --dry-run
    """
    session = _open_session(ctx, file, dry_run)
    _select_song(session, song)
    command_id = "render" if song is None else "render-song"
    try:
        result = commands.run(command_id, session, format=format_name, flags=list(flags))
    except ValueError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    _report(session, result)


@main.command()
@click.argument("file", type=_FILE)
@click.option("--song", type=click.IntRange(min=0), default=None, metavar="N", help="Convert only song X:N.")
@click.option("--flag", "flags", multiple=True, metavar="ARG", help="Extra argument for the converter (repeatable).")
@click.option("--dry-run", is_flag=True, help="Print the command line instead of running it.")
@click.pass_context
def midi(ctx: click.Context, file: Path, song: int | None, flags: tuple[str, ...], dry_run: bool) -> None:
    """Convert FILE to MIDI with the configured converter (abc2midi)."""
    session = _open_session(ctx, file, dry_run)
    _select_song(session, song)
    command_id = "midi" if song is None else "midi-song"
    result = commands.run(command_id, session, flags=list(flags))
    _report(session, result)


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("file", type=_FILE)
@click.argument("flags", nargs=-1, type=click.UNPROCESSED)
@click.option("--dry-run", is_flag=True, help="Print the command line instead of running it.")
@click.pass_context
def transform(ctx: click.Context, file: Path, flags: tuple[str, ...], dry_run: bool) -> None:
    """
    Run the configured transformer (abc2abc) on FILE with FLAGS.

    \b
    Examples:
      abcmode transform tunes.abc -t 2
    """
    session = _open_session(ctx, file, dry_run)
    result = commands.run("transform", session, flags=list(flags))
    _report(session, result)
