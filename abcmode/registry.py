"""CommandRegistry: command ids mapped to handlers over an explicit session."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from abcmode import structural
from abcmode.errors import NoRecordFound, UnknownCommand
from abcmode.process_runner import ProcessResult
from abcmode.session import EditSession
from abcmode.tool_commands import ConverterCommand, RendererCommand, TransformerCommand

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class CommandRegistry:
    """
    Name-based dispatch without ambient state: every handler receives the
    session it operates on as its first argument.

        registry = CommandRegistry()

        @registry.register("say-hello")
        def say_hello(session):
            session.message("hello")

        registry.run("say-hello", session)
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, command_id: str) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            if command_id in self._handlers:
                raise ValueError(f"Command '{command_id}' is already registered.")
            self._handlers[command_id] = handler
            return handler

        return decorator

    def run(self, command_id: str, session: EditSession, **kwargs: Any) -> Any:
        try:
            handler = self._handlers[command_id]
        except KeyError:
            raise UnknownCommand(command_id) from None
        logger.debug("Running command %s %s", command_id, kwargs)
        return handler(session, **kwargs)

    def command_ids(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._handlers


#: Registry holding the built-in commands.
commands = CommandRegistry()


def _region(session: EditSession, start: int | None, end: int | None) -> tuple[int, int]:
    """Default region: the whole document."""
    return (0 if start is None else start, len(session.document) if end is None else end)


def _current_song(session: EditSession) -> int | None:
    try:
        return session.index.current_record_number(session.document.cursor)
    except NoRecordFound as exc:
        session.message(str(exc))
        return None


# ── Navigation ─────────────────────────────────────────────────────────────

@commands.register("next-song")
def next_song(session: EditSession) -> int | None:
    pos = session.index.next_record_boundary(session.document.cursor)
    if pos is None:
        session.message("No next song.")
    else:
        session.document.cursor = pos
    return pos


@commands.register("previous-song")
def previous_song(session: EditSession) -> int | None:
    pos = session.index.previous_record_boundary(session.document.cursor)
    if pos is None:
        session.message("No previous song.")
    else:
        session.document.cursor = pos
    return pos


@commands.register("current-song")
def current_song(session: EditSession) -> int | None:
    return _current_song(session)


@commands.register("renumber")
def renumber(session: EditSession) -> int:
    count = session.index.renumber_all()
    session.message(f"Renumbered {count} song(s).")
    return count


@commands.register("list-titles")
def list_titles(session: EditSession) -> list[tuple[int, str]]:
    return session.index.list_titles()


@commands.register("song-text")
def song_text(session: EditSession, number: int | None = None) -> str | None:
    """Text of song X:*number*, or of the song at the cursor."""
    if number is None:
        number = _current_song(session)
        if number is None:
            return None
    try:
        return session.index.record_text(number)
    except NoRecordFound as exc:
        session.message(str(exc))
        return None


@commands.register("list-fields")
def list_fields(session: EditSession) -> list[tuple[str, str]]:
    return list(session.tags.markers.items())


# ── Insertion helpers ──────────────────────────────────────────────────────

@commands.register("insert-field")
def insert_field(session: EditSession, field: str, value: str = "") -> None:
    structural.insert_field(session.document, session.tags, field, value)


@commands.register("new-song")
def new_song(session: EditSession, title: str = "", **header: str) -> int:
    return structural.insert_song_skeleton(session.document, session.index, title, **header)


@commands.register("insert-instrument")
def insert_instrument(session: EditSession, instrument: str) -> int | None:
    try:
        return structural.insert_midi_program(session.document, session.index, instrument)
    except NoRecordFound as exc:
        session.message(str(exc))
        return None


@commands.register("pad-click")
def pad_click(session: EditSession, pos: int) -> str | None:
    return session.pad.click(pos, session.document)


# ── Structural editing ─────────────────────────────────────────────────────

@commands.register("wrap-slur")
def wrap_slur(session: EditSession, start: int, end: int) -> None:
    structural.wrap_slur(session.document, start, end)


@commands.register("wrap-crescendo")
def wrap_crescendo(session: EditSession, start: int, end: int) -> None:
    structural.wrap_crescendo(session.document, start, end)


@commands.register("wrap-diminuendo")
def wrap_diminuendo(session: EditSession, start: int, end: int) -> None:
    structural.wrap_diminuendo(session.document, start, end)


@commands.register("wrap-repeat")
def wrap_repeat(session: EditSession, start: int, end: int) -> None:
    structural.wrap_repeat(session.document, start, end)


@commands.register("align-bars")
def align_bars(session: EditSession, start: int | None = None, end: int | None = None) -> None:
    structural.align_bars(session.document, *_region(session, start, end))


@commands.register("extract-chords")
def extract_chords(session: EditSession, start: int | None = None, end: int | None = None) -> None:
    structural.extract_chords(session.document, *_region(session, start, end))


# ── External tools ─────────────────────────────────────────────────────────

@commands.register("render")
def render(session: EditSession, format: str | None = None, flags: list[str] | None = None) -> ProcessResult:
    command = RendererCommand.from_config(session.config, format)
    return session.run_tool(command, flags=flags)


@commands.register("render-song")
def render_song(session: EditSession, format: str | None = None, flags: list[str] | None = None) -> ProcessResult | None:
    song = _current_song(session)
    if song is None:
        return None
    command = RendererCommand.from_config(session.config, format)
    return session.run_tool(command, song=song, flags=flags)


@commands.register("midi")
def midi(session: EditSession, flags: list[str] | None = None) -> ProcessResult:
    return session.run_tool(ConverterCommand(session.config.tools), flags=flags, for_midi=True)


@commands.register("midi-song")
def midi_song(session: EditSession, flags: list[str] | None = None) -> ProcessResult | None:
    song = _current_song(session)
    if song is None:
        return None
    return session.run_tool(ConverterCommand(session.config.tools), song=song, flags=flags, for_midi=True)


@commands.register("transform")
def transform(session: EditSession, flags: list[str] | None = None) -> ProcessResult:
    return session.run_tool(TransformerCommand(session.config.tools), flags=flags)
