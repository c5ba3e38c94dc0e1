"""Structural editors: rewrite spans of a Document using line patterns."""

from __future__ import annotations

import logging
import re
from typing import Final

from abcmode.document import Document
from abcmode.instruments import midi_program_directive
from abcmode.line_classifier import is_music_line
from abcmode.record_index import REFERENCE_RE, RecordIndex
from abcmode.tag_table import TagTable

logger = logging.getLogger(__name__)

# ── Region wrapping ────────────────────────────────────────────────────────

SLUR: Final[tuple[str, str]] = ("(", ")")
CRESCENDO: Final[tuple[str, str]] = ("!crescendo(!", "!crescendo)!")
DIMINUENDO: Final[tuple[str, str]] = ("!diminuendo(!", "!diminuendo)!")
REPEAT: Final[tuple[str, str]] = ("|:", ":|")


def wrap_region(document: Document, start: int, end: int, prefix: str, suffix: str) -> None:
    """
    Surround ``text[start:end]`` with *prefix* and *suffix*.

    Endpoints in the wrong order are swapped, matching how an editor
    selection reports them.
    """
    start, end = sorted((start, end))
    original = document.text[start:end]
    document.replace(start, end, prefix + original + suffix)


def wrap_slur(document: Document, start: int, end: int) -> None:
    wrap_region(document, start, end, *SLUR)


def wrap_crescendo(document: Document, start: int, end: int) -> None:
    wrap_region(document, start, end, *CRESCENDO)


def wrap_diminuendo(document: Document, start: int, end: int) -> None:
    wrap_region(document, start, end, *DIMINUENDO)


def wrap_repeat(document: Document, start: int, end: int) -> None:
    wrap_region(document, start, end, *REPEAT)


# ── Bar alignment ──────────────────────────────────────────────────────────

# A bar token: optional repeat colons and thin/thick brackets around one or
# more | characters, with an optional ending number such as |1 or :|2.
# Quoted annotations are matched first so a | inside "A|B" is never a bar.
BAR_TOKEN_RE: Final[re.Pattern[str]] = re.compile(
    r'(?P<chord>"[^"]*")|[ \t]*(?P<bar>:*\[?\|[|\]]*:*(?:[0-9]+(?:[,-][0-9]+)*)?)[ \t]*'
)


def _split_bars(line: str) -> tuple[str, list[str]]:
    """
    Split *line* into its leading blanks and
    ``[segment, bar, segment, bar, ..., segment]``, with surrounding blanks
    removed from every piece.
    """
    body = line.lstrip(" \t")
    indent = line[: len(line) - len(body)]
    pieces: list[str] = []
    seg_start = 0
    for m in BAR_TOKEN_RE.finditer(body):
        if m.group("chord"):
            continue
        pieces.append(body[seg_start:m.start()].strip())
        pieces.append(m.group("bar"))
        seg_start = m.end()
    pieces.append(body[seg_start:].strip())
    return indent, pieces


def normalize_bar_spacing(line: str) -> str:
    """One space on each side of every bar token, none at the line ends."""
    indent, pieces = _split_bars(line)
    return indent + " ".join(piece for piece in pieces if piece)


def _align_lines(lines: list[str]) -> list[str]:
    """Pad lines so the text after the Nth bar starts in the same column."""
    split = [_split_bars(line) for line in lines]
    out = [indent + pieces[0] for indent, pieces in split]
    max_bars = max((len(pieces) // 2 for _, pieces in split), default=0)

    for k in range(max_bars):
        bar_at, seg_at = 2 * k + 1, 2 * k + 2
        natural: dict[int, int] = {}
        for i, (_, pieces) in enumerate(split):
            if len(pieces) > bar_at:
                lead = 1 if out[i].strip() else 0
                natural[i] = len(out[i]) + lead + len(pieces[bar_at]) + 1
        if not natural:
            break
        target = max(natural.values())
        for i, width in natural.items():
            lead = 1 if out[i].strip() else 0
            pad = " " * (target - width + lead)
            segment = split[i][1][seg_at]
            out[i] = f"{out[i]}{pad}{split[i][1][bar_at]}"
            if segment:
                out[i] += f" {segment}"

    return [line.rstrip() for line in out]


def align_bars(document: Document, start: int, end: int) -> None:
    """
    Normalise and column-align bar lines on every music line touched by the
    span ``[start, end]``.

    Pass one gives every bar token exactly one space on each side. Pass two
    pads the music lines so that the text following the first, second, ...
    bar of each line begins in a common column. Header, directive, comment
    and lyric lines inside the span are left alone.
    """
    start, end = sorted((start, end))
    first = document.line_index_at(start)
    last = document.line_index_at(end)
    lines = document.lines()

    targets = [i for i in range(first, last + 1) if is_music_line(lines[i])]
    if not targets:
        return

    normalized = [normalize_bar_spacing(lines[i]) for i in targets]
    aligned = _align_lines(normalized)

    with document.edit_group():
        for index, new_line in zip(targets, aligned):
            if lines[index] != new_line:
                document.replace_line(index, new_line)
    logger.debug("Aligned bars on %d line(s)", len(targets))


# ── Chord skeleton ─────────────────────────────────────────────────────────

_NOTE_LETTERS: Final[frozenset[str]] = frozenset("ABCDEFGabcdefg")
_DROPPED: Final[frozenset[str]] = frozenset("-'()^_=[]")
_CHORD_RE: Final[re.Pattern[str]] = re.compile(r'"[^"]*?"')


def extract_chord_skeleton(line: str) -> str:
    """
    Reduce a music line to its chord/rhythm skeleton.

    Quoted chord annotations are copied verbatim, note letters become the
    invisible rest ``x``, ties, slurs, brackets and accidentals are removed,
    and everything else (bar lines, lengths, rests, blanks) is kept.

        >>> extract_chord_skeleton('ABC|"Cmaj"def')
        'xxx|"Cmaj"xxx'
    """
    out: list[str] = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == '"':
            m = _CHORD_RE.match(line, i)
            if m:
                out.append(m.group(0))
                i = m.end()
                continue
        if ch in _NOTE_LETTERS:
            out.append("x")
        elif ch not in _DROPPED:
            out.append(ch)
        i += 1
    return "".join(out)


def extract_chords(document: Document, start: int, end: int) -> None:
    """Apply :func:`extract_chord_skeleton` to every music line in the span."""
    start, end = sorted((start, end))
    lines = document.lines()
    with document.edit_group():
        for index in range(document.line_index_at(start), document.line_index_at(end) + 1):
            line = lines[index]
            if not is_music_line(line):
                continue
            skeleton = extract_chord_skeleton(line)
            if skeleton != line:
                document.replace_line(index, skeleton)


# ── Field insertion helpers ────────────────────────────────────────────────


def insert_field(document: Document, tags: TagTable, field_name: str, value: str = "") -> None:
    """
    Open a new line below the cursor's line holding ``<marker><value>`` and
    leave the cursor at its end.

    Raises:
        UnknownField: If *field_name* is not in *tags*.
    """
    marker = tags.lookup(field_name)
    index = document.line_index_at(document.cursor)
    eol = document.line_end(index)
    new_line = f"{marker}{value}"
    if document.line_text(index):
        document.insert(eol, "\n" + new_line)
        document.cursor = eol + 1 + len(new_line)
    else:
        document.insert(eol, new_line)
        document.cursor = eol + len(new_line)


def insert_song_skeleton(
    document: Document,
    index: RecordIndex,
    title: str = "",
    meter: str = "4/4",
    unit_length: str = "1/8",
    key: str = "C",
) -> int:
    """
    Append a new song header at the end of the document.

    The reference number continues from the last song; a document without
    songs starts at 1. Returns the number used.
    """
    number = index.next_reference_number()
    tags = index.tags
    header = "\n".join(
        [
            f"{tags.lookup('reference')}{number}",
            f"{tags.lookup('title')}{title}",
            f"{tags.lookup('meter')}{meter}",
            f"{tags.lookup('unit-length')}{unit_length}",
            f"{tags.lookup('key')}{key}",
            "",
        ]
    )
    text = document.text
    if text and not text.endswith("\n\n"):
        header = ("\n" if text.endswith("\n") else "\n\n") + header
    document.insert(len(text), header)
    document.cursor = len(document.text)
    return number


_KEY_LINE_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t]*K[ \t]*:")


def insert_midi_program(document: Document, index: RecordIndex, instrument: str) -> int:
    """
    Insert a ``%%MIDI program N`` directive after the key line of the song at
    the cursor. Returns the program number.

    Raises:
        NoRecordFound:     If the cursor is not inside a song.
        UnknownInstrument: If *instrument* is not a General MIDI name.
    """
    directive = midi_program_directive(instrument)
    lines = document.lines()
    line_index = document.line_index_at(document.cursor)
    index.current_record_number(document.cursor)

    start = line_index
    while not REFERENCE_RE.match(lines[start]):
        start -= 1
    end = start + 1
    while end < len(lines) and not REFERENCE_RE.match(lines[end]):
        end += 1

    after = start
    for i in range(start, end):
        if _KEY_LINE_RE.match(lines[i]):
            after = i
            break
    eol = document.line_end(after)
    document.insert(eol, "\n" + directive)
    return int(directive.rsplit(" ", 1)[1])
