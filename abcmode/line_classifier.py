"""LineClassifier: ordered regex rules that annotate spans of one ABC line."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator


class Category(str, Enum):
    """Display/lint category attached to a recognised span."""

    HEADER_FIELD = "header-field"
    TITLE_FIELD = "title-field"
    KEY_OR_VOICE_FIELD = "key-or-voice-field"
    EXTENDED_INFO_DIRECTIVE = "extended-info-directive"
    MIDI_DIRECTIVE = "midi-directive"
    DECORATION_MARKER = "decoration-marker"
    LYRIC_LINE = "lyric-line"
    ACCIDENTAL_WARNING = "accidental-warning"
    BAR_LINE_VARIANT = "bar-line-variant"
    PREPROCESSOR_DIRECTIVE = "preprocessor-directive"


@dataclass(frozen=True)
class Span:
    """
    A recognised region of a line.

    Attributes:
        start:    Offset of the first character (inclusive).
        end:      Offset just past the last character (exclusive).
        category: What the region was recognised as.
    """

    start: int
    end: int
    category: Category

    def text(self, line: str) -> str:
        return line[self.start:self.end]

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Rule:
    pattern: re.Pattern[str]
    category: Category


# Field content runs up to a % comment or end of line, minus trailing blanks.
_FIELD_BODY = r"[ \t]*:[^%\n]*?(?=[ \t]*(?:%|$))"
_TO_EOL = r".*?(?=[ \t]*$)"

# ── Rule table (order is significant) ───────────────────────────────────────
# K, T, V and W have dedicated rules; lowercase w: lyrics never match rule 1.
RULES: Final[tuple[Rule, ...]] = (
    Rule(re.compile(r"^[A-JL-SUX-Z]" + _FIELD_BODY), Category.HEADER_FIELD),
    Rule(re.compile(r"^T" + _FIELD_BODY), Category.TITLE_FIELD),
    Rule(re.compile(r"^[KV]" + _FIELD_BODY), Category.KEY_OR_VOICE_FIELD),
    Rule(re.compile(r"^%%(?![ \t]*(?i:MIDI))" + _TO_EOL), Category.EXTENDED_INFO_DIRECTIVE),
    Rule(re.compile(r"^%%[ \t]*(?i:MIDI)" + _TO_EOL), Category.MIDI_DIRECTIVE),
    Rule(re.compile(r"!.+?!"), Category.DECORATION_MARKER),
    Rule(re.compile(r"^[wW][ \t]*:" + _TO_EOL), Category.LYRIC_LINE),
    # Any two stacked accidental markers before a note letter.
    Rule(
        re.compile(r"[-()]?[\^_=][\^_=][A-Ga-g]"),
        Category.ACCIDENTAL_WARNING,
    ),
    Rule(
        re.compile(r"\[\||\|\]|\|\||:\|[0-9]*|\|:|\|[0-9]+|::|\[[0-9]+"),
        Category.BAR_LINE_VARIANT,
    ),
    Rule(
        re.compile(
            r"^#(?:define|ifdef|ifndef|endif|else|include|undefine|redefine)\b" + _TO_EOL
        ),
        Category.PREPROCESSOR_DIRECTIVE,
    ),
)


def classify(line: str, rules: tuple[Rule, ...] = RULES) -> list[Span]:
    """
    Annotate *line* with the spans recognised by *rules*.

    Every rule is evaluated independently over the whole line. When spans
    overlap, the one from the earlier rule wins and the later one is dropped;
    non-overlapping spans from any rule are all kept. The result is sorted by
    start offset.

    Example:
        >>> classify("K:Cmaj % comment")
        [Span(start=0, end=6, category=<Category.KEY_OR_VOICE_FIELD: 'key-or-voice-field'>)]
    """
    accepted: list[Span] = []
    for rule in rules:
        for match in rule.pattern.finditer(line):
            if match.end() == match.start():
                continue
            span = Span(match.start(), match.end(), rule.category)
            if any(span.overlaps(existing) for existing in accepted):
                continue
            accepted.append(span)
    return sorted(accepted, key=lambda s: s.start)


def classify_document(text: str) -> Iterator[tuple[int, list[Span]]]:
    """Yield ``(line_index, spans)`` for every line of *text*."""
    for index, line in enumerate(text.split("\n")):
        yield index, classify(line)


# ── Line kinds used by the structural editors ──────────────────────────────

_NON_MUSIC_LINE_RE = re.compile(r"^[ \t]*(?:[A-Za-z][ \t]*:|%|#)")


def is_music_line(line: str) -> bool:
    """
    True if *line* holds tune body notation.

    Header fields, lyrics, comments, ``%%`` directives and preprocessor lines
    are not music lines. Inline fields such as ``[K:D]`` start with a bracket
    and therefore still count as music.
    """
    return bool(line.strip()) and not _NON_MUSIC_LINE_RE.match(line)
