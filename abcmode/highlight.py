"""Terminal rendering of classified lines with rich styles."""

from __future__ import annotations

from typing import Final

from rich.text import Text

from abcmode.line_classifier import Category, classify

# One style per category, loosely following a dark editor theme.
STYLES: Final[dict[Category, str]] = {
    Category.HEADER_FIELD: "cyan",
    Category.TITLE_FIELD: "bold yellow",
    Category.KEY_OR_VOICE_FIELD: "bold magenta",
    Category.EXTENDED_INFO_DIRECTIVE: "green",
    Category.MIDI_DIRECTIVE: "bright_green",
    Category.DECORATION_MARKER: "blue",
    Category.LYRIC_LINE: "italic",
    Category.ACCIDENTAL_WARNING: "bold white on red",
    Category.BAR_LINE_VARIANT: "bold",
    Category.PREPROCESSOR_DIRECTIVE: "bright_blue",
}


def highlight_line(line: str) -> Text:
    text = Text(line)
    for span in classify(line):
        text.stylize(STYLES[span.category], span.start, span.end)
    return text


def highlight_text(source: str) -> Text:
    """Highlight a whole document, line by line."""
    return Text("\n").join(highlight_line(line) for line in source.split("\n"))
