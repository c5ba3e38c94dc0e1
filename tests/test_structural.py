"""Unit tests for the structural editors and insertion helpers."""

import pytest

from abcmode.document import Document
from abcmode.errors import NoRecordFound, UnknownField, UnknownInstrument
from abcmode.record_index import RecordIndex
from abcmode.structural import (
    align_bars,
    extract_chord_skeleton,
    extract_chords,
    insert_field,
    insert_midi_program,
    insert_song_skeleton,
    normalize_bar_spacing,
    wrap_crescendo,
    wrap_region,
    wrap_repeat,
    wrap_slur,
)
from abcmode.tag_table import TagTable


# ---------------------------------------------------------------------------
# wrap_region
# ---------------------------------------------------------------------------

def test_wrap_region() -> None:
    doc = Document("abcd")
    wrap_region(doc, 1, 3, "(", ")")
    assert doc.text == "a(bc)d"


def test_wrap_region_swapped_endpoints() -> None:
    doc = Document("abcd")
    wrap_region(doc, 3, 1, "(", ")")
    assert doc.text == "a(bc)d"


def test_wrap_then_strip_restores_span() -> None:
    doc = Document("X:1\nABcd efg|")
    start, end = 4, 10
    original = doc.text[start:end]
    wrap_region(doc, start, end, "(", ")")
    wrapped = doc.text[start:end + 2]
    assert wrapped[1:-1] == original


def test_named_wrappers() -> None:
    doc = Document("abc")
    wrap_slur(doc, 0, 3)
    assert doc.text == "(abc)"

    doc = Document("abc")
    wrap_crescendo(doc, 0, 3)
    assert doc.text == "!crescendo(!abc!crescendo)!"

    doc = Document("abc")
    wrap_repeat(doc, 0, 3)
    assert doc.text == "|:abc:|"


# ---------------------------------------------------------------------------
# extract_chord_skeleton
# ---------------------------------------------------------------------------

def test_skeleton_example() -> None:
    assert extract_chord_skeleton('ABC|"Cmaj"def') == 'xxx|"Cmaj"xxx'


def test_skeleton_drops_ties_slurs_accidentals_and_brackets() -> None:
    assert extract_chord_skeleton("(A2B)-c") == "x2xx"
    assert extract_chord_skeleton("^f_g=a") == "xxx"
    assert extract_chord_skeleton("[CEG]2") == "xxx2"
    assert extract_chord_skeleton("A'B") == "xx"


def test_skeleton_keeps_rests_lengths_and_bars() -> None:
    assert extract_chord_skeleton("z2 | 3/2 ||") == "z2 | 3/2 ||"


def test_skeleton_unterminated_quote_is_plain_text() -> None:
    assert extract_chord_skeleton('A"Bc') == 'x"xx'


def test_skeleton_is_idempotent() -> None:
    once = extract_chord_skeleton('"G"GAB "D"d2 c|"Em"(e^f)g z')
    assert extract_chord_skeleton(once) == once


def test_extract_chords_skips_header_lines() -> None:
    doc = Document('X:1\nT:Ace\nK:G\n"G"GAB|\nw:la la')
    extract_chords(doc, 0, len(doc))
    assert doc.text == 'X:1\nT:Ace\nK:G\n"G"xxx|\nw:la la'


def test_extract_chords_twice_keeps_one_undo_step() -> None:
    doc = Document("X:1\nab|z")
    extract_chords(doc, 0, len(doc))
    extract_chords(doc, 0, len(doc))
    assert doc.text == "X:1\nxx|z"
    doc.undo()
    assert doc.text == "X:1\nab|z"


# ---------------------------------------------------------------------------
# align_bars
# ---------------------------------------------------------------------------

def test_normalize_bar_spacing() -> None:
    assert normalize_bar_spacing("a|b||c|]") == "a | b || c |]"
    assert normalize_bar_spacing("|:ab  :|") == "|: ab :|"
    assert normalize_bar_spacing("  a |  b") == "  a | b"


def test_align_bars_aligns_text_after_each_bar() -> None:
    doc = Document("A|BB|C\nAAA  |B|C")
    align_bars(doc, 0, len(doc))
    assert doc.text == "A   | BB | C\nAAA | B  | C"
    first, second = doc.lines()
    assert first.index("BB") == second.index("B ")


def test_align_bars_is_idempotent() -> None:
    doc = Document("A|BB|C\nAAA  |B|C")
    align_bars(doc, 0, len(doc))
    once = doc.text
    align_bars(doc, 0, len(doc))
    assert doc.text == once


def test_align_bars_leaves_headers_and_other_lines() -> None:
    doc = Document("X:1\nK:G\nab|c\nd|e\nfoo|bar")
    align_bars(doc, 8, 14)
    assert doc.text == "X:1\nK:G\nab | c\nd  | e\nfoo|bar"


def test_align_bars_keeps_single_space_around_empty_bar() -> None:
    doc = Document("A | | B")
    align_bars(doc, 0, len(doc))
    assert doc.text == "A | | B"


def test_align_bars_ignores_bars_inside_chord_annotations() -> None:
    doc = Document('"A|B"abc|def')
    align_bars(doc, 0, len(doc))
    assert doc.text == '"A|B"abc | def'


def test_align_bars_keeps_indentation() -> None:
    doc = Document("  ab|c\n  d|e")
    align_bars(doc, 0, len(doc))
    assert doc.text == "  ab | c\n  d  | e"
    assert normalize_bar_spacing("  |:a|b") == "  |: a | b"


# ---------------------------------------------------------------------------
# Insertion helpers
# ---------------------------------------------------------------------------

def test_insert_field_opens_new_line() -> None:
    doc = Document("X:1")
    doc.cursor = 3
    insert_field(doc, TagTable(), "title", "Foo")
    assert doc.text == "X:1\nT:Foo"
    assert doc.cursor == len(doc)


def test_insert_field_on_empty_line() -> None:
    doc = Document("X:1\n")
    doc.cursor = 4
    insert_field(doc, TagTable(), "key", "D")
    assert doc.text == "X:1\nK:D"


def test_insert_field_unknown() -> None:
    with pytest.raises(UnknownField):
        insert_field(Document(""), TagTable(), "bogus")


def test_song_skeleton_in_empty_document() -> None:
    doc = Document("")
    number = insert_song_skeleton(doc, RecordIndex(doc), "Reel")
    assert number == 1
    assert doc.text == "X:1\nT:Reel\nM:4/4\nL:1/8\nK:C\n"


def test_song_skeleton_continues_numbering() -> None:
    doc = Document("X:4\nT:a\nabc|\n")
    number = insert_song_skeleton(doc, RecordIndex(doc), key="D")
    assert number == 5
    assert doc.text == "X:4\nT:a\nabc|\n\nX:5\nT:\nM:4/4\nL:1/8\nK:D\n"


def test_insert_midi_program_after_key_line() -> None:
    doc = Document("X:1\nT:a\nK:G\nabc|")
    doc.cursor = len(doc) - 1
    program = insert_midi_program(doc, RecordIndex(doc), "Violin")
    assert program == 40
    assert doc.text == "X:1\nT:a\nK:G\n%%MIDI program 40\nabc|"


def test_insert_midi_program_requires_record() -> None:
    doc = Document("abc|")
    with pytest.raises(NoRecordFound):
        insert_midi_program(doc, RecordIndex(doc), "violin")


def test_insert_midi_program_unknown_instrument() -> None:
    doc = Document("X:1\nK:G\n")
    with pytest.raises(UnknownInstrument):
        insert_midi_program(doc, RecordIndex(doc), "theremin")
