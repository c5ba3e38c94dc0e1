"""Unit tests for RecordIndex navigation and renumbering."""

import pytest

from abcmode.document import Document
from abcmode.errors import NoRecordFound
from abcmode.record_index import Record, RecordIndex
from abcmode.tag_table import TagTable

from conftest import TWO_SONGS


def test_renumber_example() -> None:
    doc = Document(TWO_SONGS)
    count = RecordIndex(doc).renumber_all()
    assert count == 2
    assert doc.text == "X:1\nT:First\nabc|\n\nX:2\nT:Second\ndef|\n"


def test_renumber_is_idempotent() -> None:
    doc = Document(" X : 9 tail\nabc\nX:3\nX:3\n")
    index = RecordIndex(doc)
    index.renumber_all()
    once = doc.text
    index.renumber_all()
    assert doc.text == once
    assert [r.number for r in index.records()] == [1, 2, 3]
    assert once == "X:1\nabc\nX:2\nX:3\n"


def test_renumber_uses_reference_marker_override() -> None:
    doc = Document("X:7\n")
    RecordIndex(doc, TagTable({"reference": "X: "})).renumber_all()
    assert doc.text == "X: 1\n"


def test_renumber_is_one_undo_step(two_songs: Document) -> None:
    RecordIndex(two_songs).renumber_all()
    two_songs.undo()
    assert two_songs.text == TWO_SONGS


def test_renumber_without_changes_leaves_undo_history() -> None:
    doc = Document("X:1\nabc")
    doc.insert(len(doc), "d")
    RecordIndex(doc).renumber_all()
    doc.undo()
    assert doc.text == "X:1\nabc"


def test_current_record_number(two_songs: Document) -> None:
    index = RecordIndex(two_songs)
    assert index.current_record_number(0) == 2
    assert index.current_record_number(13) == 2
    assert index.current_record_number(18) == 5
    assert index.current_record_number(len(two_songs)) == 5


def test_current_record_number_stable_on_following_line(two_songs: Document) -> None:
    index = RecordIndex(two_songs)
    for record in index.records():
        start = two_songs.line_start(record.start_line)
        after = two_songs.line_start(record.start_line + 1)
        assert index.current_record_number(start) == index.current_record_number(after)


def test_current_record_number_without_record() -> None:
    doc = Document("T:No number\nabc\nX:1\n")
    with pytest.raises(NoRecordFound):
        RecordIndex(doc).current_record_number(5)


def test_record_boundaries(two_songs: Document) -> None:
    index = RecordIndex(two_songs)
    assert index.next_record_boundary(0) == 18
    assert index.next_record_boundary(18) is None
    assert index.previous_record_boundary(len(two_songs)) == 18
    assert index.previous_record_boundary(18) == 0
    assert index.previous_record_boundary(0) is None


def test_list_titles(two_songs: Document) -> None:
    assert RecordIndex(two_songs).list_titles() == [(2, "First"), (6, "Second")]


def test_records(two_songs: Document) -> None:
    assert RecordIndex(two_songs).records() == [
        Record(start_line=0, end_line=4, number=2, title="First"),
        Record(start_line=4, end_line=8, number=5, title="Second"),
    ]


def test_record_without_title() -> None:
    doc = Document("X:1\nabc\n")
    assert RecordIndex(doc).records()[0].title is None


def test_record_text(two_songs: Document) -> None:
    index = RecordIndex(two_songs)
    assert index.record_text(5) == "X:5\nT:Second\ndef|\n"
    with pytest.raises(NoRecordFound):
        index.record_text(3)


def test_next_reference_number(two_songs: Document) -> None:
    assert RecordIndex(two_songs).next_reference_number() == 6
    assert RecordIndex(Document("")).next_reference_number() == 1
