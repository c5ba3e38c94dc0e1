"""RecordIndex: navigation over the songs of a multi-tune ABC document."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from abcmode.document import Document
from abcmode.errors import NoRecordFound
from abcmode.tag_table import TagTable

logger = logging.getLogger(__name__)

REFERENCE_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t]*X[ \t]*:[ \t]*([0-9]+)")
TITLE_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t]*T[ \t]*:[ \t]*(.*?)[ \t]*$")


@dataclass(frozen=True)
class Record:
    """
    One song of the document.

    Attributes:
        start_line: 0-based index of the reference-number line.
        end_line:   0-based index just past the record's last line.
        number:     Parsed reference number.
        title:      First title line of the record, or None.
    """

    start_line: int
    end_line: int
    number: int
    title: str | None


class RecordIndex:
    """
    Computes records on demand by scanning the document; nothing is cached,
    so the index is always consistent with the current text.
    """

    def __init__(self, document: Document, tags: TagTable | None = None) -> None:
        self.document = document
        self.tags = tags or TagTable()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def records(self) -> list[Record]:
        lines = self.document.lines()
        starts: list[tuple[int, int]] = []
        for index, line in enumerate(lines):
            m = REFERENCE_RE.match(line)
            if m:
                starts.append((index, int(m.group(1))))

        result: list[Record] = []
        for i, (start, number) in enumerate(starts):
            end = starts[i + 1][0] if i + 1 < len(starts) else len(lines)
            title = None
            for line in lines[start:end]:
                t = TITLE_RE.match(line)
                if t:
                    title = t.group(1)
                    break
            result.append(Record(start_line=start, end_line=end, number=number, title=title))
        return result

    def current_record_number(self, pos: int) -> int:
        """
        Reference number of the record containing *pos*.

        Raises:
            NoRecordFound: If no reference line is at or before *pos*'s line.
        """
        lines = self.document.lines()
        for index in range(self.document.line_index_at(pos), -1, -1):
            m = REFERENCE_RE.match(lines[index])
            if m:
                return int(m.group(1))
        raise NoRecordFound(f"No reference number (X:) found before position {pos}.")

    def next_record_boundary(self, pos: int) -> int | None:
        """Offset of the first reference line starting strictly after *pos*."""
        for _index, start, line in self.document.line_offsets():
            if start > pos and REFERENCE_RE.match(line):
                return start
        return None

    def previous_record_boundary(self, pos: int) -> int | None:
        """Offset of the last reference line starting strictly before *pos*."""
        found = None
        for _index, start, line in self.document.line_offsets():
            if start >= pos:
                break
            if REFERENCE_RE.match(line):
                found = start
        return found

    def list_titles(self) -> list[tuple[int, str]]:
        """Every title line as ``(1-based line number, title text)``."""
        titles = []
        for index, line in enumerate(self.document.lines()):
            m = TITLE_RE.match(line)
            if m:
                titles.append((index + 1, m.group(1)))
        return titles

    def find_record(self, number: int) -> Record:
        for record in self.records():
            if record.number == number:
                return record
        raise NoRecordFound(f"No record with reference number {number}.")

    def record_text(self, number: int) -> str:
        """Full text of the first record with reference *number*."""
        record = self.find_record(number)
        lines = self.document.lines()[record.start_line:record.end_line]
        return "\n".join(lines)

    def next_reference_number(self) -> int:
        """Number for a new song appended after the last one (1 if none)."""
        records = self.records()
        return records[-1].number + 1 if records else 1

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def renumber_all(self) -> int:
        """
        Rewrite every reference line as ``<reference marker><N>`` in document
        order, N counting from 1. Returns the number of records.
        """
        marker = self.tags.lookup("reference")
        count = 0
        with self.document.edit_group():
            for index, line in enumerate(self.document.lines()):
                if REFERENCE_RE.match(line):
                    count += 1
                    replacement = f"{marker}{count}"
                    if line != replacement:
                        self.document.replace_line(index, replacement)
        logger.debug("Renumbered %d record(s)", count)
        return count
