"""Document: the mutable text buffer every editing operation works on."""

from __future__ import annotations

import logging
from collections import deque
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

#: Undo steps kept per document; the oldest are forgotten first.
HISTORY_LIMIT = 500


class Document:
    """
    A text buffer addressed by character offsets, with a cursor and undo.

    Lines are separated by ``\\n``; a trailing newline produces a final empty
    line. Every mutation records one undo step unless it happens inside
    :meth:`edit_group`, which collapses the whole group into a single step.

    Attributes:
        cursor: Current insertion point (0 <= cursor <= len(text)).
        path:   File the document was loaded from / saves to, if any.
    """

    def __init__(
        self,
        text: str = "",
        path: str | Path | None = None,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        self._text = text
        self.cursor = 0
        self.path = Path(path) if path is not None else None
        self._history: deque[tuple[str, int]] = deque(maxlen=history_limit)
        self._group_depth = 0

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    @classmethod
    def from_file(cls, path: str | Path) -> "Document":
        p = Path(path)
        return cls(p.read_text(encoding="utf-8"), path=p)

    def save(self, path: str | Path | None = None) -> Path:
        """
        Write the text to *path* (or the document's own path).

        Raises:
            ValueError: If neither *path* nor ``self.path`` is set.
            OSError:    If the file cannot be written.
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("Document has no file path to save to.")
        target.write_text(self._text, encoding="utf-8")
        self.path = target
        logger.debug("Saved %d characters to %s", len(self._text), target)
        return target

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def lines(self) -> list[str]:
        return self._text.split("\n")

    @property
    def line_count(self) -> int:
        return self._text.count("\n") + 1

    def line_index_at(self, pos: int) -> int:
        """Return the 0-based index of the line containing offset *pos*."""
        pos = self._clamp(pos)
        return self._text.count("\n", 0, pos)

    def line_start(self, index: int) -> int:
        """Offset of the first character of line *index*."""
        if index < 0 or index >= self.line_count:
            raise IndexError(f"Line index {index} out of range.")
        start = 0
        for _ in range(index):
            start = self._text.index("\n", start) + 1
        return start

    def line_end(self, index: int) -> int:
        """Offset just past the last character of line *index* (before ``\\n``)."""
        start = self.line_start(index)
        end = self._text.find("\n", start)
        return len(self._text) if end == -1 else end

    def line_text(self, index: int) -> str:
        return self._text[self.line_start(index):self.line_end(index)]

    def line_offsets(self) -> Iterator[tuple[int, int, str]]:
        """Yield ``(index, start_offset, line_text)`` for every line."""
        start = 0
        for index, line in enumerate(self.lines()):
            yield index, start, line
            start += len(line) + 1

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    @contextmanager
    def edit_group(self) -> Iterator["Document"]:
        """
        Collapse every mutation made inside the block into one undo step.

        A group that leaves the text unchanged records nothing.
        """
        outermost = self._group_depth == 0
        snapshot = (self._text, self.cursor)
        self._group_depth += 1
        try:
            yield self
        finally:
            self._group_depth -= 1
            if outermost and self._text != snapshot[0]:
                self._history.append(snapshot)

    def replace(self, start: int, end: int, text: str) -> None:
        """Replace ``text[start:end]`` with *text*; swapped endpoints are accepted."""
        start, end = sorted((self._clamp(start), self._clamp(end)))
        if self._group_depth == 0:
            self._history.append((self._text, self.cursor))
        self._text = self._text[:start] + text + self._text[end:]

        # Keep the cursor on the same logical character where possible.
        if self.cursor >= end:
            self.cursor += len(text) - (end - start)
        elif self.cursor > start:
            self.cursor = start + len(text)

    def insert(self, pos: int, text: str) -> None:
        self.replace(pos, pos, text)

    def delete(self, start: int, end: int) -> None:
        self.replace(start, end, "")

    def replace_line(self, index: int, text: str) -> None:
        self.replace(self.line_start(index), self.line_end(index), text)

    def insert_at_cursor(self, text: str) -> None:
        self.insert(self.cursor, text)

    def undo(self) -> bool:
        """Restore the state before the last mutation. Returns False if none."""
        if not self._history:
            return False
        self._text, self.cursor = self._history.pop()
        return True

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    def _clamp(self, pos: int) -> int:
        return max(0, min(pos, len(self._text)))
