"""SymbolPad: a fixed grid of clickable ABC symbols."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Final

from abcmode.document import Document
from abcmode.errors import NoSymbolAtPosition

PAD_LAYOUT: Final[str] = """\
C, D, E, F, G, A, B, C D E F G A B c d e f g a b c' d' e' f' g' a' b'
^ ^^ _ __ = z z2 z4 Z x ( ) - > < 2 3 4 6 8 /2 /4 3/2
| || |] [| |: :| :: |1 |2 [1 [2 "" [] {} . ~ H L M O P S T u v
!trill! !fermata! !accent! !mordent! !turn! !roll! !p! !mp! !mf! !f! !ff!
!crescendo(! !crescendo)! !diminuendo(! !diminuendo)! !segno! !coda! !D.C.! !fine!
del spc ret undo"""


def _delete_previous_char(document: Document) -> None:
    if document.cursor > 0:
        document.delete(document.cursor - 1, document.cursor)


#: Tokens that trigger an editing action instead of being inserted.
ACTIONS: Final[Mapping[str, Callable[[Document], object]]] = MappingProxyType(
    {
        "del": _delete_previous_char,
        "spc": lambda document: document.insert_at_cursor(" "),
        "ret": lambda document: document.insert_at_cursor("\n"),
        "undo": lambda document: document.undo(),
    }
)


class SymbolPad:
    """
    Resolves click positions on the pad to tokens and applies them to a
    target document.

        pad = SymbolPad()
        pad.click(pad.position_at(5, 0), document)   # 'del' -> delete char
    """

    def __init__(self, layout: str = PAD_LAYOUT) -> None:
        self.layout = layout
        self._rows = layout.split("\n")

    def position_at(self, row: int, column: int) -> int:
        """Translate a (row, column) cell of the pad into a pad offset."""
        if row < 0 or row >= len(self._rows) or column < 0:
            raise NoSymbolAtPosition(f"Cell ({row}, {column}) is outside the pad.")
        return sum(len(r) + 1 for r in self._rows[:row]) + column

    def resolve_token(self, pos: int) -> str:
        """
        Return the whitespace-delimited token at pad offset *pos*.

        Raises:
            NoSymbolAtPosition: If *pos* is outside the pad or on whitespace.
        """
        text = self.layout
        if pos < 0 or pos >= len(text) or text[pos].isspace():
            raise NoSymbolAtPosition(f"No symbol at pad position {pos}.")
        start = pos
        while start > 0 and not text[start - 1].isspace():
            start -= 1
        end = pos
        while end < len(text) and not text[end].isspace():
            end += 1
        return text[start:end]

    def dispatch(self, token: str, document: Document) -> None:
        """Run the action named by *token*, or insert it at the cursor."""
        action = ACTIONS.get(token)
        if action is not None:
            action(document)
            return
        document.insert_at_cursor(token)

    def click(self, pos: int, document: Document) -> str | None:
        """Resolve and dispatch; whitespace clicks are ignored and return None."""
        try:
            token = self.resolve_token(pos)
        except NoSymbolAtPosition:
            return None
        self.dispatch(token, document)
        return token
