"""TagTable: logical ABC field names mapped to their line-prefix markers."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from abcmode.errors import UnknownField

# ── Default markers ─────────────────────────────────────────────────────────
# "lyricist" and "area" share the A: marker; both names are kept so callers
# can ask for whichever meaning they intend.
DEFAULT_TAGS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "reference": "X:",
        "title": "T:",
        "composer": "C:",
        "lyricist": "A:",
        "meter": "M:",
        "unit-length": "L:",
        "tempo": "Q:",
        "parts": "P:",
        "staves": "%%staves",
        "key": "K:",
        "area": "A:",
        "book": "B:",
        "discography": "D:",
        "filename": "F:",
        "group": "G:",
        "history": "H:",
        "information": "I:",
        "notes": "N:",
        "origin": "O:",
        "rhythm": "R:",
        "source": "S:",
        "user": "U:",
        "words-end": "W:",
        "words-inline": "w:",
        "transcription": "Z:",
        # Extended information directives
        "abc-version": "%%abc-version",
        "abc-copyright": "%%abc-copyright",
        "abc-creator": "%%abc-creator",
        "abc-charset": "%%abc-charset",
        "abc-include": "%%abc-include",
        "abc-edited-by": "%%abc-edited-by",
    }
)


class TagTable:
    """
    Read-only lookup of field markers.

    The defaults can be overridden for any subset of the known fields at
    construction time; after that the table never changes.

        tags = TagTable({"title": "T: "})
        tags.lookup("title")   # 'T: '
    """

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        table = dict(DEFAULT_TAGS)
        for name, marker in (overrides or {}).items():
            if name not in table:
                raise UnknownField(name)
            table[name] = str(marker)
        self._table: Mapping[str, str] = MappingProxyType(table)

    @property
    def markers(self) -> Mapping[str, str]:
        """Read-only view of every field name and its marker."""
        return self._table

    def lookup(self, field_name: str) -> str:
        """Return the marker for *field_name* or raise UnknownField."""
        try:
            return self._table[field_name]
        except KeyError:
            raise UnknownField(field_name) from None
