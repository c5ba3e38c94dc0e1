"""General MIDI instrument names mapped to program numbers (0-127)."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from abcmode.errors import UnknownInstrument

_GM_PROGRAMS: Final[tuple[str, ...]] = (
    # Piano
    "acoustic grand piano", "bright acoustic piano", "electric grand piano",
    "honky-tonk piano", "electric piano 1", "electric piano 2", "harpsichord",
    "clavinet",
    # Chromatic percussion
    "celesta", "glockenspiel", "music box", "vibraphone", "marimba",
    "xylophone", "tubular bells", "dulcimer",
    # Organ
    "drawbar organ", "percussive organ", "rock organ", "church organ",
    "reed organ", "accordion", "harmonica", "tango accordion",
    # Guitar
    "acoustic guitar (nylon)", "acoustic guitar (steel)",
    "electric guitar (jazz)", "electric guitar (clean)",
    "electric guitar (muted)", "overdriven guitar", "distortion guitar",
    "guitar harmonics",
    # Bass
    "acoustic bass", "electric bass (finger)", "electric bass (pick)",
    "fretless bass", "slap bass 1", "slap bass 2", "synth bass 1",
    "synth bass 2",
    # Strings
    "violin", "viola", "cello", "contrabass", "tremolo strings",
    "pizzicato strings", "orchestral harp", "timpani",
    # Ensemble
    "string ensemble 1", "string ensemble 2", "synth strings 1",
    "synth strings 2", "choir aahs", "voice oohs", "synth voice",
    "orchestra hit",
    # Brass
    "trumpet", "trombone", "tuba", "muted trumpet", "french horn",
    "brass section", "synth brass 1", "synth brass 2",
    # Reed
    "soprano sax", "alto sax", "tenor sax", "baritone sax", "oboe",
    "english horn", "bassoon", "clarinet",
    # Pipe
    "piccolo", "flute", "recorder", "pan flute", "blown bottle",
    "shakuhachi", "whistle", "ocarina",
    # Synth lead
    "lead 1 (square)", "lead 2 (sawtooth)", "lead 3 (calliope)",
    "lead 4 (chiff)", "lead 5 (charang)", "lead 6 (voice)",
    "lead 7 (fifths)", "lead 8 (bass + lead)",
    # Synth pad
    "pad 1 (new age)", "pad 2 (warm)", "pad 3 (polysynth)", "pad 4 (choir)",
    "pad 5 (bowed)", "pad 6 (metallic)", "pad 7 (halo)", "pad 8 (sweep)",
    # Synth effects
    "fx 1 (rain)", "fx 2 (soundtrack)", "fx 3 (crystal)",
    "fx 4 (atmosphere)", "fx 5 (brightness)", "fx 6 (goblins)",
    "fx 7 (echoes)", "fx 8 (sci-fi)",
    # Ethnic
    "sitar", "banjo", "shamisen", "koto", "kalimba", "bagpipe", "fiddle",
    "shanai",
    # Percussive
    "tinkle bell", "agogo", "steel drums", "woodblock", "taiko drum",
    "melodic tom", "synth drum", "reverse cymbal",
    # Sound effects
    "guitar fret noise", "breath noise", "seashore", "bird tweet",
    "telephone ring", "helicopter", "applause", "gunshot",
)

# Common alternative names, each pointing at a canonical GM name.
_ALIASES: Final[dict[str, str]] = {
    "piano": "acoustic grand piano",
    "grand piano": "acoustic grand piano",
    "honky tonk piano": "honky-tonk piano",
    "rhodes": "electric piano 1",
    "clavichord": "clavinet",
    "hammered dulcimer": "dulcimer",
    "organ": "church organ",
    "pipe organ": "church organ",
    "harmonium": "reed organ",
    "melodeon": "accordion",
    "concertina": "accordion",
    "bandoneon": "tango accordion",
    "mouth organ": "harmonica",
    "guitar": "acoustic guitar (nylon)",
    "nylon guitar": "acoustic guitar (nylon)",
    "classical guitar": "acoustic guitar (nylon)",
    "steel guitar": "acoustic guitar (steel)",
    "folk guitar": "acoustic guitar (steel)",
    "jazz guitar": "electric guitar (jazz)",
    "electric guitar": "electric guitar (clean)",
    "bass": "acoustic bass",
    "upright bass": "acoustic bass",
    "electric bass": "electric bass (finger)",
    "double bass": "contrabass",
    "violoncello": "cello",
    "harp": "orchestral harp",
    "strings": "string ensemble 1",
    "choir": "choir aahs",
    "voice": "voice oohs",
    "horn": "french horn",
    "brass": "brass section",
    "sax": "alto sax",
    "saxophone": "alto sax",
    "cor anglais": "english horn",
    "tin whistle": "whistle",
    "penny whistle": "whistle",
    "low whistle": "whistle",
    "panpipes": "pan flute",
    "pan pipes": "pan flute",
    "bagpipes": "bagpipe",
    "highland pipes": "bagpipe",
    "uilleann pipes": "bagpipe",
    "shehnai": "shanai",
    "steel drum": "steel drums",
    "wood block": "woodblock",
    "taiko": "taiko drum",
}


def _build_table() -> Mapping[str, int]:
    table = {name: program for program, name in enumerate(_GM_PROGRAMS)}
    for alias, canonical in _ALIASES.items():
        table[alias] = table[canonical]
    return MappingProxyType(table)


#: Immutable name -> program table, built once at import.
INSTRUMENTS: Final[Mapping[str, int]] = _build_table()


def _normalize(name: str) -> str:
    return " ".join(name.strip().lower().replace("_", " ").split())


def program_for(name: str) -> int:
    """
    Return the General MIDI program number for *name*.

    Lookup ignores case and repeated blanks; underscores count as blanks.

    Raises:
        UnknownInstrument: If no instrument or alias has that name.
    """
    try:
        return INSTRUMENTS[_normalize(name)]
    except KeyError:
        raise UnknownInstrument(name) from None


def midi_program_directive(name: str) -> str:
    """The ``%%MIDI program N`` line selecting *name* for abc2midi."""
    return f"%%MIDI program {program_for(name)}"


def canonical_names() -> list[str]:
    """The 128 GM names in program order."""
    return list(_GM_PROGRAMS)
