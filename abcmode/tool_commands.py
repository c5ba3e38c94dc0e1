"""Argument-vector builders for the external ABC tools."""

from __future__ import annotations

import shlex
from abc import ABC, abstractmethod
from pathlib import Path

from abcmode.config import AppConfig, ToolsConfig


def _split(options: str) -> list[str]:
    """Split a user option string into arguments, honouring quotes."""
    return shlex.split(options) if options else []


class ToolCommand(ABC):
    """
    Abstract builder for one external program.

    Concrete subclasses produce an argv list; no shell is ever involved, so
    file names with blanks or quotes need no escaping.
    """

    def __init__(self, tools: ToolsConfig) -> None:
        self.tools = tools

    @property
    @abstractmethod
    def executable(self) -> str:
        """Program name or path."""

    @abstractmethod
    def build(self, file_name: str | Path, *, song: int | None = None, flags: list[str] | None = None) -> list[str]:
        """Return the argv for processing *file_name*."""


class RendererCommand(ToolCommand):
    """ABC to PostScript (abcm2ps and compatibles)."""

    def __init__(self, tools: ToolsConfig, format_options: str = "") -> None:
        super().__init__(tools)
        self.format_options = format_options

    @classmethod
    def from_config(cls, config: AppConfig, format_name: str | None = None) -> "RendererCommand":
        return cls(config.tools, config.format_options(format_name))

    @property
    def executable(self) -> str:
        return self.tools.renderer

    def build(self, file_name: str | Path, *, song: int | None = None, flags: list[str] | None = None) -> list[str]:
        argv = [self.executable, *_split(self.format_options), *_split(self.tools.renderer_options)]
        argv.extend(flags or [])
        if song is not None:
            argv.extend([self.tools.song_flag, str(song)])
        argv.append(str(file_name))
        return argv


class ConverterCommand(ToolCommand):
    """ABC to MIDI (abc2midi). A song number follows the file name."""

    @property
    def executable(self) -> str:
        return self.tools.converter

    def build(self, file_name: str | Path, *, song: int | None = None, flags: list[str] | None = None) -> list[str]:
        argv = [self.executable, str(file_name)]
        if song is not None:
            argv.append(str(song))
        argv.extend(_split(self.tools.converter_options))
        argv.extend(flags or [])
        return argv


class TransformerCommand(ToolCommand):
    """ABC to ABC (abc2abc: transposition, reformatting). Works on whole files."""

    @property
    def executable(self) -> str:
        return self.tools.transformer

    def build(self, file_name: str | Path, *, song: int | None = None, flags: list[str] | None = None) -> list[str]:
        argv = [self.executable, str(file_name), *_split(self.tools.transformer_options)]
        argv.extend(flags or [])
        return argv


class PreprocessorCommand(ToolCommand):
    """
    Optional source preprocessor (abcpp).

    Only files carrying the configured secondary extension are preprocessed;
    the result is written next to the input with ``.abc`` appended, leaving
    the original untouched.
    """

    @property
    def executable(self) -> str:
        return self.tools.preprocessor or ""

    def applies_to(self, file_name: str | Path) -> bool:
        if not self.tools.preprocessor:
            return False
        return Path(file_name).suffix == f".{self.tools.preprocessor_extension}"

    def output_path(self, file_name: str | Path) -> Path:
        p = Path(file_name)
        return p.with_name(p.name + ".abc")

    def build(
        self,
        file_name: str | Path,
        *,
        song: int | None = None,
        flags: list[str] | None = None,
        for_midi: bool = False,
    ) -> list[str]:
        argv = [self.executable, *_split(self.tools.preprocessor_options)]
        if for_midi:
            argv.append(self.tools.preprocessor_midi_flag)
        argv.extend(flags or [])
        argv.extend([str(file_name), str(self.output_path(file_name))])
        return argv
