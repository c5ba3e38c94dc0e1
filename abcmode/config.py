"""
YAML configuration for the external tools, renderer option sets and field
markers. Every key is optional; `load_config(None)` returns the defaults.

Example:
    tools:
      renderer: abcm2ps
      preprocessor: abcpp
    default_format: pretty
    tags:
      title: "T: "
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import yaml


DEFAULT_FORMATS: Mapping[str, str] = MappingProxyType(
    {
        "pretty": "-p",
        "pretty2": "-P",
        "fbook": "-F fbook",
        "landscape": "-F landscape",
        "tight": "-F tight",
        "none": "",
    }
)


@dataclass(frozen=True)
class ToolsConfig:
    renderer: str = "abcm2ps"
    renderer_options: str = ""
    song_flag: str = "-e"
    converter: str = "abc2midi"
    converter_options: str = ""
    transformer: str = "abc2abc"
    transformer_options: str = ""
    preprocessor: Optional[str] = None
    preprocessor_options: str = ""
    preprocessor_extension: str = "abp"
    preprocessor_midi_flag: str = "-MIDI"


@dataclass(frozen=True)
class AppConfig:
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    formats: Mapping[str, str] = field(default_factory=lambda: DEFAULT_FORMATS)
    default_format: str = "none"
    tags: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def format_options(self, name: str | None) -> str:
        key = name or self.default_format
        if key not in self.formats:
            known = ", ".join(sorted(self.formats))
            raise ValueError(f"Unknown format '{key}'. Use one of: {known}.")
        return self.formats[key]


def _opt_str(value: Any, default: Optional[str]) -> Optional[str]:
    if value is None:
        return default
    return str(value)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load *path*; a missing path or file yields the built-in defaults."""
    if path is None:
        return AppConfig()
    p = Path(path)
    if not p.exists():
        return AppConfig()

    data: Dict[str, Any] = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {p} must contain a mapping at top level.")

    tools = data.get("tools") or {}
    formats = dict(DEFAULT_FORMATS)
    formats.update({str(k): "" if v is None else str(v) for k, v in (data.get("formats") or {}).items()})
    defaults = ToolsConfig()

    config = AppConfig(
        tools=ToolsConfig(
            renderer=str(tools.get("renderer", defaults.renderer)),
            renderer_options=str(tools.get("renderer_options") or ""),
            song_flag=str(tools.get("song_flag", defaults.song_flag)),
            converter=str(tools.get("converter", defaults.converter)),
            converter_options=str(tools.get("converter_options") or ""),
            transformer=str(tools.get("transformer", defaults.transformer)),
            transformer_options=str(tools.get("transformer_options") or ""),
            preprocessor=_opt_str(tools.get("preprocessor"), defaults.preprocessor),
            preprocessor_options=str(tools.get("preprocessor_options") or ""),
            preprocessor_extension=str(
                tools.get("preprocessor_extension", defaults.preprocessor_extension)
            ).lstrip("."),
            preprocessor_midi_flag=str(
                tools.get("preprocessor_midi_flag", defaults.preprocessor_midi_flag)
            ),
        ),
        formats=MappingProxyType(formats),
        default_format=str(data.get("default_format", "none")),
        tags=MappingProxyType({str(k): str(v) for k, v in (data.get("tags") or {}).items()}),
    )
    # Fail early on a default that points nowhere.
    config.format_options(None)
    return config
