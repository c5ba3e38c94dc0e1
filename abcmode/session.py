"""EditSession: everything a command needs, passed explicitly."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from abcmode.config import AppConfig
from abcmode.document import Document
from abcmode.process_runner import ProcessResult, ProcessRunner
from abcmode.record_index import RecordIndex
from abcmode.symbol_pad import SymbolPad
from abcmode.tag_table import TagTable
from abcmode.tool_commands import PreprocessorCommand, ToolCommand

logger = logging.getLogger(__name__)


@dataclass
class EditSession:
    """
    One editing session over one document.

    Attributes:
        document: The buffer being edited.
        config:   Tool and tag configuration.
        runner:   Executes external tools.
        pad:      Symbol pad used by pad clicks.
        messages: User-facing messages, oldest first.
    """

    document: Document
    config: AppConfig = field(default_factory=AppConfig)
    runner: ProcessRunner = field(default_factory=ProcessRunner)
    pad: SymbolPad = field(default_factory=SymbolPad)
    messages: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tags = TagTable(self.config.tags)
        self.index = RecordIndex(self.document, self.tags)

    @classmethod
    def open(cls, path: str | Path, config: AppConfig | None = None, **kwargs) -> "EditSession":
        return cls(Document.from_file(path), config=config or AppConfig(), **kwargs)

    def message(self, text: str) -> None:
        logger.info(text)
        self.messages.append(text)

    def run_tool(self, command: ToolCommand, *, song: int | None = None, flags: list[str] | None = None, for_midi: bool = False) -> ProcessResult:
        """
        Save the document, preprocess it if configured, then run *command*.

        The document stays saved whatever the tool's outcome. The tool's
        combined output is appended to ``messages`` verbatim.

        Raises:
            ValueError: If the document has no file path.
        """
        source = self.document.save()

        preprocessor = PreprocessorCommand(self.config.tools)
        if preprocessor.applies_to(source):
            pre = self.runner.run(preprocessor.build(source, for_midi=for_midi))
            if pre.output:
                self.messages.append(pre.output)
            source = preprocessor.output_path(source)

        result = self.runner.run(command.build(source, song=song, flags=flags))
        if result.output:
            self.messages.append(result.output)
        if not result.ok:
            logger.warning("%s exited with status %d", command.executable, result.returncode)
        return result
