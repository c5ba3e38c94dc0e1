"""Shared fixtures for the abcmode test suite."""

import pytest

from abcmode.document import Document
from abcmode.process_runner import ProcessResult, ProcessRunner

TWO_SONGS = "X:2\nT:First\nabc|\n\nX:5\nT:Second\ndef|\n"


class FakeRunner(ProcessRunner):
    """Records every argv instead of starting a process."""

    def __init__(self, returncode: int = 0, output: str = "ok") -> None:
        super().__init__()
        self.calls: list[list[str]] = []
        self.returncode = returncode
        self.output = output

    def run(self, argv: list[str]) -> ProcessResult:
        self.calls.append(list(argv))
        return ProcessResult(argv=list(argv), returncode=self.returncode, output=self.output)


@pytest.fixture
def two_songs() -> Document:
    return Document(TWO_SONGS)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
