"""ProcessRunner: runs an external tool and captures its output verbatim."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

#: Exit status reported when the executable cannot be started at all.
EXIT_NOT_FOUND = 127

#: Hook that may inspect or rewrite an argv before it runs.
PreviewHook = Callable[[list[str]], list[str]]


@dataclass(frozen=True)
class ProcessResult:
    """
    Outcome of one tool run.

    Attributes:
        argv:       The argument vector that was executed.
        returncode: Exit status, or EXIT_NOT_FOUND if the program is missing.
        output:     Combined stdout and stderr, uninterpreted.
    """

    argv: list[str]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    """
    Runs commands synchronously in *cwd* (default: the current directory).

    Exit codes are reported, never interpreted; the caller shows ``output``
    to the user as-is.
    """

    def __init__(self, cwd: str | Path | None = None, preview: PreviewHook | None = None) -> None:
        self.cwd = Path(cwd) if cwd is not None else None
        self.preview = preview

    def run(self, argv: list[str]) -> ProcessResult:
        if self.preview is not None:
            argv = list(self.preview(list(argv)))
        logger.info("Running: %s", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            logger.warning("Could not start %s: %s", argv[0] if argv else "<empty>", exc)
            return ProcessResult(argv=argv, returncode=EXIT_NOT_FOUND, output=str(exc))
        return ProcessResult(argv=argv, returncode=completed.returncode, output=completed.stdout or "")
