from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    success: bool
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        return f"{self.stdout}\n{self.stderr}"


def run_command(cmd: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
    """Run an external command to completion.

    A non-zero exit is logged with the captured stderr but never raised; the
    caller inspects ``success`` and decides whether it matters.
    """
    logger.info("Running: %s", " ".join(cmd))
    proc = subprocess.run(
        list(cmd),
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
    )
    result = CommandResult(
        success=proc.returncode == 0, stdout=proc.stdout, stderr=proc.stderr
    )
    if not result.success:
        logger.error("Command failed (exit %s): %s", proc.returncode, proc.stderr.strip())
    return result
