"""Synchronous execution of external programs."""

import subprocess
from dataclasses import dataclass
from pathlib import Path

from changelang.exceptions import SpawnError
from changelang.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProcessOutput:
    """Exit status and captured output of a finished program."""

    returncode: int
    stdout: str
    stderr: str


def run_process(executable: str | Path, arguments: list[str]) -> ProcessOutput:
    """Run a program to completion and capture its output.

    Standard input is attached to the null device so the child never
    competes with our own prompts. Both output streams are drained
    concurrently by ``subprocess.run``.

    Args:
        executable: Path to the program
        arguments: Arguments, not including the program itself

    Returns:
        ProcessOutput with exit status, stdout and stderr

    Raises:
        SpawnError: If the program could not be started
    """
    cmd = [str(executable), *arguments]
    logger.debug("Running process", command=cmd)

    try:
        result = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        logger.error("Failed to start process", executable=str(executable), error=str(e))
        raise SpawnError(f"Could not start '{executable}': {e}") from e

    logger.debug("Process finished", executable=str(executable), returncode=result.returncode)
    return ProcessOutput(
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )
