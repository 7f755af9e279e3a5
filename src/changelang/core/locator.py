"""Resolution of external tools on PATH."""

import os
import shutil
from pathlib import Path

from changelang.exceptions import NotFoundError
from changelang.utils.logger import get_logger

logger = get_logger(__name__)


def find_executable(name: str) -> Path:
    """Resolve a program name to an absolute executable path.

    Args:
        name: Bare program name (e.g. "ffmpeg") or a path

    Returns:
        Absolute path to the executable

    Raises:
        NotFoundError: If the program is not on PATH or is not an
            executable regular file
    """
    resolved = shutil.which(name)
    if not resolved:
        logger.error("Executable not found", name=name)
        raise NotFoundError(
            f"Could not find executable '{name}'. "
            f"Please ensure it is installed and in your PATH."
        )

    path = Path(resolved).resolve()
    if not path.is_file() or not os.access(path, os.X_OK):
        logger.error("Resolved path is not an executable file", name=name, path=str(path))
        raise NotFoundError(
            f"'{name}' resolved to '{path}', which is not an executable file. "
            f"Please ensure it is installed and in your PATH."
        )

    logger.debug("Executable resolved", name=name, path=str(path))
    return path
