"""Error types raised by changelang."""

from typing import Optional


class ChangeLangError(Exception):
    """Base class for all changelang errors.

    Carries the captured stderr of the child process when one was involved.
    """

    def __init__(self, message: str, stderr: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stderr = stderr


class SpawnError(ChangeLangError):
    """An external program could not be started."""


class NotFoundError(ChangeLangError):
    """A required external tool is not available on PATH."""


class InspectionError(ChangeLangError):
    """ffprobe failed or returned output that could not be decoded."""


class RewriteError(ChangeLangError):
    """ffmpeg failed to remux the file."""


class InstallError(ChangeLangError):
    """The remux succeeded but the original file could not be replaced."""


class UsageError(ChangeLangError):
    """Malformed or missing command-line arguments."""
