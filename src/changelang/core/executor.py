"""Rewriting of default disposition flags with an ffmpeg remux."""

import os
import shlex
from pathlib import Path
from typing import Callable, Optional
from uuid import uuid4

from changelang.core.process import run_process
from changelang.exceptions import InstallError, RewriteError
from changelang.models.plan import ActionKind, TrackAction
from changelang.models.track import TrackType
from changelang.utils.logger import get_logger

logger = get_logger(__name__)


class DispositionRewriter:
    """Set or clear default flags by remuxing the file with ffmpeg.

    ffmpeg writes a new container, so the result goes to a temporary file
    next to the input which then atomically replaces the original:
    1. Remux into ``.<stem>.<uuid><suffix>`` in the same directory
    2. Replace the original with the temp file on success
    3. Remove the temp file on every path
    """

    def __init__(
        self,
        ffmpeg_path: str | Path = "ffmpeg",
        echo: Optional[Callable[[str], None]] = None,
    ):
        """Initialize rewriter.

        Args:
            ffmpeg_path: Path to the ffmpeg executable
            echo: If given, receives each ffmpeg command line before it runs
        """
        self.ffmpeg_path = ffmpeg_path
        self.echo = echo

    @staticmethod
    def temp_path_for(file_path: Path) -> Path:
        """Unique temp path in the input's directory, keeping its extension."""
        return file_path.with_name(f".{file_path.stem}.{uuid4().hex}{file_path.suffix}")

    def build_command(
        self,
        input_file: Path,
        output_file: Path,
        track_type: TrackType,
        action: TrackAction,
    ) -> list[str]:
        """Build the ffmpeg argument list (without the executable).

        Tracks are addressed by their ordinal within the stream type, never
        by absolute stream index.

        Args:
            input_file: Source media file
            output_file: Destination file
            track_type: Stream type whose flags are rewritten
            action: SET or CLEAR

        Returns:
            Argument list for the ffmpeg process
        """
        cmd = [
            "-y",
            "-i", str(input_file),
            "-map", "0",  # Map all streams
            "-c", "copy",  # Copy codecs (no re-encode)
            f"-disposition:{track_type.value}", "0",  # Clear default on every stream of the type
        ]

        if action.kind is ActionKind.SET:
            cmd.extend([f"-disposition:{track_type.value}:{action.ordinal}", "default"])

        cmd.append(str(output_file))
        return cmd

    def command_line(self, cmd: list[str]) -> str:
        """Shell-quoted command line for display."""
        return shlex.join([str(self.ffmpeg_path), *cmd])

    def _cleanup_files(self, files: list[Path]) -> None:
        """Remove temporary files.

        Args:
            files: List of file paths to remove
        """
        for file in files:
            try:
                if file.exists():
                    file.unlink()
                    logger.debug("Cleaned up file", file=str(file))
            except OSError as e:
                logger.warning("Failed to cleanup file", file=str(file), error=str(e))

    def rewrite(self, file_path: Path, track_type: TrackType, action: TrackAction) -> None:
        """Apply one action to the default flags of one stream type.

        Args:
            file_path: Media file to modify in place
            track_type: Stream type to rewrite
            action: SET (with ordinal) or CLEAR

        Raises:
            ValueError: If the action is NONE
            SpawnError: If ffmpeg can't be started
            RewriteError: If ffmpeg fails; the original is untouched
            InstallError: If ffmpeg succeeded but the replace failed; the
                original is untouched
        """
        if not action.pending:
            raise ValueError("Nothing to rewrite for a NONE action")

        temp_file = self.temp_path_for(file_path)
        cmd = self.build_command(file_path, temp_file, track_type, action)

        logger.info(
            "Rewriting default flags",
            file=str(file_path),
            track_type=track_type.label,
            action=action.kind.value,
            ordinal=action.ordinal,
        )
        logger.debug("Executing ffmpeg remux", file=str(file_path), command=[str(self.ffmpeg_path), *cmd])
        if self.echo is not None:
            self.echo(f"  {self.command_line(cmd)}")

        try:
            result = run_process(self.ffmpeg_path, cmd)

            if result.returncode != 0:
                logger.error(
                    "ffmpeg failed",
                    file=str(file_path),
                    returncode=result.returncode,
                    stderr=result.stderr[-2000:],
                )
                raise RewriteError(
                    f"ffmpeg failed with exit status {result.returncode}",
                    stderr=result.stderr,
                )

            if not temp_file.exists():
                logger.error("ffmpeg did not create output file", file=str(file_path))
                raise RewriteError("ffmpeg did not create an output file", stderr=result.stderr)

            try:
                os.replace(temp_file, file_path)
            except OSError as e:
                logger.error(
                    "Could not replace original file",
                    file=str(file_path),
                    temp_file=str(temp_file),
                    error=str(e),
                )
                raise InstallError(
                    f"Could not replace original file '{file_path}' with "
                    f"temporary file '{temp_file}': {e}"
                ) from e

            logger.info(
                "Successfully updated default flags",
                file=str(file_path),
                track_type=track_type.label,
                action=action.kind.value,
            )
        finally:
            self._cleanup_files([temp_file])
