"""Processing pipeline orchestrator."""

from typing import Optional

import click

from changelang.config import Config
from changelang.core.analyzer import StreamInspector
from changelang.core.executor import DispositionRewriter
from changelang.core.locator import find_executable
from changelang.core.selector import Echo, Prompt, TrackSelector, parse_directive
from changelang.exceptions import ChangeLangError, UsageError
from changelang.models.plan import RewriteOutcome, RunOptions, RunResult
from changelang.models.track import TrackType
from changelang.utils.logger import get_logger

logger = get_logger(__name__)


class ChangeLangPipeline:
    """Inspect, select and rewrite the default tracks of one file."""

    def __init__(
        self,
        inspector: StreamInspector,
        rewriter: DispositionRewriter,
        selector: TrackSelector,
        echo: Echo = click.echo,
    ):
        self.inspector = inspector
        self.rewriter = rewriter
        self.selector = selector
        self.echo = echo

    @classmethod
    def from_config(
        cls, config: Config, prompt: Optional[Prompt] = None, echo: Echo = click.echo
    ) -> "ChangeLangPipeline":
        """Resolve the external tools and build a pipeline.

        Raises:
            NotFoundError: If ffmpeg or ffprobe is not installed
        """
        ffmpeg_path = find_executable(config.tools.ffmpeg)
        echo(f"  ffmpeg:  {ffmpeg_path}")
        ffprobe_path = find_executable(config.tools.ffprobe)
        echo(f"  ffprobe: {ffprobe_path}")
        logger.info("Dependencies resolved", ffmpeg=str(ffmpeg_path), ffprobe=str(ffprobe_path))

        return cls(
            inspector=StreamInspector(ffprobe_path),
            rewriter=DispositionRewriter(ffmpeg_path, echo=echo),
            selector=TrackSelector(prompt=prompt, echo=echo),
            echo=echo,
        )

    def process(self, options: RunOptions) -> RunResult:
        """Process a single file.

        Pipeline steps:
        1. Validation (file exists, directives well-formed)
        2. Inspection (audio and subtitle streams)
        3. Selection (directive or interactive)
        4. Rewrite, one independent ffmpeg pass per pending stream type

        Args:
            options: Parsed command line for this file

        Returns:
            RunResult with status and per-type outcomes
        """
        file_path = options.file_path
        logger.info("Processing file", file=str(file_path), interactive=not options.has_directives)

        try:
            if not file_path.exists():
                raise UsageError(f"Input file not found at '{file_path}'")
            if not file_path.is_file():
                raise UsageError(f"Input path is not a regular file: '{file_path}'")

            parse_directive(options.audio, TrackType.AUDIO)
            parse_directive(options.subtitle, TrackType.SUBTITLE)

            audio_tracks = self.inspector.inspect(file_path, TrackType.AUDIO)
            subtitle_tracks = self.inspector.inspect(file_path, TrackType.SUBTITLE)

            plan = self.selector.plan(options, audio_tracks, subtitle_tracks)
        except ChangeLangError as e:
            logger.error("Processing failed", file=str(file_path), error=e.message)
            return RunResult(status="failed", file_path=file_path, error=e)

        if plan.is_empty:
            # Unmatched directives are not a failure; declining every prompt is
            status = "declined" if plan.interactive else "noop"
            logger.info("Nothing to do", file=str(file_path), status=status)
            return RunResult(status=status, file_path=file_path, plan=plan)

        if options.dry_run:
            for track_type, action in plan.pending():
                temp_file = self.rewriter.temp_path_for(file_path)
                cmd = self.rewriter.build_command(file_path, temp_file, track_type, action)
                self.echo(f"  {self.rewriter.command_line(cmd)}")
                logger.info(
                    "Dry run - would rewrite",
                    file=str(file_path),
                    track_type=track_type.label,
                    action=str(action),
                )
            return RunResult(status="dry_run", file_path=file_path, plan=plan)

        outcomes = []
        for track_type, action in plan.pending():
            self.echo(f"Running ffmpeg to {action} ({track_type.label})...")
            try:
                self.rewriter.rewrite(file_path, track_type, action)
                outcomes.append(RewriteOutcome(track_type, action))
            except ChangeLangError as e:
                # The other stream type is still attempted
                logger.error(
                    "Rewrite failed",
                    file=str(file_path),
                    track_type=track_type.label,
                    error=e.message,
                )
                outcomes.append(RewriteOutcome(track_type, action, error=e))

        status = "success" if all(o.ok for o in outcomes) else "failed"
        return RunResult(status=status, file_path=file_path, plan=plan, outcomes=outcomes)
