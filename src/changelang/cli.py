"""Command-line interface for changelang."""

import sys
from pathlib import Path
from typing import Optional

import click

from changelang import __version__
from changelang.config import Config, load_config
from changelang.core.pipeline import ChangeLangPipeline
from changelang.core.scanner import FileScanner
from changelang.core.selector import parse_directive
from changelang.exceptions import ChangeLangError, UsageError
from changelang.models.plan import RunOptions, RunResult
from changelang.models.track import TrackType
from changelang.utils.logger import get_logger, setup_logging

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="CHANGELANG_CONFIG",
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the ffmpeg commands instead of running them",
)
audio_option = click.option(
    "-a",
    "--audio",
    metavar="LANG",
    default=None,
    help="Set default audio to the first track with this language code",
)
subtitle_option = click.option(
    "-s",
    "--subtitle",
    metavar="LANG|0",
    default=None,
    help="Set default subtitle to the first track with this language code, or 0 to clear",
)


def _setup(config_path: Optional[Path]) -> Config:
    """Load configuration and configure logging, exiting on error."""
    try:
        cfg = load_config(config_path)
        setup_logging(cfg.logging)
    except Exception as e:
        click.secho(f"Error loading configuration: {e}", fg="red", err=True)
        sys.exit(1)
    return cfg


def _echo_error(error: ChangeLangError) -> None:
    click.secho(f"Error: {error.message}", fg="red", err=True)
    if error.stderr and error.stderr.strip():
        click.echo(error.stderr.strip(), err=True)


def _prompt(text: str) -> str:
    return click.prompt(text, default="", show_default=False)


def _build_pipeline(cfg: Config, interactive: bool) -> ChangeLangPipeline:
    try:
        return ChangeLangPipeline.from_config(cfg, prompt=_prompt if interactive else None)
    except ChangeLangError as e:
        _echo_error(e)
        sys.exit(1)


def _report(result: RunResult) -> None:
    """Print the outcome of one file."""
    if result.error is not None:
        _echo_error(result.error)

    for outcome in result.outcomes:
        label = outcome.track_type.label
        if outcome.ok:
            click.secho(
                f"Successfully updated default {label} track in '{result.file_path}'.",
                fg="green",
            )
        else:
            click.secho(f"Failed to update default {label} track.", fg="red", err=True)
            _echo_error(outcome.error)

    if result.status == "noop":
        click.secho("No changes made.", fg="yellow")
    elif result.status == "declined":
        click.secho("No selection made. File not changed.", fg="yellow")
    elif result.status == "dry_run":
        click.secho(f"⊙ {result}", fg="cyan")


@click.command()
@click.version_option(version=__version__)
@config_option
@dry_run_option
@click.argument("file", type=click.Path(path_type=Path))
@audio_option
@subtitle_option
def changelang(config_path, dry_run, file, audio, subtitle):
    """Set the default audio and subtitle tracks of FILE without re-encoding.

    Without -a/-s, lists the tracks and asks which ones to make default.
    """
    cfg = _setup(config_path)
    logger = get_logger(__name__)

    options = RunOptions(
        file_path=file,
        audio=audio,
        subtitle=subtitle,
        dry_run=dry_run or cfg.execution.dry_run,
    )

    try:
        if not file.exists():
            raise UsageError(f"Input file not found at '{file}'")
        parse_directive(audio, TrackType.AUDIO)
        parse_directive(subtitle, TrackType.SUBTITLE)
    except UsageError as e:
        _echo_error(e)
        sys.exit(1)

    click.echo("Resolving dependencies...")
    pipeline = _build_pipeline(cfg, interactive=not options.has_directives)

    result = pipeline.process(options)
    _report(result)

    logger.debug("Run finished", file=str(file), status=result.status, exit_code=result.exit_code)
    sys.exit(result.exit_code)


@click.command()
@click.version_option(version=__version__)
@config_option
@dry_run_option
@click.argument("extension")
@audio_option
@subtitle_option
@click.option(
    "--path",
    "-p",
    "root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory to search (default: current directory)",
)
@click.option(
    "--recursive/--no-recursive",
    "-r/-R",
    default=True,
    help="Search subdirectories (default: True)",
)
def changeall(config_path, dry_run, extension, audio, subtitle, root, recursive):
    """Apply -a/-s to every *.EXTENSION file under a directory."""
    cfg = _setup(config_path)
    logger = get_logger(__name__)

    try:
        if audio is None and subtitle is None:
            raise UsageError("At least one of -a or -s is required")
        parse_directive(audio, TrackType.AUDIO)
        parse_directive(subtitle, TrackType.SUBTITLE)
    except UsageError as e:
        _echo_error(e)
        sys.exit(1)

    try:
        files = FileScanner().scan(root, [extension], recursive=recursive)
    except (OSError, ValueError) as e:
        click.secho(f"✗ Error scanning: {e}", fg="red", err=True)
        sys.exit(1)

    if not files:
        click.secho(f"⊘ No *.{extension.lstrip('.')} files found", fg="yellow")
        sys.exit(0)

    click.echo(f"Found {len(files)} file(s)")
    click.echo("")

    pipeline = _build_pipeline(cfg, interactive=False)
    counts = {"success": 0, "dry_run": 0, "noop": 0, "failed": 0}

    for idx, file in enumerate(files, 1):
        click.echo(f"[{idx}/{len(files)}] {file}")
        result = pipeline.process(
            RunOptions(
                file_path=file,
                audio=audio,
                subtitle=subtitle,
                dry_run=dry_run or cfg.execution.dry_run,
            )
        )
        _report(result)
        counts[result.status if result.status in counts else "failed"] += 1
        click.echo("")

    click.echo("=" * 60)
    click.echo("Summary:")
    click.secho(f"  ✓ Updated:   {counts['success']}", fg="green")
    click.secho(f"  ⊙ Dry run:   {counts['dry_run']}", fg="cyan")
    click.secho(f"  ⊘ Unchanged: {counts['noop']}", fg="yellow")
    click.secho(f"  ✗ Failed:    {counts['failed']}", fg="red")
    click.echo(f"  Total:       {len(files)}")

    logger.info("Batch finished", root=str(root), **counts)
    sys.exit(1 if counts["failed"] else 0)


def _run(command: click.Command) -> None:
    """Run a command, mapping usage errors to exit status 1."""
    try:
        rv = command.main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(rv if isinstance(rv, int) else 0)


def main():
    """Entry point for the changelang CLI."""
    _run(changelang)


def main_batch():
    """Entry point for the changeall CLI."""
    _run(changeall)


if __name__ == "__main__":
    main()
