"""Track selection from language directives or interactive input."""

from typing import Callable, Optional

import click

from changelang.exceptions import UsageError
from changelang.models.plan import CLEAR_SENTINEL, RunOptions, SelectionPlan, TrackAction
from changelang.models.track import Track, TrackType
from changelang.utils.display import format_listing
from changelang.utils.language import languages_match, normalize_language_code
from changelang.utils.logger import get_logger

logger = get_logger(__name__)

Prompt = Callable[[str], str]
Echo = Callable[[str], None]


def parse_directive(value: Optional[str], track_type: TrackType) -> Optional[str]:
    """Validate a -a/-s value and lower-case it.

    The clear sentinel is only meaningful for subtitles; for audio it is
    kept as an ordinary (never matching) language code.

    Args:
        value: Raw directive, or None if the flag was not given
        track_type: Stream type the directive applies to

    Returns:
        Lower-cased directive, or None

    Raises:
        UsageError: If the directive is empty
    """
    if value is None:
        return None

    stripped = value.strip()
    if not stripped:
        raise UsageError(f"Empty {track_type.label} language code")

    return stripped.lower()


def find_language(tracks: list[Track], language: str) -> Optional[Track]:
    """Return the first track (in ordinal order) whose language matches.

    The code is compared literally first. Only when no track carries it is
    a 2-letter code retried as its ISO 639-2 form, so ``en`` finds a track
    tagged ``en`` before one tagged ``eng``.
    """
    ordered = sorted(tracks, key=lambda t: t.ordinal)
    for track in ordered:
        if languages_match(track.language, language):
            return track

    expanded = normalize_language_code(language)
    if expanded == language.lower():
        return None
    for track in ordered:
        if languages_match(track.language, expanded):
            return track
    return None


class TrackSelector:
    """Decide which audio and subtitle tracks become the default."""

    def __init__(self, prompt: Optional[Prompt] = None, echo: Echo = click.echo):
        """Initialize track selector.

        Args:
            prompt: Reads one line of user input given a prompt text; only
                required for interactive mode
            echo: Writes one line of user-facing output
        """
        self.prompt = prompt
        self.echo = echo

    def plan(
        self,
        options: RunOptions,
        audio_tracks: list[Track],
        subtitle_tracks: list[Track],
    ) -> SelectionPlan:
        """Build the selection plan for one file.

        Directive mode is used whenever any directive was given; otherwise
        the user is asked.
        """
        if options.has_directives:
            return self.plan_directives(options, audio_tracks, subtitle_tracks)
        return self.plan_interactive(audio_tracks, subtitle_tracks)

    def plan_directives(
        self,
        options: RunOptions,
        audio_tracks: list[Track],
        subtitle_tracks: list[Track],
    ) -> SelectionPlan:
        """Match -a/-s directives against the tracks. Never prompts."""
        audio = self._directive_action(
            parse_directive(options.audio, TrackType.AUDIO), TrackType.AUDIO, audio_tracks
        )
        subtitle = self._directive_action(
            parse_directive(options.subtitle, TrackType.SUBTITLE),
            TrackType.SUBTITLE,
            subtitle_tracks,
        )
        return SelectionPlan(audio=audio, subtitle=subtitle, interactive=False)

    def _directive_action(
        self, directive: Optional[str], track_type: TrackType, tracks: list[Track]
    ) -> TrackAction:
        if directive is None:
            return TrackAction.none()

        if track_type is TrackType.SUBTITLE and directive == CLEAR_SENTINEL:
            logger.info("Clearing default subtitle flags")
            return TrackAction.clear()

        track = find_language(tracks, directive)
        if track is None:
            logger.info(
                "No matching track found",
                track_type=track_type.label,
                language=directive,
                available_languages=[t.language for t in tracks],
            )
            self.echo(
                f"No {track_type.label} track found matching language code "
                f"'{directive}'. No {track_type.label} changes made."
            )
            return TrackAction.none()

        logger.info(
            "Selected track by language",
            track_type=track_type.label,
            language=directive,
            ordinal=track.ordinal,
            stream_index=track.stream_index,
        )
        self.echo(
            f"Found {track_type.label} track with language '{directive}' at index "
            f"{track.display_index}. Setting as default."
        )
        return TrackAction.set_default(track.ordinal)

    def plan_interactive(
        self, audio_tracks: list[Track], subtitle_tracks: list[Track]
    ) -> SelectionPlan:
        """Show each non-empty track list and ask the user for a choice."""
        if self.prompt is None:
            raise UsageError("Interactive selection requires a terminal prompt")

        audio = self.ask(TrackType.AUDIO, audio_tracks)
        subtitle = self.ask(TrackType.SUBTITLE, subtitle_tracks)
        return SelectionPlan(audio=audio, subtitle=subtitle, interactive=True)

    def ask(self, track_type: TrackType, tracks: list[Track]) -> TrackAction:
        """List tracks of one type and read the user's selection."""
        if not tracks:
            self.echo(f"No {track_type.label} tracks found in the file.")
            return TrackAction.none()

        self.echo("")
        self.echo(f"Available {track_type.label} tracks:")
        for line in format_listing(tracks):
            self.echo(line)
        self.echo("")

        if track_type is TrackType.SUBTITLE:
            text = f"Set default {track_type.label} (enter number, 0 to clear, or leave blank to skip)"
        else:
            text = f"Set default {track_type.label} (enter number, or leave blank to skip)"

        return self.parse_choice(self.prompt(text), track_type, len(tracks))

    def parse_choice(self, raw: Optional[str], track_type: TrackType, count: int) -> TrackAction:
        """Interpret one line of interactive input.

        Blank input skips. For subtitles, 0 clears all defaults. A number in
        [1, count] selects that track. Anything else is a warning and skips.
        """
        choice = (raw or "").strip()
        if not choice:
            self.echo(f"No {track_type.label} selection made.")
            return TrackAction.none()

        if track_type is TrackType.SUBTITLE and choice == CLEAR_SENTINEL:
            return TrackAction.clear()

        # int() would also take "+2", "1_0" and non-ASCII digits
        number = int(choice) if choice.isascii() and choice.isdigit() else None

        if number is None or not 1 <= number <= count:
            logger.warning(
                "Invalid selection", track_type=track_type.label, choice=choice, track_count=count
            )
            self.echo(f"Invalid {track_type.label} selection '{choice}'. No {track_type.label} changes made.")
            return TrackAction.none()

        return TrackAction.set_default(number - 1)
