"""Formatting of track listings for the terminal."""

from changelang.models.track import Track, TrackType

NOT_AVAILABLE = "N/A"


def _describe_audio(track: Track) -> str:
    codec = track.codec or NOT_AVAILABLE
    sample_rate = f"{track.sample_rate} Hz" if track.sample_rate else f"{NOT_AVAILABLE} Hz"
    if track.channel_layout:
        layout = track.channel_layout
    elif track.channels is not None:
        layout = f"{track.channels} ch"
    else:
        layout = NOT_AVAILABLE
    line = f"{codec}, {sample_rate}, {layout}"
    if track.sample_format:
        line += f", {track.sample_format}"
    return line


def _describe_subtitle(track: Track) -> str:
    codec = track.codec or NOT_AVAILABLE
    if track.title:
        return f"{codec}, {track.title}"
    return codec


def format_track(track: Track) -> str:
    """Render one listing line, e.g. ``[2] * (jpn): aac, 48000 Hz, stereo, fltp``."""
    marker = "*" if track.is_default else " "
    if track.track_type is TrackType.AUDIO:
        details = _describe_audio(track)
    else:
        details = _describe_subtitle(track)
    return f"[{track.display_index}] {marker} ({track.language}): {details}"


def format_listing(tracks: list[Track]) -> list[str]:
    return [format_track(track) for track in tracks]
