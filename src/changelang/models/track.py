"""Track data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TrackType(Enum):
    """Stream types whose default flag can be edited.

    The value is the ffmpeg/ffprobe stream specifier letter.
    """

    AUDIO = "a"
    SUBTITLE = "s"

    @property
    def label(self) -> str:
        """Human-readable name of the stream type."""
        return "audio" if self is TrackType.AUDIO else "subtitle"


@dataclass(frozen=True)
class Track:
    """One audio or subtitle stream of a media file."""

    ordinal: int  # Position among streams of the same type (0-based)
    stream_index: int  # Absolute ffprobe stream index
    track_type: TrackType
    language: str = "und"  # ISO 639-2 language tag, "und" when absent
    codec: Optional[str] = None
    title: Optional[str] = None
    sample_rate: Optional[str] = None
    channel_layout: Optional[str] = None
    channels: Optional[int] = None
    sample_format: Optional[str] = None
    is_default: bool = False

    @property
    def display_index(self) -> int:
        """1-based index shown to the user."""
        return self.ordinal + 1

    def __str__(self) -> str:
        """Human-readable representation."""
        default_marker = " [DEFAULT]" if self.is_default else ""
        return f"{self.track_type.label} track {self.display_index}: {self.language}{default_marker}"
