"""Stream inspection using ffprobe."""

import json
from pathlib import Path
from typing import Any, Optional

from changelang.core.process import run_process
from changelang.exceptions import InspectionError
from changelang.models.track import Track, TrackType
from changelang.utils.language import UNDETERMINED
from changelang.utils.logger import get_logger

logger = get_logger(__name__)


def _opt_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _opt_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _opt_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


class StreamInspector:
    """List the audio or subtitle streams of a media file using ffprobe."""

    def __init__(self, ffprobe_path: str | Path = "ffprobe"):
        """Initialize inspector.

        Args:
            ffprobe_path: Path to the ffprobe executable
        """
        self.ffprobe_path = ffprobe_path

    def build_command(self, file_path: Path, track_type: TrackType) -> list[str]:
        """Build the ffprobe argument list (without the executable)."""
        return [
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_streams",
            "-select_streams",
            track_type.value,
            str(file_path),
        ]

    def inspect(self, file_path: Path, track_type: TrackType) -> list[Track]:
        """Extract the streams of one type from a media file.

        Args:
            file_path: Path to media file
            track_type: Stream type to list

        Returns:
            Tracks in container order; ordinals are assigned by position

        Raises:
            InspectionError: If ffprobe fails or its output can't be decoded
            SpawnError: If ffprobe can't be started
        """
        logger.debug("Inspecting streams", file=str(file_path), track_type=track_type.label)

        result = run_process(self.ffprobe_path, self.build_command(file_path, track_type))

        if result.returncode != 0:
            logger.error(
                "ffprobe failed",
                file=str(file_path),
                returncode=result.returncode,
                stderr=result.stderr,
            )
            raise InspectionError(
                f"ffprobe failed with exit status {result.returncode}",
                stderr=result.stderr,
            )

        tracks = self.parse(result.stdout, track_type)

        logger.info(
            "Streams inspected",
            file=str(file_path),
            track_type=track_type.label,
            track_count=len(tracks),
            languages=[t.language for t in tracks],
            default_track=next((t.ordinal for t in tracks if t.is_default), None),
        )
        return tracks

    def parse(self, output: str, track_type: TrackType) -> list[Track]:
        """Decode ffprobe JSON output into tracks.

        Unknown or missing optional fields are treated as absent.

        Raises:
            InspectionError: If the output is not JSON or has the wrong shape
        """
        try:
            data = json.loads(output) if output.strip() else {}
        except json.JSONDecodeError as e:
            logger.error("Failed to parse ffprobe output", error=str(e))
            raise InspectionError(f"Failed to parse ffprobe output: {e}") from e

        if not isinstance(data, dict):
            raise InspectionError("Unexpected ffprobe output: top-level value is not an object")

        streams = data.get("streams", [])
        if not isinstance(streams, list):
            raise InspectionError("Unexpected ffprobe output: 'streams' is not a list")

        tracks = []
        for ordinal, stream in enumerate(streams):
            if not isinstance(stream, dict):
                raise InspectionError(
                    f"Unexpected ffprobe output: stream {ordinal} is not an object"
                )
            tracks.append(self._to_track(ordinal, stream, track_type))
        return tracks

    @staticmethod
    def _to_track(ordinal: int, stream: dict, track_type: TrackType) -> Track:
        tags = _opt_dict(stream.get("tags"))
        disposition = _opt_dict(stream.get("disposition"))
        stream_index = _opt_int(stream.get("index"))

        return Track(
            ordinal=ordinal,
            stream_index=stream_index if stream_index is not None else ordinal,
            track_type=track_type,
            language=_opt_str(tags.get("language")) or UNDETERMINED,
            codec=_opt_str(stream.get("codec_name")),
            title=_opt_str(tags.get("title")),
            sample_rate=_opt_str(stream.get("sample_rate")),
            channel_layout=_opt_str(stream.get("channel_layout")),
            channels=_opt_int(stream.get("channels")),
            sample_format=_opt_str(stream.get("sample_fmt")),
            is_default=_opt_int(disposition.get("default")) == 1,
        )
