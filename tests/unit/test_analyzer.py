"""Unit tests for the ffprobe stream inspector."""

import json
from unittest.mock import Mock, patch

import pytest

from changelang.core.analyzer import StreamInspector
from changelang.exceptions import InspectionError
from changelang.models.track import TrackType


def ffprobe_result(streams=None, returncode=0, stdout=None, stderr=""):
    """Mock of a finished ffprobe process."""
    if stdout is None:
        stdout = json.dumps({"streams": streams or []})
    return Mock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestStreamInspector:
    """Test StreamInspector class."""

    @pytest.fixture
    def inspector(self):
        return StreamInspector("/usr/bin/ffprobe")

    def test_command(self, inspector, media_file):
        """Should select one stream type with quiet JSON output."""
        with patch("subprocess.run", return_value=ffprobe_result()) as mock_run:
            inspector.inspect(media_file, TrackType.SUBTITLE)

        assert mock_run.call_args.args[0] == [
            "/usr/bin/ffprobe",
            "-v", "quiet",
            "-print_format", "json",
            "-show_streams",
            "-select_streams", "s",
            str(media_file),
        ]

    def test_parses_audio_tracks(self, inspector, media_file):
        streams = [
            {
                "index": 1,
                "codec_name": "aac",
                "codec_type": "audio",
                "sample_fmt": "fltp",
                "sample_rate": "48000",
                "channel_layout": "stereo",
                "channels": 2,
                "tags": {"language": "eng", "title": "Commentary"},
                "disposition": {"default": 1, "forced": 0},
            }
        ]
        with patch("subprocess.run", return_value=ffprobe_result(streams)):
            tracks = inspector.inspect(media_file, TrackType.AUDIO)

        assert len(tracks) == 1
        track = tracks[0]
        assert track.ordinal == 0
        assert track.stream_index == 1
        assert track.track_type is TrackType.AUDIO
        assert track.codec == "aac"
        assert track.language == "eng"
        assert track.title == "Commentary"
        assert track.sample_rate == "48000"
        assert track.channel_layout == "stereo"
        assert track.channels == 2
        assert track.sample_format == "fltp"
        assert track.is_default is True

    def test_ordinals_ignore_stream_index_gaps(self, inspector, media_file):
        """Ordinals are contiguous in result order, whatever the stream indexes."""
        streams = [{"index": 2}, {"index": 5}, {"index": 9}]
        with patch("subprocess.run", return_value=ffprobe_result(streams)):
            tracks = inspector.inspect(media_file, TrackType.AUDIO)

        assert [t.ordinal for t in tracks] == [0, 1, 2]
        assert [t.stream_index for t in tracks] == [2, 5, 9]

    def test_missing_language_is_und(self, inspector, media_file):
        streams = [{"index": 1}, {"index": 2, "tags": {"language": ""}}, {"index": 3, "tags": {}}]
        with patch("subprocess.run", return_value=ffprobe_result(streams)):
            tracks = inspector.inspect(media_file, TrackType.SUBTITLE)

        assert [t.language for t in tracks] == ["und", "und", "und"]

    def test_missing_optional_fields_are_none(self, inspector, media_file):
        """Codecs that report fewer attributes should not fail the run."""
        streams = [{"index": 4, "tags": "garbage", "disposition": None, "channels": "many"}]
        with patch("subprocess.run", return_value=ffprobe_result(streams)):
            track = inspector.inspect(media_file, TrackType.AUDIO)[0]

        assert track.codec is None
        assert track.title is None
        assert track.sample_rate is None
        assert track.channel_layout is None
        assert track.channels is None
        assert track.sample_format is None
        assert track.is_default is False

    def test_missing_index_falls_back_to_ordinal(self, inspector, media_file):
        with patch("subprocess.run", return_value=ffprobe_result([{}, {}])):
            tracks = inspector.inspect(media_file, TrackType.AUDIO)

        assert [t.stream_index for t in tracks] == [0, 1]

    def test_no_streams_is_empty_list(self, inspector, media_file):
        with patch("subprocess.run", return_value=ffprobe_result([])):
            assert inspector.inspect(media_file, TrackType.SUBTITLE) == []

    def test_missing_streams_key_is_empty_list(self, inspector, media_file):
        with patch("subprocess.run", return_value=ffprobe_result(stdout="{}")):
            assert inspector.inspect(media_file, TrackType.SUBTITLE) == []

    def test_nonzero_exit_raises(self, inspector, media_file):
        """ffprobe failures should carry its stderr."""
        result = ffprobe_result(returncode=1, stdout="", stderr="moov atom not found")
        with patch("subprocess.run", return_value=result):
            with pytest.raises(InspectionError) as exc_info:
                inspector.inspect(media_file, TrackType.AUDIO)

        assert exc_info.value.stderr == "moov atom not found"

    def test_invalid_json_raises(self, inspector, media_file):
        with patch("subprocess.run", return_value=ffprobe_result(stdout="{not json")):
            with pytest.raises(InspectionError, match="Failed to parse"):
                inspector.inspect(media_file, TrackType.AUDIO)

    @pytest.mark.parametrize(
        "stdout",
        [
            "[]",
            '{"streams": {"index": 1}}',
            '{"streams": [1, 2]}',
        ],
    )
    def test_unexpected_schema_raises(self, inspector, media_file, stdout):
        with patch("subprocess.run", return_value=ffprobe_result(stdout=stdout)):
            with pytest.raises(InspectionError, match="Unexpected ffprobe output"):
                inspector.inspect(media_file, TrackType.AUDIO)
