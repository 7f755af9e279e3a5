"""Shared pytest fixtures for changelang tests."""

import json
import logging
from pathlib import Path
from unittest.mock import Mock

import pytest

from changelang.config import LoggingConfig
from changelang.models.track import Track, TrackType
from changelang.utils.logger import setup_logging


@pytest.fixture(autouse=True)
def configure_logging():
    """Route logs to the captured stderr of each test."""
    setup_logging(LoggingConfig(level="debug"))
    yield
    logging.basicConfig(handlers=[logging.NullHandler()], force=True)


AUDIO_STREAMS = [
    {
        "index": 1,
        "codec_name": "aac",
        "codec_type": "audio",
        "sample_fmt": "fltp",
        "sample_rate": "48000",
        "channel_layout": "stereo",
        "channels": 2,
        "tags": {"language": "eng", "title": "English"},
        "disposition": {"default": 1},
    },
    {
        "index": 2,
        "codec_name": "ac3",
        "codec_type": "audio",
        "sample_fmt": "fltp",
        "sample_rate": "48000",
        "channel_layout": "5.1(side)",
        "channels": 6,
        "tags": {"language": "jpn"},
        "disposition": {"default": 0},
    },
]

SUBTITLE_STREAMS = [
    {
        "index": 3,
        "codec_name": "subrip",
        "codec_type": "subtitle",
        "tags": {"language": "eng", "title": "Full"},
        "disposition": {"default": 1},
    },
    {
        "index": 4,
        "codec_name": "ass",
        "codec_type": "subtitle",
        "tags": {"language": "jpn", "title": "Signs & Songs"},
        "disposition": {"default": 0},
    },
]


class FakeMediaTools:
    """Stand-in for subprocess.run that answers like ffprobe and ffmpeg.

    ffprobe returns the configured streams for the selected type. ffmpeg
    pops the next exit status from ``ffmpeg_returncodes`` (0 when exhausted)
    and, on success, writes its argument list into the output file so tests
    can see which pass produced the file.
    """

    def __init__(self, audio=None, subtitle=None, ffmpeg_returncodes=None):
        self.streams = {
            "a": AUDIO_STREAMS if audio is None else audio,
            "s": SUBTITLE_STREAMS if subtitle is None else subtitle,
        }
        self.ffmpeg_returncodes = list(ffmpeg_returncodes or [])
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        program = Path(cmd[0]).name

        if program == "ffprobe":
            stream_type = cmd[cmd.index("-select_streams") + 1]
            return Mock(
                returncode=0,
                stdout=json.dumps({"streams": self.streams[stream_type]}),
                stderr="",
            )

        returncode = self.ffmpeg_returncodes.pop(0) if self.ffmpeg_returncodes else 0
        if returncode == 0:
            Path(cmd[-1]).write_text("remuxed " + " ".join(cmd[1:-1]))
            return Mock(returncode=0, stdout="", stderr="")
        return Mock(returncode=returncode, stdout="", stderr="Invalid data found when processing input")

    @property
    def ffmpeg_calls(self):
        return [c for c in self.calls if Path(c[0]).name == "ffmpeg"]


@pytest.fixture
def media_file(tmp_path):
    """Create a placeholder media file."""
    file_path = tmp_path / "episode.mkv"
    file_path.write_bytes(b"original media content")
    return file_path


@pytest.fixture
def fake_tools():
    """FakeMediaTools with two audio and two subtitle tracks."""
    return FakeMediaTools()


@pytest.fixture
def sample_audio_tracks():
    """Audio tracks with interleaved stream indexes."""
    return [
        Track(ordinal=0, stream_index=1, track_type=TrackType.AUDIO, language="eng",
              codec="aac", is_default=True),
        Track(ordinal=1, stream_index=3, track_type=TrackType.AUDIO, language="jpn",
              codec="ac3"),
        Track(ordinal=2, stream_index=5, track_type=TrackType.AUDIO, language="JPN",
              codec="aac"),
    ]


@pytest.fixture
def sample_subtitle_tracks():
    """Subtitle tracks; the English one is default."""
    return [
        Track(ordinal=0, stream_index=2, track_type=TrackType.SUBTITLE, language="eng",
              codec="subrip", title="Full", is_default=True),
        Track(ordinal=1, stream_index=4, track_type=TrackType.SUBTITLE, language="spa",
              codec="subrip"),
    ]


@pytest.fixture
def tools_factory():
    """Build FakeMediaTools with custom streams or ffmpeg exit statuses."""
    return FakeMediaTools
