"""changelang - set default audio and subtitle tracks without re-encoding."""

__version__ = "1.0.0"
