"""Data models for tracks and selection plans."""
