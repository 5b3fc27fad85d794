"""Check which changelog sections a diff added entries to."""

__version__ = "0.1.0"
