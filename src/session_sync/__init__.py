"""Session Sync: recording session timer with Google Sheets export."""

__version__ = "0.3.0"
