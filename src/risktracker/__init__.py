"""Session state tracking for territory board games."""

__version__ = "0.1.0"
