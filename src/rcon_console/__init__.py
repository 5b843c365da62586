"""Session and status-parsing core of a terminal RCON client."""

__version__ = "0.1.0"
