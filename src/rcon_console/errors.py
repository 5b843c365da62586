"""Error taxonomy shared by the session, router, transports and status parser."""

from __future__ import annotations


class RconConsoleError(RuntimeError):
    """Base class for every failure the console reports to the user."""


class AuthError(RconConsoleError):
    """Missing credentials or a handshake rejected by the server."""


class TransportError(RconConsoleError):
    """I/O failure on an open connection, or no connection at all."""


class ProbeTimeout(TransportError):
    """The periodic status poll did not answer within its bound."""


class ArgumentError(RconConsoleError):
    """A meta-command was given the wrong number of arguments."""


class StatusParseError(RconConsoleError):
    """A line of the status response could not be interpreted."""

    def __init__(self, message: str, *, line: str) -> None:
        super().__init__(message)
        self.line = line
