"""Boundary for authenticated RCON transport integrations."""

from typing import Protocol


class Connection(Protocol):
    """One authenticated, strictly request/response channel to the server."""

    def execute(self, command: str) -> str:
        """Send ``command`` and block until its single response arrives."""

    def close(self) -> None:
        """Release the underlying socket."""


class Transport(Protocol):
    """Opens authenticated connections."""

    def open(self, address: str, password: str) -> Connection:
        """Connect to ``address`` and authenticate with ``password``."""
