"""RCON transport adapters."""

from .source_rcon import SourceRconConnection, SourceRconTransport, split_address
from .transport import Connection, Transport

__all__ = [
    "Connection",
    "SourceRconConnection",
    "SourceRconTransport",
    "Transport",
    "split_address",
]
