"""Source-engine RCON transport built on the ``rcon`` package.

Framing, request ids and the auth handshake are handled by
``rcon.source.Client``; this module only maps addresses and translates the
library's exceptions into the console's error taxonomy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rcon.exceptions import EmptyResponse, SessionTimeout, WrongPassword
from rcon.source import Client

from rcon_console.adapters.transport import Connection, Transport
from rcon_console.errors import AuthError, TransportError


def split_address(address: str, default_port: int) -> tuple[str, int]:
    """Split ``host[:port]`` into its parts."""
    host, sep, port = address.strip().rpartition(":")
    if not sep:
        return port, default_port
    if not host:
        raise TransportError(f"Invalid address: {address!r}")
    try:
        number = int(port)
    except ValueError as exc:
        raise TransportError(f"Invalid port in address: {address!r}") from exc
    if not 0 < number < 65536:
        raise TransportError(f"Invalid port in address: {address!r}")
    return host, number


@dataclass(slots=True)
class SourceRconConnection(Connection):
    """An open, logged-in ``rcon.source.Client``."""

    client: Client
    address: str

    def execute(self, command: str) -> str:
        try:
            return self.client.run(command)
        except (EmptyResponse, SessionTimeout) as exc:
            raise TransportError(f"{type(exc).__name__} from {self.address}") from exc
        except OSError as exc:
            raise TransportError(f"Connection to {self.address} failed: {exc}") from exc
        except ValueError as exc:
            # undecodable payloads, malformed packets
            raise TransportError(f"Unreadable response from {self.address}: {exc}") from exc

    def close(self) -> None:
        try:
            self.client.close()
        except OSError:
            logging.getLogger("rcon_console.adapters").debug("close_failed", extra={"address": self.address})


@dataclass(slots=True)
class SourceRconTransport(Transport):
    """Opens Source RCON connections to ``host[:port]`` addresses."""

    default_port: int = 27015
    timeout_seconds: float = 10.0
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("rcon_console.adapters"))

    def open(self, address: str, password: str) -> SourceRconConnection:
        host, port = split_address(address, self.default_port)
        client = Client(host, port, timeout=self.timeout_seconds, passwd=password)
        try:
            client.connect(login=True)
        except WrongPassword as exc:
            client.close()
            raise AuthError(f"Authentication rejected by {address}") from exc
        except (EmptyResponse, SessionTimeout) as exc:
            client.close()
            raise TransportError(f"{type(exc).__name__} while logging in to {address}") from exc
        except (OSError, ValueError) as exc:
            client.close()
            raise TransportError(f"Unable to reach {address}: {exc}") from exc

        self.logger.info("transport_opened", extra={"host": host, "port": port})
        return SourceRconConnection(client=client, address=address)
