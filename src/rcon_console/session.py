"""Session orchestration for one authenticated RCON connection."""

from __future__ import annotations

import asyncio
import logging

from rcon_console.adapters.transport import Connection, Transport
from rcon_console.errors import ArgumentError, AuthError, ProbeTimeout, RconConsoleError, TransportError
from rcon_console.events import Connected, ErrorReported, EventSink, Inserted, QueueEventSink
from rcon_console.files import FileStore, LocalFileStore, cfg_path
from rcon_console.models import Status
from rcon_console.router import CommandRouter, Connect, Disconnect, Exec, PassThrough
from rcon_console.status import PROBE_COMMAND, StatusParser

NO_ADDRESS = "No address specified"
NO_PASSWORD = "No password specified"
NOT_CONNECTED = "Not connected"


class SessionManager:
    """Owns the transport, the tick counter and the status snapshot.

    Only one request is ever outstanding on the connection: user commands and
    the periodic ``status`` poll are serialized through a single lock. A poll
    that fails or times out drops the connection and emits ``Connected(False)``;
    nothing reconnects automatically.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        events: EventSink | None = None,
        files: FileStore | None = None,
        parser: StatusParser | None = None,
        router: CommandRouter | None = None,
        poll_interval: int = 20,
        probe_timeout_seconds: float = 5.0,
        logger: logging.Logger | None = None,
    ) -> None:
        if poll_interval < 1:
            raise ValueError("poll_interval must be at least 1")

        self._transport = transport
        self._events = events or QueueEventSink()
        self._files = files or LocalFileStore()
        self._parser = parser or StatusParser()
        self._router = router or CommandRouter()
        self.poll_interval = poll_interval
        self.probe_timeout_seconds = probe_timeout_seconds
        self._logger = logger or logging.getLogger("rcon_console.session")

        self.address = ""
        self.password = ""
        self.tick_count = 0
        self.status = Status()
        self._connection: Connection | None = None
        self._request_lock = asyncio.Lock()

    @property
    def events(self) -> EventSink:
        return self._events

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def connect(self, address: str, password: str) -> None:
        """Open a connection with the given credentials, replacing any open one.

        If the open fails while another connection is still up, the credentials
        of that connection are kept so they keep describing where commands go.
        """
        previous_credentials = (self.address, self.password)
        self.address = address
        self.password = password
        if not address or not password:
            self._keep_open_credentials(previous_credentials)
            raise self._report(AuthError(NO_ADDRESS if not address else NO_PASSWORD))

        self._logger.info("session_connecting", extra={"address": address})
        async with self._request_lock:
            try:
                connection = await asyncio.to_thread(self._transport.open, address, password)
            except RconConsoleError as exc:
                self._connect_failed(exc, previous_credentials)
                raise
            except Exception as exc:  # noqa: BLE001 - transports may leak library errors.
                error = TransportError(f"Unable to reach {address}: {exc}")
                self._connect_failed(error, previous_credentials)
                raise error from exc

            previous, self._connection = self._connection, connection

        if previous is not None:
            self._close(previous)
        self._logger.info("session_connected", extra={"address": address})
        self._events.emit(Connected(True))

    def disconnect(self) -> None:
        """Drop the connection, if any. Always emits ``Connected(False)``."""
        self._drop_connection()
        self._logger.info("session_disconnected", extra={"address": self.address})
        self._events.emit(Connected(False))

    async def dispatch(self, text: str) -> None:
        """Run one line of user input."""
        try:
            command = self._router.classify(text)
        except ArgumentError as exc:
            self._report(exc)
            return

        if isinstance(command, Connect):
            await self.connect(command.address, command.password)
        elif isinstance(command, Disconnect):
            self.disconnect()
        elif isinstance(command, Exec):
            await self.run_file(command.file)
        elif isinstance(command, PassThrough):
            await self.send_command(command.text)
        else:
            raise TypeError(f"Unhandled command: {command!r}")

    async def send_command(self, text: str) -> str:
        """Send ``text`` to the server and return its response."""
        if self._connection is None:
            if not self.address:
                raise self._report(AuthError(NO_ADDRESS))
            if not self.password:
                raise self._report(AuthError(NO_PASSWORD))
            raise self._report(TransportError(NOT_CONNECTED))

        self._logger.info("command_sent", extra={"command": text})
        try:
            response = await self._request(text)
        except TransportError as exc:
            raise self._report(exc)

        self._logger.info("command_succeeded", extra={"command": text, "response": response})
        self._events.emit(Inserted(response))
        return response

    async def run_file(self, name: str) -> list[str]:
        """Send every non-blank line of ``cfg/<name>.cfg`` in order, stopping at the first failure."""
        path = cfg_path(name)
        try:
            contents = self._files.read_text(path)
        except OSError as exc:
            error = TransportError(f"Unable to read {path}")
            self._report(error)
            raise error from exc

        self._logger.info("exec_started", extra={"file": path})
        responses: list[str] = []
        for line in contents.splitlines():
            if not line.strip():
                continue
            try:
                responses.append(await self.send_command(line))
            except RconConsoleError:
                self._logger.warning("exec_halted", extra={"file": path, "completed": len(responses), "line": line})
                raise
        return responses

    async def on_tick(self) -> bool:
        """Advance the tick counter; poll the server when the interval elapses.

        Returns whether a poll was attempted.
        """
        self.tick_count += 1
        if self.tick_count % self.poll_interval != 0 or self._connection is None:
            return False

        try:
            response = await self._request(PROBE_COMMAND, timeout=self.probe_timeout_seconds)
        except RconConsoleError as exc:
            self._logger.warning(
                "probe_failed",
                extra={"address": self.address, "tick": self.tick_count, "reason": f"{type(exc).__name__}: {exc}"},
            )
            if self._connection is not None:
                self._drop_connection()
                self._events.emit(Connected(False))
            return True

        self._parser.update(self.status, response)
        return True

    async def _request(self, command: str, *, timeout: float | None = None) -> str:
        # The lock is the single-request invariant: nothing else touches the
        # connection while it is held.
        async with self._request_lock:
            connection = self._connection
            if connection is None:
                raise TransportError(NOT_CONNECTED)

            call = asyncio.to_thread(connection.execute, command)
            try:
                if timeout is None:
                    return await call
                try:
                    return await asyncio.wait_for(call, timeout=timeout)
                except asyncio.TimeoutError as exc:
                    raise ProbeTimeout(f"{command!r} timed out after {timeout}s") from exc
            except RconConsoleError:
                raise
            except Exception as exc:  # noqa: BLE001 - anything a peer can provoke ends the request, not the session.
                raise TransportError(f"{type(exc).__name__}: {exc}") from exc

    def _keep_open_credentials(self, previous_credentials: tuple[str, str]) -> None:
        if self._connection is not None:
            self.address, self.password = previous_credentials

    def _connect_failed(self, error: RconConsoleError, previous_credentials: tuple[str, str]) -> None:
        self._keep_open_credentials(previous_credentials)
        self._report_message(f"Failed to connect: {error}")

    def _drop_connection(self) -> None:
        connection, self._connection = self._connection, None
        if connection is not None:
            self._close(connection)

    def _close(self, connection: Connection) -> None:
        try:
            connection.close()
        except (RconConsoleError, OSError):
            self._logger.warning("connection_close_failed", extra={"address": self.address}, exc_info=True)

    def _report(self, error: RconConsoleError) -> RconConsoleError:
        self._report_message(str(error))
        return error

    def _report_message(self, message: str) -> None:
        self._logger.error("error_reported", extra={"error": message})
        self._events.emit(ErrorReported(message))
