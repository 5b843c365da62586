"""Interactive console: prompt loop, tick pulse and event rendering."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.table import Table

from rcon_console.completion import CatalogCompleter, CommandCatalog
from rcon_console.errors import RconConsoleError
from rcon_console.events import Connected, ErrorReported, Event, Inserted
from rcon_console.history import CommandHistory, PromptHistory
from rcon_console.models import Status
from rcon_console.session import SessionManager
from rcon_console.telemetry import LoggingTelemetry, Telemetry

EXIT_WORDS = frozenset({"quit", "exit"})


def render_event(console: Console, event: Event) -> None:
    if isinstance(event, Connected):
        if event.connected:
            console.print("[green]Connected[/green]")
        else:
            console.print("[yellow]Disconnected[/yellow]")
    elif isinstance(event, Inserted):
        console.print(event.text, markup=False, highlight=False)
    elif isinstance(event, ErrorReported):
        console.print(f"Error: {event.message}", style="red", markup=False)
    else:
        raise TypeError(f"Unhandled event: {event!r}")


def status_table(status: Status) -> Table:
    title = status.server_name or "unknown server"
    if status.map_name:
        title = f"{title} ({status.map_name})"
    table = Table(title=title)
    for column in ("id", "name", "time", "ping", "loss", "state", "rate", "address"):
        table.add_column(column)
    for player in status.players:
        table.add_row(
            str(player.id),
            player.name,
            player.connect_time,
            str(player.ping),
            str(player.loss),
            player.state,
            str(player.rate),
            player.address,
        )
    return table


class ConsoleApp:
    """Feeds typed lines and tick pulses into a ``SessionManager`` and prints its events."""

    def __init__(
        self,
        session: SessionManager,
        events: asyncio.Queue[Event],
        *,
        tick_seconds: float = 0.25,
        catalog: CommandCatalog | None = None,
        history: CommandHistory | None = None,
        console: Console | None = None,
        telemetry: Telemetry | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._session = session
        self._events = events
        self._tick_seconds = tick_seconds
        self._catalog = catalog or CommandCatalog()
        self._history = history or CommandHistory()
        self._console = console or Console()
        self._telemetry = telemetry or LoggingTelemetry()
        self._logger = logger or logging.getLogger("rcon_console.cli")
        self.connected = session.is_connected

    async def run(self) -> None:
        prompt = PromptSession(
            history=PromptHistory(self._history),
            completer=CatalogCompleter(self._catalog),
            complete_while_typing=True,
        )
        tasks = [
            asyncio.create_task(self._tick_loop(), name="console-ticker"),
            asyncio.create_task(self._render_loop(), name="console-renderer"),
        ]
        self._console.print("Connect with: connect <ip>:<port> <password>   (quit to leave)", style="dim")
        try:
            with patch_stdout():
                while True:
                    try:
                        text = await prompt.prompt_async(self._prompt_text)
                    except (EOFError, KeyboardInterrupt):
                        break
                    if text.strip() in EXIT_WORDS:
                        break
                    if not text.strip():
                        continue
                    await self.submit(text)
        finally:
            self._session.disconnect()
            for task in tasks:
                task.cancel()
            for task in tasks:
                with contextlib.suppress(asyncio.CancelledError):
                    await task
            self.drain()

    async def submit(self, text: str) -> None:
        self._telemetry.emit("command_submitted", {"command": text})
        try:
            await self._session.dispatch(text)
        except RconConsoleError as exc:
            # Already reported through an ErrorReported event.
            self._logger.debug("dispatch_failed", extra={"command": text, "error": str(exc)})

    def drain(self) -> int:
        """Render every queued event without waiting; returns how many were shown."""
        shown = 0
        while True:
            try:
                event = self._events.get_nowait()
            except asyncio.QueueEmpty:
                return shown
            self._show(event)
            shown += 1

    def _prompt_text(self) -> str:
        return f"{self._session.address}> " if self.connected else "(disconnected)> "

    def _show(self, event: Event) -> None:
        if isinstance(event, Connected):
            self.connected = event.connected
        render_event(self._console, event)

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self._tick_seconds)
            try:
                await self._session.on_tick()
            except Exception:  # noqa: BLE001 - the pulse must outlive a bad status answer.
                self._logger.exception("tick_failed", extra={"tick": self._session.tick_count})

    async def _render_loop(self) -> None:
        while True:
            self._show(await self._events.get())
