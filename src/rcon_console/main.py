"""CLI startup entrypoint for the RCON console."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich import print
from rich.console import Console

from rcon_console.adapters import SourceRconTransport
from rcon_console.cli import ConsoleApp, render_event, status_table
from rcon_console.completion import CommandCatalog
from rcon_console.config import settings
from rcon_console.errors import RconConsoleError
from rcon_console.events import EventSink, QueueEventSink, RecordingEventSink
from rcon_console.files import LocalFileStore
from rcon_console.history import CommandHistory
from rcon_console.session import SessionManager
from rcon_console.status import PROBE_COMMAND, StatusParser
from rcon_console.telemetry import configure_logging

app = typer.Typer(help="Terminal client for administering game servers over RCON")


@app.callback()
def _bootstrap() -> None:
    configure_logging(settings.log_level, settings.log_file)


def _build_transport() -> SourceRconTransport:
    return SourceRconTransport(
        default_port=settings.default_port,
        timeout_seconds=settings.socket_timeout_seconds,
    )


def _build_session(events: EventSink) -> SessionManager:
    return SessionManager(
        _build_transport(),
        events=events,
        files=LocalFileStore(cfg_dir=settings.cfg_dir),
        poll_interval=settings.poll_interval,
        probe_timeout_seconds=settings.probe_timeout_seconds,
    )


def _build_catalog() -> CommandCatalog:
    catalog = CommandCatalog()
    if settings.commands_file and Path(settings.commands_file).exists():
        catalog.load(settings.commands_file)
    return catalog


def _print_events(sink: RecordingEventSink) -> None:
    console = Console()
    for event in sink.events:
        render_event(console, event)


@app.command()
def console(
    address: str = typer.Option(None, help="Server address host[:port]"),
    password: str = typer.Option(None, help="RCON password"),
) -> None:
    """Open the interactive console."""

    async def _run() -> None:
        sink = QueueEventSink()
        session = _build_session(sink)
        console_app = ConsoleApp(
            session,
            sink.queue,
            tick_seconds=settings.tick_seconds,
            catalog=_build_catalog(),
            history=CommandHistory(max_entries=settings.history_size),
        )
        target = address or settings.address
        if target:
            try:
                await session.connect(target, password or settings.password)
            except RconConsoleError:
                # shown by drain() below
                pass
            console_app.drain()
        await console_app.run()

    asyncio.run(_run())


@app.command()
def run(
    address: str,
    command: str,
    password: str = typer.Option(None, help="RCON password"),
) -> None:
    """Connect, send one command and print the response."""
    sink = RecordingEventSink()
    session = _build_session(sink)

    async def _run() -> None:
        await session.connect(address, password or settings.password)
        try:
            await session.send_command(command)
        finally:
            session.disconnect()

    try:
        asyncio.run(_run())
    except RconConsoleError:
        _print_events(sink)
        raise typer.Exit(code=1)
    _print_events(sink)


@app.command()
def status(
    address: str,
    password: str = typer.Option(None, help="RCON password"),
) -> None:
    """Poll the server once and print its parsed status."""
    sink = RecordingEventSink()
    session = _build_session(sink)

    async def _run() -> str:
        await session.connect(address, password or settings.password)
        try:
            return await session.send_command(PROBE_COMMAND)
        finally:
            session.disconnect()

    try:
        text = asyncio.run(_run())
    except RconConsoleError:
        _print_events(sink)
        raise typer.Exit(code=1)
    print(status_table(StatusParser().update(session.status, text)))


@app.command("exec")
def exec_file(
    address: str,
    name: str,
    password: str = typer.Option(None, help="RCON password"),
) -> None:
    """Connect and run every line of cfg/NAME.cfg."""
    sink = RecordingEventSink()
    session = _build_session(sink)

    async def _run() -> list[str]:
        await session.connect(address, password or settings.password)
        try:
            return await session.run_file(name)
        finally:
            session.disconnect()

    try:
        responses = asyncio.run(_run())
    except RconConsoleError:
        _print_events(sink)
        raise typer.Exit(code=1)
    _print_events(sink)
    print({"exec": name, "commands": len(responses)})


if __name__ == "__main__":
    app()
