"""Outbound notifications from the session to the presentation layer."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Connected:
    connected: bool


@dataclass(frozen=True, slots=True)
class Inserted:
    text: str


@dataclass(frozen=True, slots=True)
class ErrorReported:
    message: str


Event = Connected | Inserted | ErrorReported


class EventSink(Protocol):
    """Receives session events. Must never block the caller."""

    def emit(self, event: Event) -> None:
        """Deliver one event, best effort."""


class QueueEventSink:
    """Pushes events onto an unbounded FIFO read by the console."""

    def __init__(self, queue: asyncio.Queue[Event] | None = None, *, logger: logging.Logger | None = None) -> None:
        self.queue: asyncio.Queue[Event] = queue if queue is not None else asyncio.Queue()
        self._logger = logger or logging.getLogger("rcon_console.events")

    def emit(self, event: Event) -> None:
        try:
            self.queue.put_nowait(event)
        except Exception:  # noqa: BLE001 - delivery is fire-and-forget.
            self._logger.exception("event_delivery_failed", extra={"event": repr(event)})


class RecordingEventSink:
    """Keeps every emitted event in order; used by tests and one-shot commands."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, kind: type) -> list[Event]:
        return [event for event in self.events if isinstance(event, kind)]
