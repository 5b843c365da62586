"""Recovers server and player state from the text answer to ``status``.

The answer is positional rather than self-describing, so parsing is a small
state machine over the lines, top to bottom::

    ----- Status -----                      Seeking -> ServerInfo
    hostname  : My Server                   server name
    spawn     : 1                           spawn marker "[1"
    ---------spawngroups----                ServerInfo -> MapInfo
    loaded spawngroup(  1)  : SV:  [1: de_dust2 | main lump | mapload]
    ---------players--------                MapInfo -> PlayerList (+ header row)
      id     time ping loss      state   rate adr name
     2    00:26   40    0     active 786432 1.2.3.4:27005 'Player'
    #end                                    PlayerList -> Seeking

What counts as a separator, a hostname line or a map line is decided by a
``StatusLayout`` so other layouts can be plugged in without touching the
state machine.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from rcon_console.errors import StatusParseError
from rcon_console.models import Player, Status

PROBE_COMMAND = "status"

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF


class ParsingMode(str, Enum):
    SEEKING = "seeking"
    SERVER_INFO = "server_info"
    MAP_INFO = "map_info"
    PLAYER_LIST = "player_list"


class StatusLayout(Protocol):
    """Line classification rules for one status text layout."""

    initial_spawn_marker: str

    def is_separator(self, line: str) -> bool: ...

    def is_end(self, line: str) -> bool: ...

    def server_name(self, line: str) -> str | None: ...

    def spawn_marker(self, line: str) -> str | None: ...

    def map_name(self, line: str, spawn_marker: str) -> str | None: ...

    def parse_player(self, line: str) -> Player: ...


def _field_after_colon(line: str) -> str:
    return line.partition(":")[2].strip()


def _parse_int(token: str, *, name: str, maximum: int, line: str) -> int:
    try:
        value = int(token)
    except ValueError as exc:
        raise StatusParseError(f"{name} is not a number: {token!r}", line=line) from exc
    if not 0 <= value <= maximum:
        raise StatusParseError(f"{name} out of range: {value}", line=line)
    return value


def parse_player_row(line: str) -> Player:
    """Parse one row of the player table.

    The first five columns are fixed. The last token is the name; whatever sits
    between state and name is either an address and a numeric rate (in either
    order), a single ``<rate digit><address>`` token whose first character is
    dropped, or nothing.
    """
    tokens = line.split()
    if len(tokens) < 6:
        raise StatusParseError(f"expected at least 6 columns, got {len(tokens)}", line=line)

    player = Player(
        id=_parse_int(tokens[0], name="id", maximum=_U16_MAX, line=line),
        connect_time=tokens[1],
        ping=_parse_int(tokens[2], name="ping", maximum=_U16_MAX, line=line),
        loss=_parse_int(tokens[3], name="loss", maximum=_U16_MAX, line=line),
        state=tokens[4],
        name=tokens[-1],
    )
    middle = tokens[5:-1]
    if len(middle) == 2:
        address, rate = middle
        if not rate.isdigit() and address.isdigit():
            address, rate = rate, address
        player.address = address
        player.rate = _parse_int(rate, name="rate", maximum=_U32_MAX, line=line)
    elif len(middle) == 1:
        player.address = middle[0][1:]
    elif middle:
        raise StatusParseError(f"unexpected columns before name: {middle}", line=line)
    return player


class SourceStatusLayout:
    """Layout of the Source 2 dedicated server ``status`` command."""

    initial_spawn_marker = "[0"

    def is_separator(self, line: str) -> bool:
        return line.startswith("-")

    def is_end(self, line: str) -> bool:
        return line.startswith("#end")

    def server_name(self, line: str) -> str | None:
        if line.startswith("hostname"):
            return _field_after_colon(line)
        return None

    def spawn_marker(self, line: str) -> str | None:
        if line.startswith("spawn"):
            return "[" + _field_after_colon(line)
        return None

    def map_name(self, line: str, spawn_marker: str) -> str | None:
        if spawn_marker not in line:
            return None
        fields = line.split(":")
        if len(fields) < 4:
            raise StatusParseError("map line has fewer than 4 fields", line=line)
        words = fields[3].split()
        return words[0] if words else ""

    def parse_player(self, line: str) -> Player:
        return parse_player_row(line)


class StatusParser:
    """Applies one complete ``status`` answer to a ``Status`` snapshot.

    Players from the answer replace the snapshot's list unless ``accumulate``
    is set, in which case they are appended to it. Rows that cannot be parsed
    are logged and skipped.
    """

    def __init__(
        self,
        layout: StatusLayout | None = None,
        *,
        accumulate: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._layout = layout or SourceStatusLayout()
        self._accumulate = accumulate
        self._logger = logger or logging.getLogger("rcon_console.status")

    def update(self, status: Status, text: str) -> Status:
        layout = self._layout
        mode = ParsingMode.SEEKING
        spawn = layout.initial_spawn_marker
        players: list[Player] = []
        skip_next = False

        for raw in text.split("\n"):
            line = raw.rstrip("\r")
            if skip_next:
                skip_next = False
                continue

            if mode is ParsingMode.SEEKING:
                if layout.is_separator(line):
                    mode = ParsingMode.SERVER_INFO
            elif mode is ParsingMode.SERVER_INFO:
                name = layout.server_name(line)
                marker = layout.spawn_marker(line) if name is None else None
                if name is not None:
                    status.server_name = name
                elif marker is not None:
                    spawn = marker
                elif layout.is_separator(line):
                    mode = ParsingMode.MAP_INFO
            elif mode is ParsingMode.MAP_INFO:
                try:
                    map_name = layout.map_name(line, spawn)
                except StatusParseError as exc:
                    self._skip(exc)
                    continue
                if map_name is not None:
                    status.map_name = map_name
                elif layout.is_separator(line):
                    mode = ParsingMode.PLAYER_LIST
                    # column header row
                    skip_next = True
            elif layout.is_end(line):
                mode = ParsingMode.SEEKING
            elif line.strip():
                try:
                    players.append(layout.parse_player(line))
                except StatusParseError as exc:
                    self._skip(exc)

        if self._accumulate:
            status.players.extend(players)
        else:
            status.players = players
        self._logger.debug(
            "status_updated",
            extra={"server_name": status.server_name, "map_name": status.map_name, "players": len(players)},
        )
        return status

    def _skip(self, exc: StatusParseError) -> None:
        self._logger.warning("status_row_skipped", extra={"reason": str(exc), "line": exc.line})
