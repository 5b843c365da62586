from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class Player:
    id: int
    connect_time: str
    ping: int
    loss: int
    state: str
    rate: int = 0
    address: str = ""
    name: str = ""


@dataclass(slots=True)
class Status:
    server_name: str = ""
    map_name: str = ""
    players: list[Player] = field(default_factory=list)
