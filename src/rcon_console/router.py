"""Classifies console input into local meta-commands and server commands."""

from __future__ import annotations

from dataclasses import dataclass

from rcon_console.errors import ArgumentError

NOT_ENOUGH_ARGUMENTS = "Not enough arguments"
TOO_MANY_ARGUMENTS = "Too many arguments"


@dataclass(frozen=True, slots=True)
class Connect:
    address: str
    password: str = ""


@dataclass(frozen=True, slots=True)
class Disconnect:
    pass


@dataclass(frozen=True, slots=True)
class Exec:
    file: str


@dataclass(frozen=True, slots=True)
class PassThrough:
    text: str


Command = Connect | Disconnect | Exec | PassThrough


class CommandRouter:
    """Splits input on single spaces and recognises ``connect``, ``disconnect`` and ``exec``.

    Anything else, including ``exec`` with more than one argument, is
    forwarded verbatim. Missing arguments, or too many for ``connect``, raise
    ``ArgumentError``.
    """

    def classify(self, text: str) -> Command:
        args = text.split(" ")
        keyword = args[0]

        if keyword == "connect":
            if len(args) < 2:
                raise ArgumentError(NOT_ENOUGH_ARGUMENTS)
            if len(args) == 2:
                return Connect(address=args[1])
            if len(args) == 3:
                return Connect(address=args[1], password=args[2])
            raise ArgumentError(TOO_MANY_ARGUMENTS)

        if keyword == "disconnect":
            return Disconnect()

        if keyword == "exec":
            if len(args) < 2:
                raise ArgumentError(NOT_ENOUGH_ARGUMENTS)
            if len(args) == 2:
                return Exec(file=args[1])

        return PassThrough(text=text)
