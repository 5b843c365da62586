"""Command metadata and prefix autocompletion for the console input line."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from rcon_console.errors import ArgumentError


@dataclass(slots=True)
class CommandSpec:
    name: str
    description: str = ""
    flags: list[str] = field(default_factory=list)


META_COMMANDS = (
    CommandSpec("connect", "Connect to a server", ["<address>", "[password]"]),
    CommandSpec("disconnect", "Close the current connection"),
    CommandSpec("exec", "Run every line of cfg/<file>.cfg", ["<file>"]),
)


def parse_command_line(line: str, *, line_number: int = 0) -> CommandSpec:
    """Parse one ``name$description[$flag flag ...]`` metadata line."""
    parts = line.split("$")
    if len(parts) < 2:
        raise ArgumentError(f"Malformed command metadata on line {line_number}: {line!r}")
    flags = parts[2].split() if len(parts) > 2 else []
    return CommandSpec(name=parts[0].strip(), description=parts[1].strip(), flags=flags)


class CommandCatalog:
    """Known command names in insertion order."""

    def __init__(self, commands: Iterable[CommandSpec] = META_COMMANDS) -> None:
        self._commands: list[CommandSpec] = []
        for command in commands:
            self.add(command)

    def __len__(self) -> int:
        return len(self._commands)

    def add(self, command: CommandSpec) -> None:
        if self.get(command.name) is None:
            self._commands.append(command)

    def load(self, path: str | Path) -> int:
        """Add every command described in ``path``; returns how many were read."""
        count = 0
        text = Path(path).read_text(encoding="utf-8")
        for number, line in enumerate(text.splitlines(), start=1):
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            self.add(parse_command_line(line, line_number=number))
            count += 1
        return count

    def suggestions(self, prefix: str, count: int = 5) -> list[str]:
        matches: list[str] = []
        for command in self._commands:
            if len(matches) >= count:
                break
            if command.name.startswith(prefix):
                matches.append(command.name)
        return matches

    def suggestion(self, prefix: str) -> str | None:
        matches = self.suggestions(prefix, count=1)
        return matches[0] if matches else None

    def get(self, name: str) -> CommandSpec | None:
        for command in self._commands:
            if command.name == name:
                return command
        return None


class CatalogCompleter(Completer):
    """Completes the first word of the input line from a ``CommandCatalog``."""

    def __init__(self, catalog: CommandCatalog, *, max_suggestions: int = 10) -> None:
        self.catalog = catalog
        self.max_suggestions = max_suggestions

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        text = document.text_before_cursor
        if " " in text:
            return
        for name in self.catalog.suggestions(text, self.max_suggestions):
            spec = self.catalog.get(name)
            yield Completion(name, start_position=-len(text), display_meta=spec.description if spec else "")
