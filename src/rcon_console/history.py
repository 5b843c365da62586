"""Bounded history of submitted console lines."""

from __future__ import annotations

from collections import deque
from typing import Iterable

from prompt_toolkit.history import History


class CommandHistory:
    """Oldest-first command history with a navigation cursor.

    The cursor starts one past the newest entry (an empty input line);
    ``backwards`` walks towards older entries and ``forwards`` back again.
    """

    def __init__(self, max_entries: int = 500) -> None:
        self._entries: deque[str] = deque(maxlen=max_entries)
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, command: str) -> None:
        if command.strip() and (not self._entries or self._entries[-1] != command):
            self._entries.append(command)
        self._cursor = len(self._entries)

    def get(self, index: int) -> str | None:
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def backwards(self) -> str | None:
        if self._cursor == 0:
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def forwards(self) -> str | None:
        if self._cursor >= len(self._entries):
            return None
        self._cursor += 1
        return self.get(self._cursor)

    def entries(self) -> list[str]:
        return list(self._entries)


class PromptHistory(History):
    """Backs prompt_toolkit's up/down navigation with a ``CommandHistory``."""

    def __init__(self, history: CommandHistory) -> None:
        self.command_history = history
        super().__init__()

    def load_history_strings(self) -> Iterable[str]:
        # prompt_toolkit expects newest first.
        return reversed(self.command_history.entries())

    def store_string(self, string: str) -> None:
        self.command_history.push(string)
