"""Where ``exec`` command lists are read from."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


def cfg_path(name: str) -> str:
    return f"cfg/{name}.cfg"


class FileStore(Protocol):
    def read_text(self, path: str) -> str:
        """Return the file's text, raising ``FileNotFoundError`` when absent."""


@dataclass(slots=True)
class LocalFileStore(FileStore):
    """Reads ``cfg/<name>.cfg`` paths relative to ``root``.

    ``cfg_dir`` replaces the leading ``cfg`` directory so the command lists can
    live anywhere on disk.
    """

    root: Path = Path(".")
    cfg_dir: str = "cfg"

    def read_text(self, path: str) -> str:
        relative = Path(path)
        if relative.parts and relative.parts[0] == "cfg":
            relative = Path(self.cfg_dir, *relative.parts[1:])
        return (self.root / relative).read_text(encoding="utf-8")
