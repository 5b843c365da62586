from pathlib import Path

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from rcon_console.completion import CatalogCompleter, CommandCatalog, CommandSpec, parse_command_line
from rcon_console.errors import ArgumentError


def test_catalog_contains_meta_commands() -> None:
    catalog = CommandCatalog()

    assert catalog.suggestions("", 10) == ["connect", "disconnect", "exec"]
    assert catalog.get("exec").flags == ["<file>"]


def test_load_metadata_file(tmp_path: Path) -> None:
    path = tmp_path / "commands.txt"
    path.write_text(
        "# server commands\n"
        "mp_restartgame$Restart the match$<seconds>\n"
        "mp_warmup_end$End warmup\n"
        "\n"
        "mp_maxrounds$Maximum rounds$<rounds> -force\n",
        encoding="utf-8",
    )
    catalog = CommandCatalog()

    assert catalog.load(path) == 3
    assert catalog.suggestions("mp_", 2) == ["mp_restartgame", "mp_warmup_end"]
    assert catalog.suggestion("mp_m") == "mp_maxrounds"
    assert catalog.get("mp_maxrounds").flags == ["<rounds>", "-force"]
    assert catalog.suggestion("sv_") is None


def test_malformed_metadata_line() -> None:
    with pytest.raises(ArgumentError, match="line 4"):
        parse_command_line("just_a_name", line_number=4)


def test_duplicate_names_are_ignored() -> None:
    catalog = CommandCatalog([CommandSpec("say", "first")])
    catalog.add(CommandSpec("say", "second"))

    assert len(catalog) == 1
    assert catalog.get("say").description == "first"


def test_completer_only_completes_first_word() -> None:
    completer = CatalogCompleter(CommandCatalog())

    first = list(completer.get_completions(Document("dis"), CompleteEvent()))
    later = list(completer.get_completions(Document("connect dis"), CompleteEvent()))

    assert [completion.text for completion in first] == ["disconnect"]
    assert first[0].start_position == -3
    assert later == []
