from rcon_console.history import CommandHistory, PromptHistory


def test_history_navigation() -> None:
    history = CommandHistory()
    for command in ("status", "users", "say hi"):
        history.push(command)

    assert history.backwards() == "say hi"
    assert history.backwards() == "users"
    assert history.backwards() == "status"
    assert history.backwards() is None
    assert history.forwards() == "users"
    assert history.forwards() == "say hi"
    assert history.forwards() is None
    assert history.forwards() is None


def test_push_skips_blank_and_repeated_lines() -> None:
    history = CommandHistory()
    history.push("status")
    history.push("status")
    history.push("   ")

    assert history.entries() == ["status"]


def test_history_is_bounded() -> None:
    history = CommandHistory(max_entries=2)
    for command in ("a", "b", "c"):
        history.push(command)

    assert history.entries() == ["b", "c"]
    assert history.get(0) == "b"
    assert history.get(5) is None


def test_prompt_history_feeds_command_history() -> None:
    history = CommandHistory()
    history.push("status")
    prompt_history = PromptHistory(history)

    prompt_history.store_string("users")

    assert history.entries() == ["status", "users"]
    assert list(prompt_history.load_history_strings()) == ["users", "status"]
