import pytest

from rcon_console.errors import ArgumentError
from rcon_console.router import CommandRouter, Connect, Disconnect, Exec, PassThrough


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("connect 1.2.3.4:27015", Connect(address="1.2.3.4:27015", password="")),
        ("connect 1.2.3.4:27015 hunter2", Connect(address="1.2.3.4:27015", password="hunter2")),
        ("disconnect", Disconnect()),
        ("disconnect please now", Disconnect()),
        ("exec autoexec", Exec(file="autoexec")),
        ("exec server warmup", PassThrough(text="exec server warmup")),
        ("say connect later", PassThrough(text="say connect later")),
        ("status", PassThrough(text="status")),
        ("", PassThrough(text="")),
    ],
)
def test_classify(text: str, expected) -> None:
    assert CommandRouter().classify(text) == expected


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("connect", "Not enough arguments"),
        ("connect a b c", "Too many arguments"),
        ("exec", "Not enough arguments"),
    ],
)
def test_arity_errors(text: str, message: str) -> None:
    with pytest.raises(ArgumentError) as excinfo:
        CommandRouter().classify(text)
    assert str(excinfo.value) == message


def test_keywords_are_case_sensitive() -> None:
    assert CommandRouter().classify("CONNECT host") == PassThrough(text="CONNECT host")
