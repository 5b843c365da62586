from __future__ import annotations

import pytest
from rcon.exceptions import EmptyResponse, WrongPassword

from rcon_console.adapters import source_rcon
from rcon_console.adapters.source_rcon import SourceRconTransport, split_address
from rcon_console.errors import AuthError, TransportError


class _FakeClient:
    instances: list["_FakeClient"] = []
    login_error: Exception | None = None
    run_error: Exception | None = None

    def __init__(self, host: str, port: int, *, timeout=None, passwd=None) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.passwd = passwd
        self.closed = False
        self.commands: list[str] = []
        _FakeClient.instances.append(self)

    def connect(self, login: bool = False) -> "_FakeClient":
        if login and self.login_error is not None:
            raise self.login_error
        return self

    def run(self, command: str) -> str:
        self.commands.append(command)
        if self.run_error is not None:
            raise self.run_error
        return f"ran {command}"

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch):
    _FakeClient.instances = []
    _FakeClient.login_error = None
    _FakeClient.run_error = None
    monkeypatch.setattr(source_rcon, "Client", _FakeClient)
    return _FakeClient


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ("10.0.0.1:27016", ("10.0.0.1", 27016)),
        ("play.example.org", ("play.example.org", 27015)),
        (" 10.0.0.1:27015 ", ("10.0.0.1", 27015)),
    ],
)
def test_split_address(address: str, expected: tuple[str, int]) -> None:
    assert split_address(address, 27015) == expected


@pytest.mark.parametrize("address", ["host:port", "host:0", ":27015", "host:70000"])
def test_split_address_rejects_bad_ports(address: str) -> None:
    with pytest.raises(TransportError):
        split_address(address, 27015)


def test_open_and_execute(fake_client) -> None:
    transport = SourceRconTransport(default_port=27015, timeout_seconds=3.0)

    connection = transport.open("10.0.0.1", "secret")

    client = fake_client.instances[0]
    assert (client.host, client.port, client.passwd, client.timeout) == ("10.0.0.1", 27015, "secret", 3.0)
    assert connection.execute("status") == "ran status"
    connection.close()
    assert client.closed


def test_wrong_password_is_auth_error(fake_client) -> None:
    fake_client.login_error = WrongPassword()

    with pytest.raises(AuthError):
        SourceRconTransport().open("10.0.0.1", "nope")

    assert fake_client.instances[0].closed


def test_unreachable_server_is_transport_error(fake_client) -> None:
    fake_client.login_error = ConnectionRefusedError("refused")

    with pytest.raises(TransportError, match="Unable to reach"):
        SourceRconTransport().open("10.0.0.1", "pw")


def test_execute_translates_library_errors(fake_client) -> None:
    connection = SourceRconTransport().open("10.0.0.1", "pw")

    fake_client.run_error = EmptyResponse()
    with pytest.raises(TransportError):
        connection.execute("status")

    fake_client.run_error = BrokenPipeError("gone")
    with pytest.raises(TransportError, match="gone"):
        connection.execute("status")


def test_dropped_login_closes_client(fake_client) -> None:
    fake_client.login_error = EmptyResponse()

    with pytest.raises(TransportError, match="EmptyResponse"):
        SourceRconTransport().open("10.0.0.1", "pw")

    assert fake_client.instances[0].closed


def test_undecodable_response_is_transport_error(fake_client) -> None:
    connection = SourceRconTransport().open("10.0.0.1", "pw")
    fake_client.run_error = UnicodeDecodeError("utf-8", b"\xff\xfe", 0, 1, "invalid start byte")

    with pytest.raises(TransportError, match="Unreadable response"):
        connection.execute("status")
