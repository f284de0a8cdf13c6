import pytest

from chat_core.commands import CommandKind, parse_command

from conftest import CLIENT_ID


def test_plain_text_is_broadcast():
    cmd = parse_command("Hi")
    assert cmd.kind is CommandKind.BROADCAST
    assert cmd.plugin == "/broadcast"
    assert cmd.parameter is None
    assert cmd.body == "Hi"


def test_named_command_keeps_prefix():
    cmd = parse_command("/help\n")
    assert cmd.kind is CommandKind.NAMED
    assert cmd.plugin == "/help"
    assert cmd.parameter is None


def test_trailing_spaces_are_trimmed():
    cmd = parse_command("/users     ")
    assert cmd.plugin == "/users"
    assert cmd.parameter is None
    assert cmd.body == ""


def test_private_extracts_target():
    cmd = parse_command("/private ABCDEFGHIJ")
    assert cmd.plugin == "/private"
    assert cmd.parameter == "ABCDEFGHIJ"


def test_parameter_stops_at_whitespace():
    cmd = parse_command("/private ABCDEFGHIJ how are you\n")
    assert cmd.parameter == "ABCDEFGHIJ"
    assert cmd.body == "ABCDEFGHIJ how are you"


@pytest.mark.parametrize("line,client_id", [
    ("Hi", CLIENT_ID),
    ("/users", CLIENT_ID),
    ("/private ABCDEFGHIJ hello", "ABCDEFGHIJ"),
])
def test_to_message_client_id(line, client_id):
    msg = parse_command(line).to_message(CLIENT_ID)
    assert msg.client_id == client_id


def test_prefix_is_configurable():
    assert parse_command("!users", prefix="!").plugin == "!users"
    assert parse_command("/users", prefix="!").kind is CommandKind.BROADCAST
