"""
Input tokenizer — one line of user input → tagged Command.

  "Hi there"            → BROADCAST  /broadcast  body="Hi there"
  "/private ABC hello"  → NAMED      /private    parameter="ABC"  body="ABC hello"
  "/users   "           → NAMED      /users      parameter=None   body=""
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import COMMAND_PREFIX, DEFAULT_PLUGIN
from .wire import Message


class CommandKind(str, Enum):
    BROADCAST = "broadcast"
    NAMED = "named"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    plugin: str
    parameter: Optional[str] = None
    body: str = ""

    def to_message(self, client_id: str) -> Message:
        """Message for the server; the parameter, when present, replaces our own id."""
        return Message(
            plugin=self.plugin,
            content=self.body,
            client_id=self.parameter or client_id,
        )


def parse_command(line: str, prefix: str = COMMAND_PREFIX) -> Command:
    text = line.rstrip()
    if not prefix:
        raise ValueError("command prefix must be non-empty")

    stripped = text.lstrip()
    if not stripped.startswith(prefix):
        return Command(kind=CommandKind.BROADCAST, plugin=DEFAULT_PLUGIN, body=text)

    parts = stripped.split(None, 1)
    plugin = parts[0]
    rest = parts[1] if len(parts) > 1 else ""
    parameter = rest.split(None, 1)[0] if rest else None
    return Command(kind=CommandKind.NAMED, plugin=plugin, parameter=parameter, body=rest)
