"""
Wire structures exchanged with the chat server.

Both are flat JSON objects with fixed field names:
  Message  → {"plugin": ..., "content": ..., "clientId": ...}   (outbound)
  Response → {"name": ..., "content": ...}                      (inbound)
"""

import json
from dataclasses import dataclass

from .exceptions import DecodeError


@dataclass(frozen=True)
class Message:
    plugin: str
    content: str
    client_id: str

    def to_dict(self) -> dict:
        return {"plugin": self.plugin, "content": self.content, "clientId": self.client_id}


@dataclass(frozen=True)
class Response:
    name: str
    content: str


def encode_message(msg: Message) -> bytes:
    """Serialize a Message to a UTF-8 JSON body."""
    return json.dumps(msg.to_dict()).encode("utf-8")


def _load_object(body) -> dict:
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"body is not valid UTF-8: {e}") from e
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodeError(f"body is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _str_field(data, key):
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"field {key!r} must be a string")
    return value


def decode_response(body) -> Response:
    """Decode a server body into a Response. Raises DecodeError."""
    data = _load_object(body)
    return Response(name=_str_field(data, "name"), content=_str_field(data, "content"))


def decode_message(body) -> Message:
    """Decode a JSON body into a Message. Raises DecodeError."""
    data = _load_object(body)
    return Message(
        plugin=_str_field(data, "plugin"),
        content=_str_field(data, "content"),
        client_id=_str_field(data, "clientId"),
    )
