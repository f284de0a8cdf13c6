"""Exceptions raised by the chat client."""


class ChatError(Exception):
    """Base exception for chat client errors."""
    pass


class TransportError(ChatError):
    """Network failure or unexpected HTTP status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ChatError):
    """Payload could not be decoded into a wire structure."""
    pass


class RegistrationError(ChatError):
    """Registration was attempted on a bad path or returned no token."""
    pass


class QueueClosed(ChatError):
    """Push attempted on a closed output queue."""
    pass
