"""Exception hierarchy shared by the client, the decoder and the REPL."""

from __future__ import annotations

from typing import Optional


class ChatError(Exception):
    """Base class for every error raised by fwchat."""


class ConfigError(ChatError):
    """Required credentials are missing or still set to a placeholder."""


class RequestError(ChatError):
    """The completion endpoint answered with a non-success status."""

    def __init__(self, status_code: int, reason: str = "", body: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"API Error: {status_code} {reason}\n{body}".rstrip())


class ProtocolError(ChatError):
    """The transport produced no readable response body."""


class DecodeError(ChatError):
    """A single server-sent event payload could not be parsed."""


class ToolArgumentError(ChatError):
    """A tool call's argument payload is not a JSON object."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        super().__init__(f"Invalid tool arguments ({reason}): {raw!r}")


class UnknownCapability(ChatError):
    """The model asked for a tool that is not registered."""

    def __init__(self, name: Optional[str]):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class RoundLimitError(ChatError):
    """A turn needed more streaming rounds than the configured ceiling."""
