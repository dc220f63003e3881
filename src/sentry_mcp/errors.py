"""Errors raised while serving tool calls."""

from __future__ import annotations

from typing import Iterable, Optional


class SentryMcpError(Exception):
    pass


class ToolNotFoundError(SentryMcpError):
    def __init__(self, name: Optional[str]) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class InvalidArgumentsError(SentryMcpError):
    @classmethod
    def missing(cls, tool_name: str, fields: Iterable[str]) -> "InvalidArgumentsError":
        names = ", ".join(fields)
        return cls(f"Invalid arguments for {tool_name} - requires {names}")


class UpstreamError(SentryMcpError):
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class NotFoundError(SentryMcpError):
    pass
