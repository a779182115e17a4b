from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNKNOWN_TOOL = "unknown_tool"
    REMOTE_API = "remote_api"
    INTERNAL = "internal"


class TrelloMCPError(Exception):
    """Base error; every layer raises a subclass tagged with its kind."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ToolValidationError(TrelloMCPError):
    kind = ErrorKind.VALIDATION

    def __init__(self, details: List[Dict[str, Any]]):
        super().__init__("Invalid arguments for tool", details=details)


class UnknownToolError(TrelloMCPError):
    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class TrelloAPIError(TrelloMCPError):
    """A classified remote failure: non-2xx response, timeout or network error."""

    kind = ErrorKind.REMOTE_API

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        method: Optional[str] = None,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.status_code = status_code or 500
        self.method = method
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        return f"Trello API error ({self.status_code}): {self.message}"


class AttachmentError(TrelloAPIError):
    """Attachment URL or local destination problems."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message, status_code=400, cause=cause)

    def __str__(self) -> str:
        return self.message


class ConfigError(ValueError):
    """Raised at startup when required settings are missing or malformed."""


__all__ = [
    "ErrorKind",
    "TrelloMCPError",
    "ToolValidationError",
    "UnknownToolError",
    "TrelloAPIError",
    "AttachmentError",
    "ConfigError",
]
