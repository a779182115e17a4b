"""Core domain surface for trello-mcp (transport-agnostic)."""

from .cache import CacheEntry, ResponseCache
from .client import (
    AttachmentData,
    RequestDescriptor,
    RequestPolicy,
    TrelloClient,
)
from .config import TRELLO_BASE_URL, TrelloSettings, load_settings
from .envelope import ToolResult, failure_envelope, success_envelope
from .errors import (
    AttachmentError,
    ConfigError,
    ErrorKind,
    ToolValidationError,
    TrelloAPIError,
    TrelloMCPError,
    UnknownToolError,
)
from .registry import Dispatcher, ToolSpec, build_registry, discover_tool_modules

__all__ = [
    # Client
    "TrelloClient",
    "RequestDescriptor",
    "RequestPolicy",
    "AttachmentData",
    "ResponseCache",
    "CacheEntry",
    # Config
    "TRELLO_BASE_URL",
    "TrelloSettings",
    "load_settings",
    # Exceptions
    "ErrorKind",
    "TrelloMCPError",
    "ToolValidationError",
    "UnknownToolError",
    "TrelloAPIError",
    "AttachmentError",
    "ConfigError",
    # Dispatch
    "ToolSpec",
    "Dispatcher",
    "build_registry",
    "discover_tool_modules",
    "ToolResult",
    "success_envelope",
    "failure_envelope",
]
