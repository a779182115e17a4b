"""trello_mcp package exports."""

from .core import (
    AttachmentError,
    ConfigError,
    Dispatcher,
    ErrorKind,
    RequestDescriptor,
    RequestPolicy,
    ToolSpec,
    ToolValidationError,
    TrelloAPIError,
    TrelloClient,
    TrelloMCPError,
    TrelloSettings,
    UnknownToolError,
    build_registry,
    load_settings,
)

__version__ = "1.0.0"

__all__ = [
    # Client
    "TrelloClient",
    "RequestDescriptor",
    "RequestPolicy",
    # Config
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
]
