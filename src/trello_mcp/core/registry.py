from __future__ import annotations

import importlib
import logging
import pkgutil
from dataclasses import dataclass
from types import MappingProxyType, ModuleType
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
)

from pydantic import BaseModel, ValidationError

from .client import TrelloClient
from .envelope import failure_envelope, success_envelope
from .errors import (
    ErrorKind,
    ToolValidationError,
    TrelloMCPError,
    UnknownToolError,
)

log = logging.getLogger("trello_mcp.core.registry")

GENERIC_FAILURE_MESSAGE = "An unexpected error occurred"

Handler = Callable[[TrelloClient, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Handler

    def input_schema(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema(by_alias=True)


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(
    package_name: str = "trello_mcp.core.tools",
) -> List[ModuleType]:
    """Import all modules under the given tools package, skipping failures."""
    modules: List[ModuleType] = []
    base_pkg = importlib.import_module(package_name)

    for finder in pkgutil.iter_modules(base_pkg.__path__, base_pkg.__name__ + "."):
        name = finder.name
        if name.rsplit(".", 1)[-1].startswith("_"):
            continue
        try:
            module = importlib.import_module(name)
            modules.append(module)
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", name, exc)
            continue

    return modules


def iter_tool_specs(module: ModuleType) -> Iterable[ToolSpec]:
    """Yield the ToolSpec entries a module declares in its TOOLS tuple."""
    for spec in getattr(module, "TOOLS", ()):
        if not isinstance(spec, ToolSpec):
            log.debug("Skipping non-ToolSpec entry in %s: %r", module.__name__, spec)
            continue
        yield spec


def build_registry(
    modules: Optional[List[ModuleType]] = None,
) -> Mapping[str, ToolSpec]:
    """Collect tool specs into an immutable name -> spec mapping."""
    modules = modules if modules is not None else discover_tool_modules()
    table: Dict[str, ToolSpec] = {}

    for module in modules:
        for spec in iter_tool_specs(module):
            if spec.name in table:
                raise ValueError(f"Duplicate tool name detected: {spec.name}")
            table[spec.name] = spec
            log.debug("Registered tool: %s (%s)", spec.name, module.__name__)

    return MappingProxyType(table)


# --- Dispatch --------------------------------------------------------------- #


def _error_details(exc: ValidationError) -> List[Dict[str, Any]]:
    # ctx may carry exception objects; keep only JSON-friendly keys
    return [
        {
            "path": [str(p) for p in err.get("loc", ())],
            "message": err.get("msg", ""),
            "code": err.get("type", ""),
        }
        for err in exc.errors(include_url=False)
    ]


class Dispatcher:
    """Validates arguments, runs the handler, and always returns an envelope."""

    def __init__(self, registry: Mapping[str, ToolSpec], client: TrelloClient):
        self.registry = registry
        self.client = client

    def tool_definitions(self) -> List[Tuple[str, str, Dict[str, Any]]]:
        return [
            (spec.name, spec.description, spec.input_schema())
            for spec in self.registry.values()
        ]

    async def dispatch(
        self, name: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        try:
            spec = self.registry.get(name)
            if spec is None:
                raise UnknownToolError(name)
            try:
                args = spec.input_model.model_validate(
                    arguments if arguments is not None else {}
                )
            except ValidationError as exc:
                raise ToolValidationError(_error_details(exc)) from exc
            result = await spec.handler(self.client, args)
        except TrelloMCPError as exc:
            return self._failure(name, exc)
        except Exception:
            log.exception("tool.crashed", extra={"tool": name})
            return failure_envelope(GENERIC_FAILURE_MESSAGE)

        return success_envelope(result)

    @staticmethod
    def _failure(name: str, exc: TrelloMCPError) -> Dict[str, Any]:
        log.warning(
            "tool.failed",
            extra={
                "tool": name,
                "status": getattr(exc, "status_code", None),
                "error_type": exc.kind.value,
            },
        )
        if exc.kind is ErrorKind.VALIDATION:
            return failure_envelope(exc.message, exc.details or [])
        if exc.kind is ErrorKind.UNKNOWN_TOOL:
            return failure_envelope(exc.message)
        if exc.kind is ErrorKind.REMOTE_API:
            return failure_envelope(str(exc))
        return failure_envelope(GENERIC_FAILURE_MESSAGE)


__all__ = [
    "Dispatcher",
    "GENERIC_FAILURE_MESSAGE",
    "ToolSpec",
    "build_registry",
    "discover_tool_modules",
    "iter_tool_specs",
]
