from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from trello_mcp.core.client import TrelloClient
from trello_mcp.core.config import TrelloSettings, load_settings
from trello_mcp.core.errors import ConfigError
from trello_mcp.core.logging import setup_logging
from trello_mcp.core.registry import Dispatcher, build_registry

SERVER_NAME = "trello-mcp-server"

log = logging.getLogger("trello_mcp.server")


def content_blocks(envelope: Dict[str, Any]) -> List[Any]:
    blocks: List[Any] = []
    for item in envelope.get("content", []):
        kind = item.get("type")
        if kind == "text":
            blocks.append(types.TextContent(type="text", text=item["text"]))
        elif kind == "image":
            blocks.append(
                types.ImageContent(
                    type="image", data=item["data"], mimeType=item["mimeType"]
                )
            )
        elif kind == "resource":
            blocks.append(
                types.EmbeddedResource(
                    type="resource",
                    resource=types.BlobResourceContents(**item["resource"]),
                )
            )
        else:
            log.warning("Dropping unsupported content block: %s", kind)
    return blocks


def failure_text(envelope: Dict[str, Any]) -> str:
    message = envelope.get("message", "")
    errors = envelope.get("errors")
    if errors:
        message = f"{message}\n{json.dumps(errors, indent=2)}"
    return message


def envelope_to_result(envelope: Dict[str, Any]) -> types.CallToolResult:
    if envelope.get("isError"):
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=failure_text(envelope))],
            isError=True,
        )
    return types.CallToolResult(
        content=content_blocks(envelope),
        structuredContent=envelope.get("structuredContent"),
        isError=False,
    )


def build_server(dispatcher: Dispatcher) -> Server:
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(name=name, description=description, inputSchema=schema)
            for name, description, schema in dispatcher.tool_definitions()
        ]

    # Arguments are validated by the dispatcher so failures share one envelope.
    @server.call_tool(validate_input=False)
    async def call_tool(
        name: str, arguments: Dict[str, Any]
    ) -> types.CallToolResult:
        envelope = await dispatcher.dispatch(name, arguments)
        return envelope_to_result(envelope)

    return server


# --- Entry point ----------------------------------------------------------- #


async def main(settings: TrelloSettings) -> None:
    registry = build_registry()
    async with TrelloClient.from_settings(settings) as client:
        server = build_server(Dispatcher(registry, client))
        log.info("Trello MCP server running on stdio (%d tools)", len(registry))
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )


def run() -> None:
    try:
        settings = load_settings()
    except ConfigError as exc:
        setup_logging()
        log.error("Failed to start server: %s", exc)
        raise SystemExit(1) from exc

    setup_logging(settings.log_level)
    asyncio.run(main(settings))


if __name__ == "__main__":
    run()
