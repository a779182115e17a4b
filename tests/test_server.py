import logging

import pytest
import respx
from httpx import Response
from mcp import types
from trello_mcp import server
from trello_mcp.core.errors import ConfigError
from trello_mcp.core.registry import Dispatcher, build_registry

BASE = "https://api.trello.com/1"


@pytest.fixture
def mcp_server(client):
    return server.build_server(Dispatcher(build_registry(), client))


def _call(name, arguments):
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )


def test_envelope_to_result_success_text():
    result = server.envelope_to_result(
        {"content": [{"type": "text", "text": "Successfully deleted card c1"}]}
    )

    assert result.isError is False
    assert result.content[0].text == "Successfully deleted card c1"
    assert result.structuredContent is None


def test_envelope_to_result_keeps_structured_content_and_binary_blocks():
    result = server.envelope_to_result(
        {
            "content": [
                {"type": "image", "data": "aGk=", "mimeType": "image/png"},
                {
                    "type": "resource",
                    "resource": {
                        "uri": "https://trello.com/a.pdf",
                        "mimeType": "application/pdf",
                        "blob": "aGk=",
                    },
                },
            ],
            "structuredContent": {"type": "attachment_download", "size": 2},
        }
    )

    image, resource = result.content
    assert isinstance(image, types.ImageContent)
    assert isinstance(resource, types.EmbeddedResource)
    assert resource.resource.blob == "aGk="
    assert result.structuredContent == {"type": "attachment_download", "size": 2}


def test_envelope_to_result_failure_includes_errors():
    result = server.envelope_to_result(
        {
            "isError": True,
            "message": "Invalid arguments for tool",
            "errors": [
                {"path": ["cardId"], "message": "Field required", "code": "missing"}
            ],
        }
    )

    assert result.isError is True
    text = result.content[0].text
    assert text.startswith("Invalid arguments for tool\n")
    assert '"cardId"' in text


@pytest.mark.asyncio
async def test_list_tools_handler_publishes_registry(mcp_server):
    handler = mcp_server.request_handlers[types.ListToolsRequest]
    result = await handler(types.ListToolsRequest(method="tools/list"))

    tools = {t.name: t for t in result.root.tools}
    assert len(tools) == 31
    assert "boardId" in tools["get_cards"].inputSchema["properties"]


@pytest.mark.asyncio
@respx.mock
async def test_call_tool_validation_failure_is_error_result(mcp_server, client):
    handler = mcp_server.request_handlers[types.CallToolRequest]

    async with client:
        result = await handler(_call("get_cards", {}))

    assert result.root.isError is True
    assert "Either boardId or listId must be provided" in result.root.content[0].text


@pytest.mark.asyncio
@respx.mock
async def test_call_tool_success(mcp_server, client):
    respx.get(f"{BASE}/boards/b1/labels").mock(return_value=Response(200, json=[]))
    handler = mcp_server.request_handlers[types.CallToolRequest]

    async with client:
        result = await handler(_call("get_labels", {"boardId": "b1"}))

    assert result.root.isError is False
    assert result.root.content[0].text == "[]"


def test_run_exits_on_config_error(monkeypatch, caplog):
    def broken():
        raise ConfigError("Missing or invalid environment variables: TRELLO_TOKEN")

    monkeypatch.setattr(server, "load_settings", broken)
    monkeypatch.setattr(server, "setup_logging", lambda *a, **k: None)
    caplog.set_level(logging.ERROR, logger="trello_mcp.server")

    with pytest.raises(SystemExit) as exc:
        server.run()

    assert exc.value.code == 1
    assert "TRELLO_TOKEN" in caplog.text
