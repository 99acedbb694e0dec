"""Round trips through a real MCP client session over in-memory streams."""

import json

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from angelscript_mcp.core.context import SearchContext
from angelscript_mcp.server.app import AngelscriptMcpServer
from tests.fakes import FakeProvider, make_matches


@pytest.fixture
def mcp_server() -> AngelscriptMcpServer:
    provider = FakeProvider(make_matches(150, prefix="GetActor"), fail_tokens={"tok-4"})
    server = AngelscriptMcpServer(SearchContext(provider=provider))
    server.context.gate.resolve()
    return server


@pytest.mark.asyncio
async def test_list_tools_advertises_search_tool(mcp_server):
    async with create_connected_server_and_client_session(mcp_server.server) as session:
        listed = await session.list_tools()

    assert [t.name for t in listed.tools] == ["angelscript_searchApi"]
    assert listed.tools[0].inputSchema["properties"]["limit"]["maximum"] == 1000


@pytest.mark.asyncio
async def test_call_tool_returns_enriched_payload(mcp_server):
    async with create_connected_server_and_client_session(mcp_server.server) as session:
        result = await session.call_tool("angelscript_searchApi", {"query": "GetActor", "limit": 100})

    payload = json.loads(result.content[0].text)
    assert result.isError is False
    assert (payload["total"], payload["returned"], payload["truncated"]) == (150, 100, True)
    assert "details" not in payload["items"][4]
    assert payload["items"][5]["details"] == "doc:tok-5"


@pytest.mark.asyncio
async def test_call_tool_coerces_malformed_limit(mcp_server):
    async with create_connected_server_and_client_session(mcp_server.server) as session:
        result = await session.call_tool(
            "angelscript_searchApi", {"query": "GetActor", "limit": "abc", "includeDetails": False}
        )

    payload = json.loads(result.content[0].text)
    assert payload["returned"] == 150


@pytest.mark.asyncio
async def test_unknown_tool_is_flagged_error(mcp_server):
    async with create_connected_server_and_client_session(mcp_server.server) as session:
        result = await session.call_tool("foo", {})

    assert result.isError is True
    assert result.content[0].text == "Unknown tool: foo"
    assert mcp_server.provider.provider_calls == 0
