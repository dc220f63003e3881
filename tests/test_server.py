"""Tests for the MCP bindings and the diagnostics slot."""

import asyncio
import json

from mcp import types

from sentry_mcp import diagnostics
from sentry_mcp.models import TextContent, ToolCallResult, ToolDefinition
from sentry_mcp.server import build_server, to_mcp_result, to_mcp_tool


class TestMcpBindings:
    def test_tool_conversion(self):
        definition = ToolDefinition(
            name="get_releases",
            description="Get all releases sorted by date (newest first)",
            input_schema={"type": "object", "properties": {}, "required": []},
        )

        tool = to_mcp_tool(definition)

        assert tool.name == "get_releases"
        assert tool.inputSchema == definition.input_schema

    def test_error_result_conversion(self):
        text = json.dumps({"error": "Failed to execute tool", "details": "Tool not found: x"})

        result = to_mcp_result(ToolCallResult(content=[TextContent(text=text)], is_error=True))

        assert result.isError is True
        assert len(result.content) == 1
        assert result.content[0].text == text

    def test_build_server(self, settings, service):
        server = build_server(settings, service=service)

        assert server.name == "sentry-mcp"

    def test_build_server_registers_tool_handlers(self, settings, service):
        server = build_server(settings, service=service)

        assert types.ListToolsRequest in server.request_handlers
        assert types.CallToolRequest in server.request_handlers


class TestDiagnostics:
    def setup_method(self):
        diagnostics.reset()

    def teardown_method(self):
        diagnostics.reset()

    def test_starts_empty(self):
        assert diagnostics.last_error() is None
        assert diagnostics.describe_last_error() is None

    def test_last_write_wins(self):
        diagnostics.record_unhandled(ValueError("first"))
        diagnostics.record_unhandled(KeyError("second"))

        assert isinstance(diagnostics.last_error(), KeyError)
        assert diagnostics.describe_last_error() == "KeyError: 'second'"

    def test_loop_handler_records_failures(self):
        async def scenario():
            loop = asyncio.get_running_loop()
            diagnostics.install(loop)
            loop.call_exception_handler({"message": "Task exception was never retrieved", "exception": RuntimeError("lost")})

        asyncio.run(scenario())

        assert str(diagnostics.last_error()) == "lost"

    def test_inspect_reports_last_error(self, service):
        diagnostics.record_unhandled(RuntimeError("background task died"))

        result = asyncio.run(service.call_tool("inspect_sentry", {}))
        payload = json.loads(result.content[0].text)

        assert payload["diagnostics"]["last_error"] == "RuntimeError: background task died"
