"""MCP server setup for the Sentry tools."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server.lowlevel import Server

from .config import Settings
from .models import ToolCallResult, ToolDefinition
from .sentry_client import RetryPolicy, SentryClient
from .service import ToolService
from .tool_registry import ToolRegistry
from .tools import SentryTools

logger = logging.getLogger(__name__)

SERVER_VERSION = "0.1.0"


def build_service(settings: Settings, client: Optional[SentryClient] = None) -> ToolService:
    if client is None:
        client = SentryClient(
            base_url=settings.sentry_base_url,
            auth_token=settings.sentry_auth_token,
            timeout_seconds=settings.sentry_timeout_seconds,
            retry_policy=RetryPolicy(
                max_retries=settings.sentry_max_retries,
                backoff_seconds=settings.sentry_retry_backoff_seconds,
            ),
        )
    registry = ToolRegistry(SentryTools(settings, client))
    return ToolService(registry)


def build_server(settings: Settings, service: Optional[ToolService] = None) -> Server:
    service = service or build_service(settings)
    server: Server = Server(settings.service_name, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [to_mcp_tool(definition) for definition in service.registry.list_definitions()]

    # Arguments are checked by the dispatcher so failures keep the uniform envelope.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        result = await service.call_tool(name, arguments)
        return to_mcp_result(result)

    logger.info("Registered tools: %s", service.registry.names())
    return server


def to_mcp_tool(definition: ToolDefinition) -> types.Tool:
    return types.Tool(
        name=definition.name,
        description=definition.description,
        inputSchema=definition.input_schema,
    )


def to_mcp_result(result: ToolCallResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=block.text) for block in result.content],
        isError=result.is_error,
    )
