"""Tool call dispatch for the Sentry MCP server."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from .errors import InvalidArgumentsError, SentryMcpError, ToolNotFoundError
from .logging import redact_payload
from .models import SentryTool, TextContent, ToolArguments, ToolCallResult
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolService:
    """
    Dispatches tool calls against the registry.

    Every call ends in a ``ToolCallResult`` with a single JSON text block;
    failures are reported with ``is_error=True`` instead of being raised.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def call_tool(
        self, name: Optional[str], arguments: Optional[Mapping[str, Any]] = None
    ) -> ToolCallResult:
        try:
            tool = self.registry.get(name)
            if tool is None:
                raise ToolNotFoundError(name)
            args = self._validate_arguments(tool, arguments)
            logger.info("Executing tool=%s arguments=%s", name, redact_payload(args.model_dump()))
            result = await tool.handler(args)
            return self._format_result(result)
        except SentryMcpError as exc:
            logger.error("Tool execution failed: tool=%s error=%s", name, exc)
            return self._format_error(str(exc))
        except Exception as exc:
            logger.exception("Unexpected failure executing tool=%s", name)
            return self._format_error(str(exc) or type(exc).__name__)

    def _validate_arguments(
        self, tool: SentryTool, arguments: Optional[Mapping[str, Any]]
    ) -> ToolArguments:
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgumentsError(f"Invalid arguments for {tool.name} - expected an object")

        required = [
            field_name
            for field_name, info in tool.input_model.model_fields.items()
            if info.is_required()
        ]
        missing = [field_name for field_name in required if arguments.get(field_name) is None]
        if missing:
            raise InvalidArgumentsError.missing(tool.name, missing)

        try:
            return tool.input_model.model_validate(dict(arguments))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise InvalidArgumentsError(f"Invalid arguments for {tool.name} - {problems}") from exc

    def _format_result(self, result: Any) -> ToolCallResult:
        return ToolCallResult(content=[TextContent(text=json.dumps(result))])

    def _format_error(self, details: str) -> ToolCallResult:
        payload: Dict[str, Any] = {"error": "Failed to execute tool", "details": details}
        return ToolCallResult(content=[TextContent(text=json.dumps(payload))], is_error=True)
