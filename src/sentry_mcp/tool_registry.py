"""Tool registry for the Sentry MCP server."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .models import (
    GetIssueArgs,
    GetReleaseHealthArgs,
    GetReleaseIssuesArgs,
    GetReleasesArgs,
    InspectArgs,
    ListRecentReleasesArgs,
    SentryTool,
    ToolArguments,
    ToolDefinition,
    input_schema_for,
)
from .tools import SentryTools


logger = logging.getLogger(__name__)

INSPECT_TOOL = "inspect_sentry"


class ToolRegistry:
    """Fixed name -> tool table, built once and never mutated."""

    def __init__(self, operations: SentryTools) -> None:
        self.operations = operations
        self._tools: Dict[str, SentryTool] = {}
        for name, description, input_model, handler in self._entries():
            self._register(name, description, input_model, handler)

    def _entries(self) -> List[tuple[str, str, type[ToolArguments], Callable[[Any], Awaitable[Any]]]]:
        ops = self.operations
        return [
            (
                INSPECT_TOOL,
                "Inspect server configuration and capabilities",
                InspectArgs,
                self._inspect,
            ),
            (
                "list_recent_releases",
                "List most recent releases with issue counts",
                ListRecentReleasesArgs,
                ops.list_recent_releases,
            ),
            (
                "get_releases",
                "Get all releases sorted by date (newest first)",
                GetReleasesArgs,
                ops.get_releases,
            ),
            (
                "get_release_health",
                "Get health metrics for a release",
                GetReleaseHealthArgs,
                ops.get_release_health,
            ),
            (
                "get_issue",
                "Get a Sentry issue by ID",
                GetIssueArgs,
                ops.get_issue,
            ),
            (
                "get_release_issues",
                "Get issues from a specific release (defaults to latest)",
                GetReleaseIssuesArgs,
                ops.get_release_issues,
            ),
        ]

    def _register(
        self,
        name: str,
        description: str,
        input_model: type[ToolArguments],
        handler: Callable[[Any], Awaitable[Any]],
    ) -> None:
        if name in self._tools:
            raise ValueError(f"Duplicate tool name: {name}")
        definition = ToolDefinition(
            name=name,
            description=description,
            input_schema=input_schema_for(input_model),
        )
        self._tools[name] = SentryTool(definition=definition, input_model=input_model, handler=handler)

    async def _inspect(self, _args: InspectArgs) -> Dict[str, Any]:
        return await self.operations.inspect_sentry(self.capabilities())

    def get(self, name: Optional[str]) -> Optional[SentryTool]:
        if not name:
            return None
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def capabilities(self) -> List[str]:
        return [name for name in self._tools if name != INSPECT_TOOL]

    def list_definitions(self) -> List[ToolDefinition]:
        return [tool.definition for tool in self._tools.values()]
