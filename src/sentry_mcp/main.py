"""CLI entry point for the Sentry MCP server."""

from __future__ import annotations

import asyncio
import logging
import sys

from mcp.server.stdio import stdio_server

from . import diagnostics
from .config import ConfigurationError, Settings, load_settings
from .logging import configure_logging
from .server import build_server

logger = logging.getLogger(__name__)


async def _run(settings: Settings) -> None:
    diagnostics.install(asyncio.get_running_loop())

    server = build_server(settings)
    logger.info(
        "Sentry MCP server running with base_url=%s auth_token_present=%s default_org=%s",
        settings.sentry_base_url,
        bool(settings.sentry_auth_token),
        settings.sentry_org_slug,
    )
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        for name in exc.missing:
            print(f"Error: {name} environment variable is required.", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level)
    asyncio.run(_run(settings))


if __name__ == "__main__":
    main()
