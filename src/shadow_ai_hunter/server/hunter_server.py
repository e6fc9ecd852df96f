"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (scan log files for AI service traffic)
- Resources: the loaded service catalog and the services-file schema

Run locally (stdio):
    python -m shadow_ai_hunter.server.hunter_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from shadow_ai_hunter.resources.registry import register_resources
from shadow_ai_hunter.tools.scan import scan_logs_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv("SHADOW_HUNTER_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("shadow-ai-hunter", json_response=True)

register_resources(mcp)


@mcp.tool()
async def scan_logs(
    paths: Sequence[str],
    log_format: str | None = None,
    services_path: str | None = None,
    custom_path: str | None = None,
    include_findings: bool = True,
    limit: int | None = None,
) -> dict[str, Any]:
    """Scan network logs for connections to known AI services.

    Parameters
    ----------
    paths:
        Log files or directories (directories are scanned one level deep).
        Plain text and .gz are supported.
    log_format:
        One of auto, squid, dns, csv. "auto" (default) guesses from the file name.
    services_path:
        Services catalog JSON. Defaults to $SHADOW_HUNTER_SERVICES or the bundled catalog.
    custom_path:
        Extra services JSON merged over the base catalog; its domains win collisions.
    include_findings:
        Whether to return the individual findings (counters are always returned).
    limit:
        Maximum number of findings returned (hard-capped in the implementation).

    Returns
    -------
    dict:
        {"total_findings": int, "hits_by_user": dict, "findings": list[dict], ...}
    """
    return await scan_logs_impl(
        paths=paths,
        log_format=log_format,
        services_path=services_path,
        custom_path=custom_path,
        include_findings=include_findings,
        limit=limit,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
