"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from shadow_ai_hunter.core.catalog import ServicesFile, default_services_path, load_catalog
from shadow_ai_hunter.core.detection import LogFormat


def catalog_overview() -> dict[str, Any]:
    """Summarize the default catalog (services and domain ownership)."""
    path = default_services_path()
    catalog = load_catalog(path)
    return {
        "path": str(path),
        "service_count": catalog.service_count,
        "domain_count": catalog.domain_count,
        "services": [svc.model_dump(mode="json") for svc in catalog.services],
    }


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://shadow-ai-hunter/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs and formats."""
        formats = ", ".join(f.value for f in LogFormat)
        return (
            "Resources:\n"
            "- app://shadow-ai-hunter/help\n"
            "- app://shadow-ai-hunter/catalog\n"
            "- app://shadow-ai-hunter/schemas/services-file\n"
            f"\nLog formats: {formats}\n"
            f"Default services file: {default_services_path()}\n"
        )

    @mcp.resource("app://shadow-ai-hunter/catalog")
    def catalog_resource() -> dict[str, Any]:
        """Return the services and domains of the default catalog."""
        return catalog_overview()

    @mcp.resource("app://shadow-ai-hunter/schemas/services-file")
    def services_schema() -> dict[str, Any]:
        """Return the JSON schema accepted for --services/--custom files."""
        return ServicesFile.model_json_schema()
