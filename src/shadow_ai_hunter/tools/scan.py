"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from shadow_ai_hunter.core.catalog import (
    ServiceCatalog,
    default_services_path,
    load_catalog,
    merge_catalog,
)
from shadow_ai_hunter.core.detection import LogFormat, collect_files
from shadow_ai_hunter.core.reporting import finding_to_dict
from shadow_ai_hunter.core.scan_service import scan_paths

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000


def _parse_format(log_format: str | None) -> LogFormat:
    if not log_format:
        return LogFormat.AUTO
    try:
        return LogFormat(log_format.strip().lower())
    except ValueError as e:
        valid = ", ".join(f.value for f in LogFormat)
        raise ValueError(f"Unknown log format '{log_format}'. Valid values: {valid}.") from e


def _expand_paths(paths: Sequence[str]) -> list[Path]:
    """Expand directories into the files they directly contain."""
    out: list[Path] = []
    for raw in paths:
        p = Path(raw).expanduser()
        if p.is_dir():
            out.extend(collect_files(p))
        else:
            out.append(p)
    return out


def build_catalog(services_path: str | None = None, custom_path: str | None = None) -> ServiceCatalog:
    """Load the base catalog and layer the optional custom catalog over it."""
    catalog = load_catalog(services_path or default_services_path())
    if custom_path:
        catalog = merge_catalog(custom_path, catalog)
    return catalog


async def scan_logs_impl(
    *,
    paths: Sequence[str],
    log_format: str | None = None,
    services_path: str | None = None,
    custom_path: str | None = None,
    include_findings: bool = True,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `scan_logs` MCP tool.

    Notes
    -----
    - Directories are expanded to the regular files directly inside them.
    - Files that cannot be parsed are reported under "file_errors" and do not
      stop the scan; catalog problems raise CatalogError.
    - Counters always cover every finding; "findings" is capped by limit.
    """
    if not paths:
        raise ValueError("At least one path must be provided.")
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    limit = min(limit, HARD_LIMIT)

    fmt = _parse_format(log_format)
    catalog = build_catalog(services_path, custom_path)
    result = await scan_paths(_expand_paths(paths), catalog=catalog, log_format=fmt)
    s = result.summary

    out: dict[str, Any] = {
        "total_logs_scanned": s.total_logs_scanned,
        "total_findings": s.total_findings,
        "unique_users": s.unique_users,
        "unique_services": s.unique_services,
        "hits_by_user": dict(s.by_user),
        "hits_by_service": dict(s.by_service),
        "files": [
            {"path": str(f.path), "format": f.parser, "entries": f.entries}
            for f in result.files
            if f.ok
        ],
        "file_errors": [
            {"path": str(f.path), "format": f.parser, "error": f.error} for f in result.errors
        ],
    }
    if include_findings:
        out["findings"] = [finding_to_dict(f) for f in s.findings[:limit]]
    return out
