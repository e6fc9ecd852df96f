"""Render a Summary as a text table, JSON or CSV."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from .models import Finding, Summary

CSV_HEADER = (
    "timestamp",
    "source_ip",
    "service_name",
    "category",
    "domain",
    "url",
    "method",
    "status_code",
    "bytes_sent",
)


class ReportFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def _iso_ts(f: Finding) -> str:
    return f.timestamp.strftime("%Y-%m-%dT%H:%M:%SZ") if f.timestamp is not None else ""


def sorted_hits(hits: Mapping[str, int]) -> list[tuple[str, int]]:
    """Hit counters ordered by count (descending), ties by first appearance."""
    return sorted(hits.items(), key=lambda kv: kv[1], reverse=True)


def finding_to_dict(f: Finding) -> dict[str, Any]:
    """Convert a Finding into a JSON-serializable dict (empty details omitted)."""
    e = f.entry
    d: dict[str, Any] = {
        "timestamp": _iso_ts(f),
        "source_ip": e.source,
        "service_name": f.service_name,
        "category": f.category,
        "domain": e.domain,
    }
    if e.url:
        d["url"] = e.url
    if e.method:
        d["method"] = e.method
    if e.status:
        d["status_code"] = e.status
    if e.bytes_sent:
        d["bytes_sent"] = e.bytes_sent
    return d


def summary_to_dict(s: Summary) -> dict[str, Any]:
    return {
        "total_logs_scanned": s.total_logs_scanned,
        "total_findings": s.total_findings,
        "unique_users": s.unique_users,
        "unique_services": s.unique_services,
        "hits_by_user": dict(s.by_user),
        "hits_by_service": dict(s.by_service),
        "findings": [finding_to_dict(f) for f in s.findings],
    }


def _columns(rows: Sequence[Sequence[str]], indent: str = "  ", gap: int = 2) -> list[str]:
    """Left-align rows into padded columns."""
    if not rows:
        return []
    widths = [max(len(r[i]) for r in rows) for i in range(len(rows[0]))]
    out = []
    for r in rows:
        cells = [c.ljust(w) for c, w in zip(r[:-1], widths[:-1])] + [r[-1]]
        out.append(indent + (" " * gap).join(cells))
    return out


def render_table(s: Summary) -> str:
    lines = [
        "",
        "  SHADOW AI HUNTER - Scan Results",
        "=" * 60,
        f"  Logs scanned:    {s.total_logs_scanned}",
        f"  AI hits found:   {s.total_findings}",
        f"  Unique users:    {s.unique_users}",
        f"  Unique services: {s.unique_services}",
        "=" * 60,
    ]

    if s.total_findings == 0:
        lines += ["", "  No shadow AI activity detected."]
        return "\n".join(lines) + "\n"

    lines += ["", "  TOP USERS BY AI SERVICE HITS", "-" * 40]
    lines += _columns([(user, f"{n} hits") for user, n in sorted_hits(s.by_user)])

    lines += ["", "  TOP AI SERVICES DETECTED", "-" * 40]
    lines += _columns([(svc, f"{n} hits") for svc, n in sorted_hits(s.by_service)])

    lines += ["", "  DETAILED FINDINGS", "-" * 90]
    rows = [
        ("TIMESTAMP", "SOURCE IP", "SERVICE", "CATEGORY", "DOMAIN"),
        ("---------", "---------", "-------", "--------", "------"),
    ]
    for f in s.findings:
        ts = f.timestamp.strftime("%Y-%m-%d %H:%M:%S") if f.timestamp is not None else "N/A"
        rows.append((ts, f.source, f.service_name, f.category, f.domain))
    lines += _columns(rows)
    lines.append("")

    return "\n".join(lines) + "\n"


def render_json(s: Summary) -> str:
    return json.dumps(summary_to_dict(s), indent=2) + "\n"


def render_csv(s: Summary) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for f in s.findings:
        e = f.entry
        writer.writerow(
            [
                _iso_ts(f),
                e.source,
                f.service_name,
                f.category,
                e.domain,
                e.url,
                e.method,
                e.status,
                str(e.bytes_sent),
            ]
        )
    return buf.getvalue()


def render_report(s: Summary, fmt: ReportFormat | str) -> str:
    """Render ``s`` in the requested format."""
    try:
        fmt = ReportFormat(str(getattr(fmt, "value", fmt)).lower())
    except ValueError as e:
        raise ValueError(f"unknown format: {fmt}") from e

    if fmt is ReportFormat.JSON:
        return render_json(s)
    if fmt is ReportFormat.CSV:
        return render_csv(s)
    return render_table(s)


def write_report(s: Summary, fmt: ReportFormat | str, path: str | Path) -> None:
    """Render ``s`` and write it to ``path``."""
    Path(path).write_text(render_report(s, fmt), encoding="utf-8")
