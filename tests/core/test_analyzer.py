from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from shadow_ai_hunter.core.analyzer import analyze
from shadow_ai_hunter.core.catalog import load_catalog
from shadow_ai_hunter.core.models import LogEntry


def _entry(line_no: int, source: str, domain: str) -> LogEntry:
    return LogEntry(
        line_no=line_no,
        timestamp=datetime(2025, 6, 10, 8, 30, line_no, tzinfo=UTC),
        source=source,
        domain=domain,
        raw=f"{source} {domain}",
    )


def test_analyze_counts_findings_users_and_services(services_file: Path) -> None:
    catalog = load_catalog(services_file)
    entries = [
        _entry(1, "10.0.0.1", "api.openai.com"),
        _entry(2, "10.0.0.1", "example.com"),
        _entry(3, "10.0.0.2", "claude.ai"),
        _entry(4, "10.0.0.1", "files.openai.com"),
        _entry(5, "10.0.0.3", "intranet.local"),
    ]

    summary = analyze(entries, catalog)

    assert summary.total_logs_scanned == 5
    assert summary.total_findings == 3
    assert summary.unique_users == 2
    assert summary.unique_services == 2
    assert summary.by_user == {"10.0.0.1": 2, "10.0.0.2": 1}
    assert summary.by_service == {"OpenAI": 2, "Anthropic": 1}
    assert [f.entry.line_no for f in summary.findings] == [1, 3, 4]
    assert summary.findings[1].service_name == "Anthropic"
    assert summary.findings[1].category == "LLM Chat"
    assert summary.findings[0].entry is entries[0]


def test_analyze_unknown_domain_yields_no_finding(services_file: Path) -> None:
    summary = analyze([_entry(1, "10.0.0.9", "example.com")], load_catalog(services_file))
    assert summary.total_logs_scanned == 1
    assert summary.total_findings == 0
    assert summary.findings == ()
    assert summary.by_user == {}
    assert summary.unique_services == 0


def test_analyze_accepts_any_iterable(services_file: Path) -> None:
    entries = (_entry(i, f"10.0.0.{i}", "huggingface.co") for i in range(1, 4))
    summary = analyze(entries, load_catalog(services_file))
    assert summary.total_logs_scanned == 3
    assert summary.unique_users == 3
    assert summary.by_service == {"Hugging Face": 3}


def test_summary_counters_are_read_only(services_file: Path) -> None:
    summary = analyze([_entry(1, "10.0.0.1", "claude.ai")], load_catalog(services_file))
    with pytest.raises(TypeError):
        summary.by_user["10.0.0.2"] = 1  # type: ignore[index]
    with pytest.raises(TypeError):
        summary.by_service["OpenAI"] = 1  # type: ignore[index]
    assert summary.by_user == {"10.0.0.1": 1}
