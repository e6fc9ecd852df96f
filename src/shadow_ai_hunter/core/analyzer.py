"""Fold parsed entries into findings and hit counters."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from types import MappingProxyType

from .catalog import ServiceCatalog
from .models import Finding, LogEntry, Summary


def analyze(entries: Iterable[LogEntry], catalog: ServiceCatalog) -> Summary:
    """Match every entry once, in order, and summarize the hits."""
    findings: list[Finding] = []
    by_user: Counter[str] = Counter()
    by_service: Counter[str] = Counter()
    scanned = 0

    for entry in entries:
        scanned += 1
        svc = catalog.match(entry.domain)
        if svc is None:
            continue

        findings.append(Finding(entry=entry, service_name=svc.name, category=svc.category))
        by_user[entry.source] += 1
        by_service[svc.name] += 1

    return Summary(
        total_logs_scanned=scanned,
        total_findings=len(findings),
        unique_users=len(by_user),
        unique_services=len(by_service),
        findings=tuple(findings),
        by_user=MappingProxyType(dict(by_user)),
        by_service=MappingProxyType(dict(by_service)),
    )
