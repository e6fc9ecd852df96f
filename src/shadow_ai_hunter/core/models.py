"""Core data models for shadow AI detection."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class LogEntry:
    """Normalized network event produced by every format parser."""

    line_no: int
    timestamp: datetime | None  # None when the source timestamp is missing/unparseable
    source: str
    domain: str  # lower-cased, no trailing root dot
    url: str = ""
    method: str = ""
    status: str = ""
    bytes_sent: int = 0
    raw: str = ""


@dataclass(frozen=True, slots=True)
class Finding:
    """A log entry that hit a tracked AI service."""

    entry: LogEntry
    service_name: str
    category: str

    @property
    def timestamp(self) -> datetime | None:
        return self.entry.timestamp

    @property
    def source(self) -> str:
        return self.entry.source

    @property
    def domain(self) -> str:
        return self.entry.domain


@dataclass(frozen=True, slots=True)
class Summary:
    """Aggregated view of one analysis run."""

    total_logs_scanned: int
    total_findings: int
    unique_users: int
    unique_services: int
    findings: tuple[Finding, ...] = ()
    by_user: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))  # source -> hits
    by_service: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))  # service name -> hits
