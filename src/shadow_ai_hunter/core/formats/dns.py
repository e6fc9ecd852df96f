"""DNS query log parser (simple RFC3339 lines and dnsmasq syslog lines)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import ClassVar

from ..models import LogEntry
from .base import iter_line_entries
from .fields import normalize_domain, parse_rfc3339

_QUERY_MARKER = "query["
_DNSMASQ_TAG = "dnsmasq"


@dataclass(frozen=True, slots=True)
class DnsParser:
    """Parse DNS query logs.

    Two dialects are tried per line, in order:

    1. ``2025-06-10T08:30:00Z 192.168.1.50 api.openai.com A``
    2. ``Jun 10 08:30:00 host dnsmasq[1234]: query[A] api.openai.com from 192.168.1.50``

    dnsmasq timestamps carry no year; ``year`` pins one, otherwise the current
    wall-clock year is assigned to every recovered timestamp.
    """

    name: ClassVar[str] = "dns"
    year: int | None = None

    def parse_simple(self, line_no: int, line: str) -> LogEntry | None:
        """Parse ``<rfc3339> <client> <domain> [type]``."""
        fields = line.split()
        if len(fields) < 3:
            return None

        ts = parse_rfc3339(fields[0])
        if ts is None:
            return None

        domain = normalize_domain(fields[2])
        if not domain:
            return None

        return LogEntry(line_no=line_no, timestamp=ts, source=fields[1], domain=domain, raw=line)

    def _parse_syslog_ts(self, prefix: str) -> datetime | None:
        """Parse the ``Mon D HH:MM:SS`` prefix that precedes the query marker."""
        ts_part = prefix.strip()
        tag_idx = ts_part.find(_DNSMASQ_TAG)
        if tag_idx > 0:
            ts_part = ts_part[:tag_idx].strip()
            ts_fields = ts_part.split()
            if len(ts_fields) >= 4:  # trailing hostname
                ts_part = " ".join(ts_fields[:3])

        year = self.year if self.year is not None else datetime.now(UTC).year
        try:
            # strptime defaults to 1900 (no Feb 29), so the year is parsed in.
            naive = datetime.strptime(f"{year} {' '.join(ts_part.split())}", "%Y %b %d %H:%M:%S")
        except ValueError:
            return None
        return naive.replace(tzinfo=UTC)

    def parse_dnsmasq(self, line_no: int, line: str) -> LogEntry | None:
        """Parse a dnsmasq ``query[TYPE] <domain> from <client>`` line."""
        q_idx = line.find(_QUERY_MARKER)
        if q_idx == -1:
            return None

        after = line[q_idx:]
        close = after.find("] ")
        if close == -1:
            return None

        parts = after[close + 2 :].split()
        if len(parts) < 3 or parts[1] != "from":
            return None

        domain = normalize_domain(parts[0])
        if not domain:
            return None

        return LogEntry(
            line_no=line_no,
            timestamp=self._parse_syslog_ts(line[:q_idx]),
            source=parts[2],
            domain=domain,
            raw=line,
        )

    def parse_line(self, line_no: int, line: str) -> LogEntry | None:
        """Return the first dialect that parses the line."""
        entry = self.parse_simple(line_no, line)
        if entry is None:
            entry = self.parse_dnsmasq(line_no, line)
        return entry

    def iter_entries(self, path: str | Path) -> AsyncIterator[LogEntry]:
        """Yield entries for every recognized query line."""
        return iter_line_entries(path, self.parse_line)
