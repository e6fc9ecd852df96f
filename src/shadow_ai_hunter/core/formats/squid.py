"""Squid proxy access.log parser."""

from __future__ import annotations

import math
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import ClassVar

from ..models import LogEntry
from .base import iter_line_entries
from .fields import extract_domain, parse_int


@dataclass(frozen=True, slots=True)
class SquidParser:
    """Parse Squid native access.log lines.

    Layout: ``time elapsed client action/code size method URL ident hierarchy type``.
    CONNECT tunnels carry a bare ``host:port`` instead of a URL.
    """

    name: ClassVar[str] = "squid"
    min_fields: ClassVar[int] = 8

    @staticmethod
    def _parse_ts(ts_str: str) -> datetime | None:
        """Parse fractional unix seconds into a UTC datetime (sub-second part dropped)."""
        try:
            seconds = float(ts_str)
        except ValueError:
            return None
        if not math.isfinite(seconds):
            return None
        try:
            return datetime.fromtimestamp(int(seconds), UTC)
        except (OverflowError, OSError, ValueError):
            return None

    def parse_line(self, line_no: int, line: str) -> LogEntry | None:
        """Parse one access.log line into a LogEntry."""
        fields = line.split()
        if len(fields) < self.min_fields:
            return None

        ts = self._parse_ts(fields[0])
        if ts is None:
            return None

        _, sep, status = fields[3].partition("/")
        target = fields[6]
        domain = extract_domain(target)
        if not domain:
            return None

        return LogEntry(
            line_no=line_no,
            timestamp=ts,
            source=fields[2],
            domain=domain,
            url=target,
            method=fields[5],
            status=status if sep else "",
            bytes_sent=parse_int(fields[4]),
            raw=line,
        )

    def iter_entries(self, path: str | Path) -> AsyncIterator[LogEntry]:
        """Yield entries for every well-formed access.log line."""
        return iter_line_entries(path, self.parse_line)
