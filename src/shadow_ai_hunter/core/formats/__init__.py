"""Log format parsers.

Each parser turns one network-log dialect (Squid access logs, DNS query logs,
CSV exports) into normalized LogEntry values.
"""

from __future__ import annotations

from .base import LogFormatError, LogParser, parse_file
from .csvlog import CsvParser
from .dns import DnsParser
from .fields import extract_domain, normalize_domain, parse_flexible_time, parse_rfc3339
from .squid import SquidParser

__all__ = [
    "CsvParser",
    "DnsParser",
    "LogFormatError",
    "LogParser",
    "SquidParser",
    "extract_domain",
    "normalize_domain",
    "parse_file",
    "parse_flexible_time",
    "parse_rfc3339",
]
