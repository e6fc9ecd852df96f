"""Log format selection by explicit name or filename heuristics."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from .formats import CsvParser, DnsParser, LogParser, SquidParser


class LogFormat(str, Enum):
    """Supported log dialects (``auto`` defers to filename detection)."""

    AUTO = "auto"
    SQUID = "squid"
    DNS = "dns"
    CSV = "csv"


_DNS_HINTS = ("dns", "query", "dnsmasq")
_PROXY_HINTS = ("squid", "proxy")


def detect_format(log_path: str | Path) -> LogFormat:
    """Guess a file's dialect from its name; proxy logs are the fallback."""
    path = Path(log_path)
    base = path.name.lower()
    suffix = path.suffix.lower()
    if suffix == ".gz":
        suffix = path.with_suffix("").suffix.lower()

    if suffix == ".csv":
        return LogFormat.CSV
    if any(hint in base for hint in _DNS_HINTS):
        return LogFormat.DNS
    if any(hint in base for hint in _PROXY_HINTS) or "access.log" in str(path).lower():
        return LogFormat.SQUID
    return LogFormat.SQUID


def resolve_format(log_format: str | LogFormat, log_path: str | Path) -> LogFormat:
    """Resolve an explicit format name; unknown names fall back to detection."""
    try:
        fmt = LogFormat(str(getattr(log_format, "value", log_format)).lower())
    except ValueError:
        fmt = LogFormat.AUTO
    if fmt is LogFormat.AUTO:
        return detect_format(log_path)
    return fmt


def parser_for(log_format: str | LogFormat, log_path: str | Path) -> LogParser:
    """Return a fresh parser for the file's resolved format."""
    fmt = resolve_format(log_format, log_path)
    if fmt is LogFormat.CSV:
        return CsvParser()
    if fmt is LogFormat.DNS:
        return DnsParser()
    return SquidParser()


def collect_files(log_dir: str | Path) -> list[Path]:
    """List regular files directly inside ``log_dir``, sorted by name."""
    return sorted(p for p in Path(log_dir).iterdir() if p.is_file())
