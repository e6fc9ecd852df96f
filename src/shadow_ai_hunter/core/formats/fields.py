"""Field helpers shared by the format parsers (domains, timestamps, counters)."""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import UTC, datetime
from urllib.parse import urlsplit

_RFC3339_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})$")

FLEXIBLE_TIME_FORMATS: Sequence[str] = (
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%d/%b/%Y:%H:%M:%S %z",
    "%b %d %H:%M:%S %Y",
    "%Y-%m-%d",
)


def normalize_domain(value: str) -> str:
    """Lower-case a host name and drop the trailing root-label dot."""
    return value.strip().lower().rstrip(".")


def extract_domain(target: str) -> str:
    """Return the host of a URL, or of a bare ``host:port`` tunnel target."""
    if "://" not in target:
        return normalize_domain(target.split(":", 1)[0])

    try:
        host = urlsplit(target).hostname
    except ValueError:
        return ""
    return normalize_domain(host or "")


def parse_int(value: str, default: int = 0) -> int:
    """Parse a decimal counter, falling back to ``default``."""
    try:
        return int(value.strip())
    except ValueError:
        return default


def _to_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def parse_rfc3339(value: str) -> datetime | None:
    """Parse an RFC3339 timestamp (date, time and zone required) into UTC."""
    s = value.strip()
    if not _RFC3339_RE.match(s):
        return None
    try:
        ts = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None
    if ts.tzinfo is None:
        return None
    return ts.astimezone(UTC)


def parse_flexible_time(value: str) -> datetime | None:
    """Try RFC3339 and then the common log formats; first match wins."""
    s = value.strip()
    if not s:
        return None

    ts = parse_rfc3339(s)
    if ts is not None:
        return ts

    for fmt in FLEXIBLE_TIME_FORMATS:
        try:
            return _to_utc(datetime.strptime(s, fmt))
        except ValueError:
            continue
    return None
