"""Generic CSV / firewall export parser."""

from __future__ import annotations

import csv
import io
from collections.abc import AsyncIterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from ..models import LogEntry
from .base import LogFormatError, read_text
from .fields import extract_domain, normalize_domain, parse_flexible_time, parse_int

TIME_COLUMNS: Sequence[str] = ("timestamp", "time", "date", "datetime")
SOURCE_COLUMNS: Sequence[str] = ("source_ip", "src_ip", "src", "client_ip", "source")
DEST_COLUMNS: Sequence[str] = ("destination", "dst", "domain", "host", "url", "dest", "dst_host")
BYTES_COLUMNS: Sequence[str] = ("bytes", "bytes_sent", "size", "content_length")
ACTION_COLUMNS: Sequence[str] = ("action", "status", "status_code", "result")


def map_columns(header: Sequence[str]) -> dict[str, int]:
    """Map trimmed, lower-cased header names to their positions."""
    return {col.strip().lower(): i for i, col in enumerate(header)}


def find_column(columns: Mapping[str, int], names: Sequence[str]) -> int | None:
    """Return the index of the first alias present in the header."""
    for name in names:
        idx = columns.get(name)
        if idx is not None:
            return idx
    return None


@dataclass(frozen=True, slots=True)
class ColumnLayout:
    """Positions of the logical columns in one CSV file."""

    destination: int
    timestamp: int | None = None
    source: int | None = None
    bytes_sent: int | None = None
    action: int | None = None

    @classmethod
    def from_header(cls, header: Sequence[str]) -> ColumnLayout:
        columns = map_columns(header)
        dest = find_column(columns, DEST_COLUMNS)
        if dest is None:
            raise LogFormatError("CSV missing required destination/domain column")
        return cls(
            destination=dest,
            timestamp=find_column(columns, TIME_COLUMNS),
            source=find_column(columns, SOURCE_COLUMNS),
            bytes_sent=find_column(columns, BYTES_COLUMNS),
            action=find_column(columns, ACTION_COLUMNS),
        )


def _cell(row: Sequence[str], idx: int | None) -> str | None:
    if idx is None or idx >= len(row):
        return None
    return row[idx].strip()


@dataclass(frozen=True, slots=True)
class CsvParser:
    """Parse CSV exports with a header row and loosely named columns."""

    name: ClassVar[str] = "csv"

    def parse_row(self, line_no: int, row: Sequence[str], layout: ColumnLayout) -> LogEntry | None:
        """Turn one data row into a LogEntry; rows without a domain are dropped."""
        dest = _cell(row, layout.destination) or ""
        url = ""
        if "://" in dest:
            url = dest
            domain = extract_domain(dest)
        else:
            domain = normalize_domain(dest)
        if not domain:
            return None

        ts_cell = _cell(row, layout.timestamp)
        bytes_cell = _cell(row, layout.bytes_sent)
        return LogEntry(
            line_no=line_no,
            timestamp=parse_flexible_time(ts_cell) if ts_cell is not None else None,
            source=_cell(row, layout.source) or "",
            domain=domain,
            url=url,
            status=_cell(row, layout.action) or "",
            bytes_sent=parse_int(bytes_cell) if bytes_cell is not None else 0,
            raw=",".join(row),
        )

    @staticmethod
    def read_rows(text: str) -> list[tuple[int, list[str]]]:
        """Read non-empty CSV records with their ending line numbers."""
        reader = csv.reader(io.StringIO(text, newline=""), skipinitialspace=True)
        try:
            return [(reader.line_num, row) for row in reader if row]
        except csv.Error as e:
            raise LogFormatError(f"parsing CSV: {e}") from e

    async def iter_entries(self, path: str | Path) -> AsyncIterator[LogEntry]:
        """Yield entries for every data row that names a destination."""
        rows = self.read_rows(await read_text(path))
        if len(rows) < 2:
            raise LogFormatError("CSV has no data rows")

        layout = ColumnLayout.from_header(rows[0][1])
        for line_no, row in rows[1:]:
            entry = self.parse_row(line_no, row, layout)
            if entry is not None:
                yield entry
