"""Parser interfaces and shared file reading."""

from __future__ import annotations

import gzip
import zlib
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Protocol

import aiofiles
from aiofiles.threadpool import wrap

from ..models import LogEntry


class LogFormatError(ValueError):
    """A log file is structurally unusable (file-scoped, not line-scoped)."""


class LogParser(Protocol):
    """Parser interface: lazily yield normalized entries from one log file."""

    name: str

    def iter_entries(self, path: str | Path) -> AsyncIterator[LogEntry]:
        """Yield entries for every parseable line, skipping the rest."""
        ...


@asynccontextmanager
async def open_text(path: Path, *, encoding: str = "utf-8", decode_errors: str = "replace"):
    """Open a log file for async text reading (plain or gzip).

    Truncated or corrupt gzip streams surface as OSError, like other read failures.
    """
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors, newline="")
        af = wrap(f)
        try:
            yield af
        except (EOFError, zlib.error) as e:
            raise OSError(f"corrupt gzip file {path}: {e}") from e
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors, newline="") as f:
            yield f


def _require_file(path: str | Path) -> Path:
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Log file not found: {p}")
    return p


async def read_lines(path: str | Path, **open_kwargs) -> AsyncIterator[tuple[int, str]]:
    """Yield (line_no, line) pairs with line endings stripped."""
    p = _require_file(path)
    line_no = 0
    async with open_text(p, **open_kwargs) as f:
        async for line in f:
            line_no += 1
            yield line_no, line.rstrip("\r\n")


async def read_text(path: str | Path, **open_kwargs) -> str:
    """Read a whole log file (plain or gzip)."""
    p = _require_file(path)
    async with open_text(p, **open_kwargs) as f:
        return await f.read()


async def iter_line_entries(
    path: str | Path,
    parse_line: Callable[[int, str], LogEntry | None],
) -> AsyncIterator[LogEntry]:
    """Run a line parser over a file, dropping blanks, comments and bad lines."""
    async for line_no, line in read_lines(path):
        if not line.strip() or line.startswith("#"):
            continue
        entry = parse_line(line_no, line)
        if entry is not None:
            yield entry


async def parse_file(parser: LogParser, path: str | Path) -> list[LogEntry]:
    """Collect a parser's entries for one file into a list."""
    return [entry async for entry in parser.iter_entries(path)]
