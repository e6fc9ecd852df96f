"""Multi-file scanning.

This module is the main integration point: it parses a list of log files with
their resolved parsers, keeps going past file-level failures and hands the
concatenated entries to the analyzer.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .analyzer import analyze
from .catalog import ServiceCatalog
from .detection import LogFormat, parser_for
from .formats import LogFormatError, parse_file
from .models import LogEntry, Summary

logger = logging.getLogger(__name__)

MAX_CONCURRENCY_ENV = "SHADOW_HUNTER_MAX_CONCURRENCY"


@dataclass(frozen=True, slots=True)
class FileScanResult:
    """Per-file outcome: parser used and entry count, or the failure."""

    path: Path
    parser: str
    entries: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class ScanResult:
    summary: Summary
    files: tuple[FileScanResult, ...]

    @property
    def errors(self) -> tuple[FileScanResult, ...]:
        return tuple(f for f in self.files if not f.ok)


def resolve_max_concurrency(max_concurrency: int | None) -> int:
    if max_concurrency is not None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        return max_concurrency

    env = os.getenv(MAX_CONCURRENCY_ENV)
    if env:
        try:
            value = int(env)
        except ValueError as exc:
            raise ValueError(f"{MAX_CONCURRENCY_ENV} must be an integer") from exc
        if value < 1:
            raise ValueError(f"{MAX_CONCURRENCY_ENV} must be >= 1")
        return value

    cpu_count = os.cpu_count() or 1
    return min(8, cpu_count)


async def _scan_file(
    path: Path,
    log_format: str | LogFormat,
    limiter: asyncio.Semaphore,
) -> tuple[FileScanResult, list[LogEntry]]:
    parser = parser_for(log_format, path)
    async with limiter:
        logger.info("Parsing %s (%s format)", path, parser.name)
        try:
            entries = await parse_file(parser, path)
        except (OSError, LogFormatError) as e:
            logger.warning("Error parsing %s: %s", path, e)
            return FileScanResult(path=path, parser=parser.name, error=str(e)), []

    logger.info("%s: %d entries parsed", path, len(entries))
    return FileScanResult(path=path, parser=parser.name, entries=len(entries)), entries


async def parse_paths(
    paths: Sequence[str | Path],
    *,
    log_format: str | LogFormat = LogFormat.AUTO,
    max_concurrency: int | None = None,
) -> tuple[list[FileScanResult], list[LogEntry]]:
    """Parse files (possibly concurrently); entries keep file, then line order."""
    limiter = asyncio.Semaphore(resolve_max_concurrency(max_concurrency))
    results = await asyncio.gather(
        *(_scan_file(Path(p), log_format, limiter) for p in paths)
    )

    files: list[FileScanResult] = []
    entries: list[LogEntry] = []
    for file_result, file_entries in results:
        files.append(file_result)
        entries.extend(file_entries)
    return files, entries


async def scan_paths(
    paths: Sequence[str | Path],
    *,
    catalog: ServiceCatalog,
    log_format: str | LogFormat = LogFormat.AUTO,
    max_concurrency: int | None = None,
) -> ScanResult:
    """Parse every file and analyze the combined entries against ``catalog``."""
    files, entries = await parse_paths(
        paths, log_format=log_format, max_concurrency=max_concurrency
    )
    logger.info("Analyzing %d entries for shadow AI activity", len(entries))
    return ScanResult(summary=analyze(entries, catalog), files=tuple(files))
