from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

SQUID_LINES = [
    "1718000000.000    200 192.168.1.50 TCP_MISS/200 1500 GET https://api.openai.com/v1/chat/completions - DIRECT/api.openai.com text/html",
    "1718000005.123     90 192.168.1.51 TCP_TUNNEL/200 3200 CONNECT claude.ai:443 - HIER_DIRECT/claude.ai -",
    "# comment line",
    "1718000010.000     15 192.168.1.52 TCP_MISS/200 800 GET http://example.com/index.html - DIRECT/example.com text/html",
    "garbage",
]

BASE_SERVICES = {
    "services": [
        {"name": "OpenAI", "category": "LLM Chat", "domains": ["openai.com", "api.openai.com"]},
        {"name": "Anthropic", "category": "LLM Chat", "domains": ["claude.ai", "anthropic.com"]},
        {"name": "Hugging Face", "category": "Model Hub", "domains": ["huggingface.co"]},
    ]
}


@pytest.fixture
def write_lines() -> Callable[[Path, list[str]], Path]:
    def _write(path: Path, lines: list[str]) -> Path:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_services() -> Callable[[Path, dict], Path]:
    def _write(path: Path, data: dict) -> Path:
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def services_file(tmp_path: Path, write_services) -> Path:
    return write_services(tmp_path / "ai_services.json", BASE_SERVICES)


@pytest.fixture
def squid_log(tmp_path: Path, write_lines) -> Path:
    return write_lines(tmp_path / "access.log", SQUID_LINES)
