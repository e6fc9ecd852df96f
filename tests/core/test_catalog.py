from __future__ import annotations

from pathlib import Path

import pytest

from shadow_ai_hunter.core.catalog import (
    AIService,
    CatalogError,
    ServiceCatalog,
    default_services_path,
    load_catalog,
    merge_catalog,
)
from shadow_ai_hunter.core.matcher import candidate_suffixes, match_domain


def test_load_catalog_indexes_lowercased_domains(tmp_path: Path, write_services) -> None:
    path = write_services(
        tmp_path / "svc.json",
        {"services": [{"name": "OpenAI", "category": "LLM Chat", "domains": ["API.OpenAI.com"]}]},
    )
    catalog = load_catalog(path)
    assert catalog.domain_count == 1
    assert catalog.service_count == 1
    svc = catalog.match("api.openai.com")
    assert svc is not None
    assert svc.name == "OpenAI"


def test_catalog_domains_with_root_dot_match(tmp_path: Path, write_services) -> None:
    path = write_services(
        tmp_path / "svc.json",
        {"services": [{"name": "OpenAI", "category": "LLM Chat", "domains": ["OpenAI.com."]}]},
    )
    catalog = load_catalog(path)
    assert list(catalog.index) == ["openai.com"]
    assert catalog.match("openai.com").name == "OpenAI"
    assert catalog.match("api.openai.com").name == "OpenAI"


@pytest.mark.parametrize(
    "domain",
    ["openai.com", "api.openai.com", "claude.ai", "anthropic.com", "huggingface.co"],
)
def test_exact_domains_match(services_file: Path, domain: str) -> None:
    catalog = load_catalog(services_file)
    assert catalog.match(domain) is catalog.index[domain]


def test_subdomains_inherit_owner(services_file: Path) -> None:
    catalog = load_catalog(services_file)
    domain = "claude.ai"
    for _ in range(5):
        domain = "x." + domain
        svc = catalog.match(domain)
        assert svc is not None
        assert svc.name == "Anthropic"


def test_match_prefers_longest_listed_parent() -> None:
    api = AIService(name="API", category="a", domains=("api.example.com",))
    root = AIService(name="Root", category="b", domains=("example.com",))
    catalog = ServiceCatalog.from_services([root, api])
    assert catalog.match("v1.api.example.com") == api
    assert catalog.match("www.example.com") == root


def test_match_never_tries_bare_last_label() -> None:
    tld = AIService(name="Everything", category="tld", domains=("com",))
    catalog = ServiceCatalog.from_services([tld])
    assert catalog.match("api.openai.com") is None
    # exact lookup still applies
    assert catalog.match("com") == tld


def test_match_normalizes_input(services_file: Path) -> None:
    catalog = load_catalog(services_file)
    svc = catalog.match("Chat.OpenAI.COM.")
    assert svc is not None
    assert svc.name == "OpenAI"


def test_unknown_domain_has_no_match(services_file: Path) -> None:
    catalog = load_catalog(services_file)
    assert catalog.match("example.com") is None
    assert catalog.match("") is None
    assert catalog.match("openai.com.evil.net") is None


def test_candidate_suffixes_order() -> None:
    assert list(candidate_suffixes("a.b.openai.com")) == ["b.openai.com", "openai.com"]
    assert list(candidate_suffixes("openai.com")) == []
    assert list(candidate_suffixes("localhost")) == []


def test_match_domain_on_plain_mapping() -> None:
    assert match_domain({"openai.com": "x"}, "deep.api.openai.com") == "x"


def test_merge_custom_catalog_overrides_collisions(
    tmp_path: Path, services_file: Path, write_services
) -> None:
    custom = write_services(
        tmp_path / "custom.json",
        {
            "services": [
                {"name": "Internal Gateway", "category": "Sanctioned", "domains": ["API.openai.com"]},
                {"name": "Local LLM", "category": "Self-hosted", "domains": ["llm.corp.example"]},
            ]
        },
    )
    base = load_catalog(services_file)
    merged = merge_catalog(custom, base)

    svc = merged.match("api.openai.com")
    assert svc is not None
    assert (svc.name, svc.category) == ("Internal Gateway", "Sanctioned")
    assert merged.match("beta.api.openai.com").name == "Internal Gateway"
    assert merged.match("openai.com").name == "OpenAI"
    assert merged.match("llm.corp.example").name == "Local LLM"
    # the base catalog value is not mutated
    assert base.match("api.openai.com").name == "OpenAI"
    assert merged.domain_count == base.domain_count + 1


def test_catalog_index_is_read_only(services_file: Path) -> None:
    catalog = load_catalog(services_file)
    with pytest.raises(TypeError):
        catalog.index["new.example"] = catalog.index["openai.com"]  # type: ignore[index]


def test_load_catalog_missing_file(tmp_path: Path) -> None:
    with pytest.raises(CatalogError, match="reading services file"):
        load_catalog(tmp_path / "nope.json")


def test_load_catalog_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError, match="parsing services file"):
        load_catalog(path)


def test_load_catalog_invalid_structure(tmp_path: Path, write_services) -> None:
    path = write_services(tmp_path / "bad.json", {"services": [{"name": "x", "domains": "oops"}]})
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_merge_catalog_missing_file(tmp_path: Path, services_file: Path) -> None:
    with pytest.raises(CatalogError):
        merge_catalog(tmp_path / "missing.json", load_catalog(services_file))


def test_default_services_path_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHADOW_HUNTER_SERVICES", str(tmp_path / "svc.json"))
    assert default_services_path() == tmp_path / "svc.json"


def test_bundled_catalog_loads(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHADOW_HUNTER_SERVICES", raising=False)
    catalog = load_catalog(default_services_path())
    assert catalog.service_count > 10
    assert catalog.match("api.openai.com") is not None
    assert catalog.match("www.example.org") is None
