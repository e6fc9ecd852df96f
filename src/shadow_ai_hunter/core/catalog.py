"""AI service catalog: loading, merging and the domain index."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .formats.fields import normalize_domain
from .matcher import match_domain

logger = logging.getLogger(__name__)

SERVICES_ENV = "SHADOW_HUNTER_SERVICES"
BUNDLED_SERVICES = "ai_services.json"


class CatalogError(RuntimeError):
    """The services file is missing, unreadable or not a valid service list."""


class AIService(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Display name of the AI service.")
    category: str = Field(description="Category label (e.g. 'LLM Chat', 'Code Assistant').")
    domains: tuple[str, ...] = Field(default=(), description="Domains owned by the service.")


class ServicesFile(BaseModel):
    services: list[AIService] = Field(description="Tracked AI services.")


def _build_index(
    services: Iterable[AIService],
    base: Mapping[str, AIService] | None = None,
) -> dict[str, AIService]:
    """Flatten services into a domain index; later services win collisions."""
    index = dict(base or {})
    for svc in services:
        for domain in svc.domains:
            index[normalize_domain(domain)] = svc
    return index


@dataclass(frozen=True)
class ServiceCatalog:
    """Read-only domain index mapping lower-cased domains to their service."""

    index: Mapping[str, AIService] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_services(cls, services: Iterable[AIService]) -> ServiceCatalog:
        return cls(index=MappingProxyType(_build_index(services)))

    def with_services(self, services: Iterable[AIService]) -> ServiceCatalog:
        """Return a new catalog with ``services`` layered over this one."""
        return ServiceCatalog(index=MappingProxyType(_build_index(services, self.index)))

    def match(self, domain: str) -> AIService | None:
        """Return the service owning ``domain`` (exact or parent-domain match)."""
        return match_domain(self.index, domain)

    @property
    def domain_count(self) -> int:
        return len(self.index)

    @property
    def service_count(self) -> int:
        return len({svc.name for svc in self.index.values()})

    @property
    def services(self) -> list[AIService]:
        """Distinct index owners, in first-seen order."""
        seen: dict[str, AIService] = {}
        for svc in self.index.values():
            seen.setdefault(svc.name, svc)
        return list(seen.values())


def read_services_file(path: str | Path) -> ServicesFile:
    """Read and validate a services JSON file."""
    p = Path(path)
    try:
        data = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"reading services file {p}: {e}") from e

    try:
        return ServicesFile.model_validate_json(data)
    except ValidationError as e:
        raise CatalogError(f"parsing services file {p}: {e}") from e


def load_catalog(path: str | Path) -> ServiceCatalog:
    """Build a catalog from the base services file."""
    catalog = ServiceCatalog.from_services(read_services_file(path).services)
    logger.debug("Loaded base catalog %s (%d domains)", path, catalog.domain_count)
    return catalog


def merge_catalog(path: str | Path, catalog: ServiceCatalog) -> ServiceCatalog:
    """Layer a custom services file over ``catalog``; custom entries win ties."""
    merged = catalog.with_services(read_services_file(path).services)
    logger.debug("Merged custom catalog %s (%d domains)", path, merged.domain_count)
    return merged


def default_services_path() -> Path:
    """Services file from SHADOW_HUNTER_SERVICES, else the bundled catalog."""
    env = os.getenv(SERVICES_ENV)
    if env:
        return Path(env)
    return Path(str(resources.files("shadow_ai_hunter").joinpath("data", BUNDLED_SERVICES)))
