"""Domain matching against the service catalog's domain index."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TypeVar

T = TypeVar("T")


def candidate_suffixes(domain: str) -> Iterator[str]:
    """Yield parent domains, longest first, never the bare last label.

    ``a.b.openai.com`` -> ``b.openai.com``, ``openai.com``
    """
    labels = domain.split(".")
    for i in range(1, len(labels) - 1):
        yield ".".join(labels[i:])


def match_domain(index: Mapping[str, T], domain: str) -> T | None:
    """Return the owner of ``domain`` or of its closest listed parent."""
    domain = domain.lower().rstrip(".")

    owner = index.get(domain)
    if owner is not None:
        return owner

    for parent in candidate_suffixes(domain):
        owner = index.get(parent)
        if owner is not None:
            return owner
    return None
