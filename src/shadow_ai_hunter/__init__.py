"""Shadow AI Hunter: detect unsanctioned AI service usage in network logs."""

from __future__ import annotations

__version__ = "1.0.0"
