"""In-memory configuration sources."""

from __future__ import annotations

from .default import MappingSource

__all__ = ["MappingSource"]
