"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that sources and loaders must satisfy so the
layered store and the composition root can orchestrate behaviour without
depending on concrete implementations.

Contents
--------
* :class:`ConfigSource` – the single-layer capability consumed by the store.
* :class:`FileLoader` – parses structured configuration artifacts.
* :class:`DotEnvLoader` – loads ``.env`` files.
* :class:`EnvLoader` – materialises process environment variables.

System Role
-----------
These protocols enforce Dependency Inversion. Any object with the right
methods is a valid layer, including another
:class:`lib_layered_store.application.store.LayeredStore`.
"""

from __future__ import annotations

from typing import Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ConfigSource(Protocol):
    """One configuration layer with raw string lookup, write, and enumeration.

    Why
    ----
    The store only needs these three primitives to compose layers. How a
    source parses, stores, or structures its keys is its own business.

    Methods
    -------
    :meth:`get_raw`
        Return the value for *key* or ``None`` when the source lacks it.
    :meth:`set_raw`
        Store *value* under *key* or raise when the source refuses.
    :meth:`enumerate`
        Return the child key names below *prefix*, in the source's order.
    """

    def get_raw(self, key: str) -> str | None:
        """Return the raw value for *key*, or ``None`` when absent."""

    def set_raw(self, key: str, value: str) -> None:
        """Store *value* under *key*; raise a ``ConfigError`` on refusal."""

    def enumerate(self, prefix: str = "") -> Sequence[str]:
        """Return the names of the direct children of *prefix*."""


@runtime_checkable
class FileLoader(Protocol):
    """Parse a structured configuration file into a mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping representation or raise ``InvalidFormat``."""


@runtime_checkable
class DotEnvLoader(Protocol):
    """Materialise a ``.env`` file into nested dictionaries."""

    def load(self, start_dir: str | None = None) -> Mapping[str, object]:
        """Search from *start_dir* upwards and return the first parsed file."""


@runtime_checkable
class EnvLoader(Protocol):
    """Translate process environment variables into nested dictionaries."""

    def load(self, prefix: str) -> Mapping[str, object]:
        """Return variables that match *prefix* (case-insensitive, ``__`` for nesting)."""
