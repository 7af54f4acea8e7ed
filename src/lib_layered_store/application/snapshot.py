"""Resolve the visible key space of a source into flat dotted entries.

Purpose
-------
:meth:`LayeredStore.enumerate` reports key names, not values. Tooling that
wants the whole effective configuration (CLI dumps, debugging) combines it
with lookups; this module does that walk once, and optionally reports which
layer won each key.

Contents
--------
* :func:`snapshot` – ``{dotted_key: value}`` for everything under a prefix.
* :func:`provenance` – ``{dotted_key: {"layer", "priority", "key"}}`` for a store.
"""

from __future__ import annotations

from typing import Iterable

from .ports import ConfigSource
from .store import LayeredStore


def snapshot(source: ConfigSource, prefix: str = "") -> dict[str, str]:
    """Return every resolvable key below *prefix* with its value.

    Keys are reported fully dotted, depth-first, in enumeration order. A key
    that carries a value and also has children contributes both.

    Examples
    --------
    >>> from lib_layered_store.adapters.memory import MappingSource
    >>> store = LayeredStore()
    >>> store.add(MappingSource({"db": {"host": "localhost", "port": 5432}}))
    >>> store.add(MappingSource({"db": {"host": "remote"}, "debug": True}), 10)
    >>> snapshot(store)
    {'db.host': 'localhost', 'db.port': '5432', 'debug': 'true'}
    """

    resolved: dict[str, str] = {}
    _walk(source, prefix, resolved)
    return resolved


def provenance(store: LayeredStore, keys: Iterable[str]) -> dict[str, dict[str, object]]:
    """Describe the winning layer for each of *keys* that resolves.

    Examples
    --------
    >>> from lib_layered_store.adapters.memory import MappingSource
    >>> store = LayeredStore()
    >>> store.add(MappingSource({"debug": True}), 7, name="defaults")
    >>> provenance(store, ["debug", "missing"])
    {'debug': {'layer': 'defaults', 'priority': 7, 'key': 'debug'}}
    """

    meta: dict[str, dict[str, object]] = {}
    for key in keys:
        entry = store.origin(key)
        if entry is not None:
            meta[key] = {"layer": entry.label, "priority": entry.priority, "key": key}
    return meta


def _walk(source: ConfigSource, prefix: str, resolved: dict[str, str]) -> None:
    for name in source.enumerate(prefix):
        dotted = f"{prefix}.{name}" if prefix else name
        value = source.get_raw(dotted)
        if value is not None:
            resolved[dotted] = value
        _walk(source, dotted, resolved)
