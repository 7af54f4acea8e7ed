"""In-memory hierarchical source.

Purpose
-------
Implement :class:`lib_layered_store.application.ports.ConfigSource` over a
nested dictionary addressed with dotted keys. File, dotenv, and environment
sources reuse it once their loaders produced a mapping.

Key behaviours
--------------
* ``get_raw("a.b")`` walks nested mappings; branches and missing keys yield
  ``None``.
* Leaves are reported as strings: booleans become ``true``/``false``, lists
  and tuples are rendered as JSON, ``None`` leaves count as missing.
* ``set_raw`` creates intermediate branches, refuses to replace a scalar with
  a branch (or the reverse) and refuses everything when read-only.
* ``enumerate(prefix)`` lists the direct children of ``prefix``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping

from ...domain.errors import InvalidKey, ReadOnlySource


class MappingSource:
    """Configuration source backed by a nested ``dict``.

    Examples
    --------
    >>> source = MappingSource({"service": {"timeout": 5, "debug": False}})
    >>> source.get_raw("service.timeout")
    '5'
    >>> source.get_raw("service.debug")
    'false'
    >>> source.get_raw("service") is None
    True
    >>> source.enumerate("service")
    ['timeout', 'debug']
    >>> source.set_raw("service.endpoint", "https://api")
    >>> source.enumerate("service")
    ['timeout', 'debug', 'endpoint']
    """

    def __init__(self, data: Mapping[str, object] | None = None, *, read_only: bool = False) -> None:
        """Copy *data* so later mutations of the caller's mapping do not leak in.

        Parameters
        ----------
        data:
            Nested mapping of configuration values.
        read_only:
            Reject every :meth:`set_raw` call with :class:`ReadOnlySource`.
        """

        self._data: dict[str, object] = _clone_tree(data or {})
        self.read_only = read_only
        self.closed = False

    def __repr__(self) -> str:
        mode = "ro" if self.read_only else "rw"
        return f"{type(self).__name__}(keys={list(self._data)!r}, {mode})"

    def get_raw(self, key: str) -> str | None:
        node = _resolve(self._data, key)
        if node is None or isinstance(node, Mapping):
            return None
        return _stringify(node)

    def set_raw(self, key: str, value: str) -> None:
        """Store *value* under the dotted *key*.

        Raises
        ------
        ReadOnlySource
            When the source was created with ``read_only=True``.
        InvalidKey
            When *key* is malformed or conflicts with the existing shape.
        """

        if self.read_only:
            raise ReadOnlySource(f"Cannot set {key!r}: {type(self).__name__} is read-only")
        parts = _split(key)
        cursor = self._data
        for depth, part in enumerate(parts[:-1]):
            child = cursor.setdefault(part, {})
            if not isinstance(child, dict):
                blocker = ".".join(parts[: depth + 1])
                raise InvalidKey(f"Cannot set {key!r}: {blocker!r} holds a scalar value")
            cursor = child
        if isinstance(cursor.get(parts[-1]), dict):
            raise InvalidKey(f"Cannot set {key!r}: the key holds nested values")
        cursor[parts[-1]] = value

    def enumerate(self, prefix: str = "") -> list[str]:
        node = self._data if not prefix else _resolve(self._data, prefix)
        if not isinstance(node, Mapping):
            return []
        return list(node.keys())

    def as_dict(self) -> dict[str, object]:
        """Return a deep, mutable copy of the stored tree."""

        return _clone_tree(self._data)

    def close(self) -> None:
        """Release the stored tree. Reads afterwards behave like an empty source."""

        self._data = {}
        self.closed = True


def _split(key: str) -> list[str]:
    """Split a dotted *key*, rejecting empty segments.

    Examples
    --------
    >>> _split("a.b")
    ['a', 'b']
    >>> _split("a..b")
    Traceback (most recent call last):
    ...
    lib_layered_store.domain.errors.InvalidKey: Malformed key 'a..b'
    """

    parts = key.split(".")
    if not all(parts):
        raise InvalidKey(f"Malformed key {key!r}")
    return parts


def _resolve(tree: Mapping[str, object], key: str) -> object | None:
    """Return the node stored under dotted *key*, or ``None`` when absent."""

    if not key:
        return None
    current: object = tree
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current


def _stringify(value: object) -> str:
    """Render a leaf value using the textual conventions of configuration files.

    Examples
    --------
    >>> _stringify(True), _stringify(3.5), _stringify(["a", 1])
    ('true', '3.5', '["a", 1]')
    """

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), ensure_ascii=False, default=str)
    return str(value)


def _clone_tree(mapping: Mapping[str, object]) -> dict[str, object]:
    """Recursively copy nested mappings into plain dictionaries."""

    result: dict[str, object] = {}
    for key, value in mapping.items():
        if isinstance(value, Mapping):
            result[str(key)] = _clone_tree(value)
        elif isinstance(value, list):
            result[str(key)] = list(value)
        else:
            result[str(key)] = value
    return result
