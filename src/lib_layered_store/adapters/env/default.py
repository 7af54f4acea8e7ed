"""Environment variable adapter.

Purpose
-------
Expose process environment variables as a read-only configuration layer.

Key behaviours
--------------
* Only variables under ``<PREFIX>_`` are captured (see :func:`default_env_prefix`).
* ``__`` is the nesting delimiter (``DEMO_DB__HOST`` becomes key ``db.host``).
* Key segments are lower-cased; values are kept verbatim as strings.
* Emits structured logging via :mod:`lib_layered_store.observability`.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...observability import log_debug
from ..memory.default import MappingSource


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-layered-store')
    'LIB_LAYERED_STORE'
    """

    return slug.replace("-", "_").upper()


class DefaultEnvLoader:
    """Load environment variables that belong to the configuration namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Read from *environ* instead of :data:`os.environ` when given."""

        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str) -> dict[str, object]:
        """Return a nested mapping of the variables carrying *prefix*.

        Parameters
        ----------
        prefix:
            Prefix filter (upper-case). The loader appends ``_`` if missing.

        Side Effects
        ------------
        Emits ``env_variables_loaded`` debug events with the top-level keys.

        Examples
        --------
        >>> loader = DefaultEnvLoader(environ={'DEMO_DB__PORT': '5432', 'OTHER': 'x'})
        >>> loader.load('DEMO')
        {'db': {'port': '5432'}}
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        collected: dict[str, object] = {}
        for key, value in self._environ.items():
            if prefix and not key.startswith(prefix):
                continue
            stripped = key[len(prefix) :] if prefix else key
            if not stripped:
                continue
            assign_nested(collected, stripped, value)
        log_debug("env_variables_loaded", layer="env", priority=None, keys=sorted(collected.keys()))
        return collected


class EnvSource(MappingSource):
    """Read-only layer over the environment variables sharing one prefix."""

    def __init__(self, data: Mapping[str, object], *, prefix: str) -> None:
        super().__init__(data, read_only=True)
        self.prefix = prefix

    @classmethod
    def from_environ(cls, prefix: str, environ: Mapping[str, str] | None = None) -> EnvSource:
        """Snapshot the variables under *prefix* into a new source.

        Examples
        --------
        >>> source = EnvSource.from_environ('DEMO', {'DEMO_SERVICE__MODE': 'debug'})
        >>> source.get_raw('service.mode')
        'debug'
        """

        return cls(DefaultEnvLoader(environ=environ).load(prefix), prefix=prefix)


def assign_nested(
    target: dict[str, object], key: str, value: object, *, error_cls: type[Exception] = ValueError
) -> None:
    """Assign ``value`` inside ``target`` using ``__`` as a nesting delimiter.

    Raises *error_cls* when a scalar blocks the nested path.

    Examples
    --------
    >>> data: dict[str, object] = {}
    >>> assign_nested(data, 'SERVICE__TIMEOUT', '5')
    >>> data
    {'service': {'timeout': '5'}}
    """

    parts = key.split("__")
    cursor = target
    for part in parts[:-1]:
        cursor = _ensure_child_mapping(cursor, part, error_cls=error_cls)
    cursor[_resolve_key(cursor, parts[-1])] = value


def _resolve_key(mapping: dict[str, object], key: str) -> str:
    """Return an existing key matching ``key`` case-insensitively, or a new lowercase key."""

    lower = key.lower()
    for existing in mapping.keys():
        if existing.lower() == lower:
            return existing
    return lower


def _ensure_child_mapping(mapping: dict[str, object], key: str, *, error_cls: type[Exception]) -> dict[str, object]:
    """Ensure ``mapping[key]`` is a ``dict``, creating it when missing."""

    resolved = _resolve_key(mapping, key)
    if resolved not in mapping:
        mapping[resolved] = {}
    child = mapping[resolved]
    if not isinstance(child, dict):
        raise error_cls(f"Cannot override scalar with mapping for key {key}")
    return child
