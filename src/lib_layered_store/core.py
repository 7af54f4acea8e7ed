"""Composition root for ``lib_layered_store``.

Purpose
-------
Provide the single entry point that wires the file, dotenv, and environment
adapters into a :class:`LayeredStore` with a fixed precedence, topped by a
writeable in-memory layer so the assembled store always accepts writes.

Contents
--------
* ``PRIORITY_*`` – precedence constants (lower wins).
* :class:`LayerLoadError` – error raised when a layer fails to materialise.
* :func:`build_store` – high-level API returning an assembled store.
* :func:`_file_sources` – internal helper loading the ``files`` layers.

System Role
-----------
This is the canonical location for adjusting precedence rules or wiring new
adapters. Every adapter source it creates is handed to the store with
exclusive ownership; closing the store releases them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final, Mapping, Sequence

from .adapters.dotenv.default import DotEnvSource
from .adapters.env.default import EnvSource, default_env_prefix
from .adapters.file_loaders.structured import FileSource
from .adapters.memory.default import MappingSource
from .application.snapshot import provenance, snapshot
from .application.store import LayeredStore
from .domain.errors import (
    ConfigError,
    InvalidFormat,
    InvalidKey,
    NotFound,
    NoWriteableLayer,
    ReadOnlySource,
)
from .domain.layer import LayerEntry, Ownership
from .observability import bind_trace_id, log_debug, log_info, make_event

PRIORITY_OVERRIDES: Final[int] = -300
PRIORITY_ENV: Final[int] = -200
PRIORITY_DOTENV: Final[int] = -100
PRIORITY_FILES: Final[int] = 100


class LayerLoadError(ConfigError):
    """Raised when a configuration layer cannot be materialised.

    Wraps :class:`InvalidFormat` or other adapter exceptions with the layer
    name and file path so callers catch a single exception family.
    """


def build_store(
    *,
    files: Sequence[str | Path] = (),
    slug: str | None = None,
    start_dir: str | None = None,
    dotenv: bool = False,
    overrides: Mapping[str, object] | None = None,
) -> LayeredStore:
    """Assemble the standard layered store.

    Precedence, highest first:

    1. ``overrides`` – writeable in-memory layer, always present.
    2. ``env`` – variables under :func:`default_env_prefix` of *slug*.
    3. ``dotenv`` – first `.env` found upwards from *start_dir*.
    4. ``files`` – listed from lowest to highest precedence, so later files
       win over earlier ones. Missing files are skipped.

    Raises
    ------
    LayerLoadError
        When a file or dotenv layer exists but cannot be parsed.
        Layers loaded before the failure are closed first.

    Side Effects
    ------------
    Clears the trace identifier and emits ``layer_loaded`` and
    ``store_assembled`` events.

    Examples
    --------
    >>> store = build_store(overrides={"service": {"mode": "test"}})
    >>> store.get_raw("service.mode")
    'test'
    >>> store.set_raw("service.retries", "3")
    >>> store.origin("service.retries").name
    'overrides'
    """

    bind_trace_id(None)
    store = LayeredStore()

    try:
        for index, source in enumerate(_file_sources(files)):
            priority = PRIORITY_FILES - index
            store.add(source, priority, shared=False, name=f"file:{source.path}")
            log_debug("layer_loaded", **make_event("file", priority, {"path": source.path}))

        if dotenv:
            dotenv_source = _dotenv_source(start_dir)
            if dotenv_source is not None:
                store.add(dotenv_source, PRIORITY_DOTENV, shared=False, name="dotenv")
                log_debug("layer_loaded", **make_event("dotenv", PRIORITY_DOTENV, {"path": dotenv_source.path}))

        if slug:
            env_source = _env_source(default_env_prefix(slug))
            store.add(env_source, PRIORITY_ENV, shared=False, name="env")
            log_debug("layer_loaded", **make_event("env", PRIORITY_ENV, {"prefix": env_source.prefix}))

        store.add_writeable(MappingSource(overrides), PRIORITY_OVERRIDES, shared=False, name="overrides")
    except Exception:
        store.close()
        raise
    log_info("store_assembled", layer="final", priority=None, total_layers=len(store.entries))
    return store


def _file_sources(paths: Sequence[str | Path]) -> list[FileSource]:
    """Load every existing file in *paths*, preserving their order.

    Examples
    --------
    >>> _file_sources(["/nonexistent/config.toml"])
    []
    """

    collected: list[FileSource] = []
    for path in paths:
        try:
            collected.append(FileSource.from_path(path))
        except NotFound:
            continue
        except InvalidFormat as exc:
            log_debug("layer_error", layer="file", path=str(path), error=str(exc))
            raise LayerLoadError(f"Failed to load file layer {path}: {exc}") from exc
    return collected


def _dotenv_source(start_dir: str | None) -> DotEnvSource | None:
    try:
        return DotEnvSource.discover(start_dir)
    except InvalidFormat as exc:
        log_debug("layer_error", layer="dotenv", path=start_dir, error=str(exc))
        raise LayerLoadError(f"Failed to load dotenv layer: {exc}") from exc


def _env_source(prefix: str) -> EnvSource:
    try:
        return EnvSource.from_environ(prefix)
    except ValueError as exc:
        log_debug("layer_error", layer="env", path=None, error=str(exc))
        raise LayerLoadError(f"Failed to load environment layer {prefix}: {exc}") from exc


__all__ = [
    "ConfigError",
    "InvalidFormat",
    "InvalidKey",
    "LayerEntry",
    "LayerLoadError",
    "LayeredStore",
    "NoWriteableLayer",
    "NotFound",
    "Ownership",
    "PRIORITY_DOTENV",
    "PRIORITY_ENV",
    "PRIORITY_FILES",
    "PRIORITY_OVERRIDES",
    "ReadOnlySource",
    "build_store",
    "default_env_prefix",
    "provenance",
    "snapshot",
]
