"""Public package surface for ``lib_layered_store``.

Exports the layered store, the source adapters, the composition root, and the
logging helpers so consumers only need ``import lib_layered_store``.
"""

from __future__ import annotations

from .adapters.dotenv.default import DotEnvSource
from .adapters.env.default import EnvSource
from .adapters.file_loaders.structured import FileSource
from .adapters.memory.default import MappingSource
from .application.ports import ConfigSource
from .core import (
    ConfigError,
    InvalidFormat,
    InvalidKey,
    LayerEntry,
    LayerLoadError,
    LayeredStore,
    NoWriteableLayer,
    NotFound,
    Ownership,
    PRIORITY_DOTENV,
    PRIORITY_ENV,
    PRIORITY_FILES,
    PRIORITY_OVERRIDES,
    ReadOnlySource,
    build_store,
    default_env_prefix,
    provenance,
    snapshot,
)
from .observability import bind_trace_id, get_logger

__all__ = [
    "ConfigError",
    "ConfigSource",
    "DotEnvSource",
    "EnvSource",
    "FileSource",
    "InvalidFormat",
    "InvalidKey",
    "LayerEntry",
    "LayerLoadError",
    "LayeredStore",
    "MappingSource",
    "NoWriteableLayer",
    "NotFound",
    "Ownership",
    "PRIORITY_DOTENV",
    "PRIORITY_ENV",
    "PRIORITY_FILES",
    "PRIORITY_OVERRIDES",
    "ReadOnlySource",
    "bind_trace_id",
    "build_store",
    "default_env_prefix",
    "get_logger",
    "provenance",
    "snapshot",
]
