"""Domain-level exception hierarchy.

Purpose
-------
Expose the error taxonomy shared by the layered store, the source adapters,
and consuming applications. The hierarchy lives in the domain layer so outer
layers may depend on it without creating import cycles.

Contents
--------
* :class:`ConfigError` – umbrella base class for all configuration issues.
* :class:`NoWriteableLayer` – a write reached a store without writeable layers.
* :class:`ReadOnlySource` – a write reached a source that refuses mutation.
* :class:`InvalidKey` – a write would turn a branch into a scalar or back.
* :class:`InvalidFormat` – parsing problems while reading files or dotenv.
* :class:`NotFound` – an optional configuration resource is missing.

System Role
-----------
The store raises :class:`NoWriteableLayer` itself and lets every other error
from a delegated source propagate unchanged. Callers catch
:class:`ConfigError` to handle all library failures uniformly.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_layered_store``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class NoWriteableLayer(ConfigError):
    """Raised by :meth:`LayeredStore.set_raw` when no layer accepts writes.

    Why
    ----
    Writes are never dropped or queued. The caller must add a writeable layer
    and retry the whole operation.
    """


class ReadOnlySource(ConfigError):
    """Raised by a source that was constructed read-only and received a write."""


class InvalidKey(ConfigError):
    """Raised when a write conflicts with the shape of a hierarchical source.

    Typical Sources
    ---------------
    Assigning ``a.b`` while ``a`` holds a scalar, or assigning ``a`` while it
    holds nested keys.
    """


class InvalidFormat(ConfigError):
    """Raised when an input artifact cannot be parsed into structured data.

    Typical Sources
    ---------------
    Structured file loaders (:mod:`tomllib`, :mod:`json`, :mod:`yaml`) and dotenv
    parsing helpers.
    """


class NotFound(ConfigError):
    """Represents missing-but-optional resources (files, directories, etc.).

    Why
    ----
    Allow adapters to signal absence without aborting the whole assembly. The
    composition root treats this as a non-fatal condition.
    """
