"""Structured logging helpers for layer assembly and store mutations.

Purpose
    Keep every log emission predictable and contextual so host applications can
    follow how a layered store was assembled and where writes landed, without
    forcing a specific logging backend on them.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: builder for layer-scoped event payloads.

System Integration
    Used by the store, the adapters, and the composition root. Lookups are not
    logged; they sit on the hot path of every configuration read.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_layered_store_trace_id", default=None)
"""Current trace identifier attached to every structured log entry."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_layered_store")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Examples
    --------
    >>> bind_trace_id('assembly-1')
    >>> TRACE_ID.get()
    'assembly-1'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    layer: str,
    priority: int | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured payload describing one layer of a store.

    Why
        Downstream log processors can rely on stable ``layer``/``priority``
        keys regardless of which component emitted the event.
    Inputs
        layer: Label of the layer being observed.
        priority: Priority of the layer, or ``None`` before it is placed.
        payload: Optional mapping with extra diagnostic detail.

    Examples
    --------
    >>> make_event('env', -200, {'writeable': False})
    {'layer': 'env', 'priority': -200, 'writeable': False}
    """

    event: dict[str, Any] = {"layer": layer, "priority": priority}
    if payload:
        event |= dict(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_trace(fields)})


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context
