"""Priority-ordered composition of configuration sources.

Purpose
-------
Present many independent configuration sources as one logical configuration.
Each source joins with a priority; reads search sources in ascending priority
order and the first hit wins, writes land in the first writeable source, and
key enumeration merges the key space of every source.

Contents
--------
* :class:`LayeredStore` – ordered layer list plus the delegating operations.

System Role
-----------
Sits between the adapters (which implement
:class:`lib_layered_store.application.ports.ConfigSource`) and the
composition root. The store itself satisfies ``ConfigSource`` so stores nest.

Not internally synchronised: assemble once, then read from as many threads as
needed while no ``add``/``set_raw`` is in flight.
"""

from __future__ import annotations

import warnings
from typing import Iterator

from ..domain.errors import NoWriteableLayer
from ..domain.layer import LayerEntry, Ownership
from ..observability import log_debug, log_error, make_event
from .ports import ConfigSource


class LayeredStore:
    """Configuration made of prioritised layers.

    Lower priority values take precedence. Among layers sharing a priority the
    one added first wins. Layers are added as shared by default: the store
    never closes them. Pass ``shared=False`` to hand the source over; the store
    then closes it in :meth:`close`.

    Examples
    --------
    >>> from lib_layered_store.adapters.memory import MappingSource
    >>> store = LayeredStore()
    >>> store.add(MappingSource({"x": "1"}, read_only=True), 10)
    >>> store.add_writeable(MappingSource(), 5)
    >>> store.get_raw("x")
    '1'
    >>> store.set_raw("x", "2")
    >>> store.get_raw("x")
    '2'
    >>> store.enumerate()
    ['x']
    """

    def __init__(self) -> None:
        self._entries: list[LayerEntry] = []

    def __repr__(self) -> str:
        layers = ", ".join(f"{entry.label}@{entry.priority}" for entry in self._entries)
        return f"{type(self).__name__}([{layers}])"

    def __enter__(self) -> LayeredStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def entries(self) -> tuple[LayerEntry, ...]:
        """Return the layer list in lookup order."""

        return tuple(self._entries)

    def add(
        self,
        source: ConfigSource,
        priority: int = 0,
        *,
        writeable: bool = False,
        shared: bool = True,
        name: str | None = None,
    ) -> None:
        """Add *source* to the store at *priority*.

        Parameters
        ----------
        source:
            Any object implementing ``get_raw``/``set_raw``/``enumerate``.
        priority:
            Lower values are searched first. Defaults to ``0``.
        writeable:
            Mark the layer as a write target.
        shared:
            ``True`` keeps the source's lifetime with its other holders;
            ``False`` makes the store responsible for closing it.
        name:
            Label used by :meth:`origin` consumers and log events.

        Side Effects
        ------------
        Emits a ``layer_added`` debug event.
        """

        entry = LayerEntry(
            source=source,
            priority=priority,
            writeable=writeable,
            ownership=Ownership.from_flag(shared),
            name=name,
        )
        position = self._insert(entry)
        log_debug(
            "layer_added",
            **make_event(
                entry.label,
                priority,
                {"writeable": writeable, "ownership": entry.ownership.value, "position": position},
            ),
        )

    def add_writeable(
        self,
        source: ConfigSource,
        priority: int = 0,
        *,
        shared: bool = True,
        name: str | None = None,
    ) -> None:
        """Add *source* as a writeable layer; see :meth:`add`."""

        self.add(source, priority, writeable=True, shared=shared, name=name)

    def add_front(self, source: ConfigSource, *, shared: bool = True, name: str | None = None) -> None:
        """Add a read-only *source* ahead of every existing layer.

        .. deprecated::
            Pass an explicit priority to :meth:`add` instead.

        The new layer receives ``lowest() - 1``, or ``0`` in an empty store.
        """

        warnings.warn(
            "LayeredStore.add_front() is deprecated; use add() with an explicit priority",
            DeprecationWarning,
            stacklevel=2,
        )
        current = self.lowest()
        self.add(source, 0 if current is None else current - 1, shared=shared, name=name)

    def lowest(self) -> int | None:
        """Return the smallest priority present, or ``None`` for an empty store."""

        return self._entries[0].priority if self._entries else None

    def highest(self) -> int | None:
        """Return the largest priority present, or ``None`` for an empty store."""

        return self._entries[-1].priority if self._entries else None

    def get_raw(self, key: str) -> str | None:
        """Return the value of *key* from the first layer that has it.

        Writeability plays no part. ``None`` means no layer has the key.
        """

        for entry in self._entries:
            value = entry.source.get_raw(key)
            if value is not None:
                return value
        return None

    def set_raw(self, key: str, value: str) -> None:
        """Write *value* under *key* into the first writeable layer.

        Raises
        ------
        NoWriteableLayer
            When the store holds no writeable layer.

        Errors raised by the target source propagate unchanged; the write is
        never retried against a later layer.
        """

        entry = self._first_writeable()
        if entry is None:
            log_error("write_rejected", key=key, layers=len(self._entries))
            raise NoWriteableLayer(f"Cannot set {key!r}: the store has no writeable layer")
        entry.source.set_raw(key, value)
        log_debug("value_written", **make_event(entry.label, entry.priority, {"key": key}))

    def enumerate(self, prefix: str = "") -> list[str]:
        """Return the union of every layer's keys under *prefix*.

        Keys keep the order in which they are first met, walking the layers in
        lookup order. A key offered by several layers appears once.
        """

        seen: dict[str, None] = {}
        for entry in self._entries:
            for key in entry.source.enumerate(prefix):
                seen.setdefault(key, None)
        return list(seen)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return :meth:`get_raw` for *key*, or *default* when no layer has it.

        Examples
        --------
        >>> LayeredStore().get("missing", "fallback")
        'fallback'
        """

        value = self.get_raw(key)
        return default if value is None else value

    def has(self, key: str) -> bool:
        """Return ``True`` when any layer resolves *key*."""

        return self.get_raw(key) is not None

    def origin(self, key: str) -> LayerEntry | None:
        """Return the layer entry that supplies *key*, or ``None``.

        Examples
        --------
        >>> from lib_layered_store.adapters.memory import MappingSource
        >>> store = LayeredStore()
        >>> store.add(MappingSource({"a": 1}), name="defaults")
        >>> store.origin("a").name
        'defaults'
        >>> store.origin("b") is None
        True
        """

        for entry in self._entries:
            if entry.source.get_raw(key) is not None:
                return entry
        return None

    def close(self) -> None:
        """Tear the layer list down as a whole.

        Exclusively owned sources are closed; shared sources are only dropped.
        The store is empty afterwards and may be filled again.

        Raises
        ------
        Exception
            The first error raised by a source's ``close()``, re-raised once
            every other entry has been released.
        """

        entries, self._entries = self._entries, []
        released = 0
        first_error: Exception | None = None
        for entry in entries:
            try:
                closed = entry.release()
            except Exception as exc:
                log_error("source_release_failed", **make_event(entry.label, entry.priority, {"error": str(exc)}))
                if first_error is None:
                    first_error = exc
                continue
            if closed:
                released += 1
                log_debug("source_released", **make_event(entry.label, entry.priority))
        log_debug("store_closed", layers=len(entries), released=released)
        if first_error is not None:
            raise first_error

    def __iter__(self) -> Iterator[LayerEntry]:
        return iter(tuple(self._entries))

    def _insert(self, entry: LayerEntry) -> int:
        """Place *entry* before the first layer with a strictly greater priority."""

        for index, existing in enumerate(self._entries):
            if existing.priority > entry.priority:
                self._entries.insert(index, entry)
                return index
        self._entries.append(entry)
        return len(self._entries) - 1

    def _first_writeable(self) -> LayerEntry | None:
        for entry in self._entries:
            if entry.writeable:
                return entry
        return None
