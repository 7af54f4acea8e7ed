"""Layer entry record used by :class:`lib_layered_store.application.store.LayeredStore`.

Purpose
-------
Describe one configuration source participating in a layered composition:
the source itself, its priority, whether it accepts writes, and who owns it.
The record carries no behaviour beyond releasing its source, so the ordering
and delegation algorithms stay ownership-agnostic.

Contents
--------
* :class:`Ownership` – shared vs exclusive ownership tag.
* :class:`LayerEntry` – immutable record stored in the layer list.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..application.ports import ConfigSource


class Ownership(str, Enum):
    """Who is responsible for releasing a layer's source.

    ``SHARED`` sources are managed elsewhere; the store only drops its
    reference. ``EXCLUSIVE`` sources are closed by the store on teardown.
    """

    SHARED = "shared"
    EXCLUSIVE = "exclusive"

    @classmethod
    def from_flag(cls, shared: bool) -> Ownership:
        """Translate the ``shared`` keyword used by the ``add`` family.

        Examples
        --------
        >>> Ownership.from_flag(True) is Ownership.SHARED
        True
        >>> Ownership.from_flag(False).value
        'exclusive'
        """

        return cls.SHARED if shared else cls.EXCLUSIVE


@dataclass(frozen=True, slots=True)
class LayerEntry:
    """One source in the layer list.

    Attributes
    ----------
    source:
        Object satisfying :class:`lib_layered_store.application.ports.ConfigSource`.
    priority:
        Lower values are consulted first for reads and preferred for writes.
    writeable:
        Whether :meth:`LayeredStore.set_raw` may target this entry.
    ownership:
        Release policy applied when the store is closed.
    name:
        Optional label reported by provenance lookups and log events.

    Examples
    --------
    >>> entry = LayerEntry(source={}, priority=5, name="defaults")
    >>> entry.writeable, entry.ownership.value
    (False, 'shared')
    >>> entry.label
    'defaults'
    """

    source: ConfigSource
    priority: int = 0
    writeable: bool = False
    ownership: Ownership = Ownership.SHARED
    name: str | None = None

    @property
    def exclusive(self) -> bool:
        return self.ownership is Ownership.EXCLUSIVE

    @property
    def label(self) -> str:
        """Return :attr:`name` or the source's class name when unnamed."""

        return self.name or type(self.source).__name__

    def release(self) -> bool:
        """Close the source when it is exclusively owned.

        Returns ``True`` when a ``close()`` call was made. Shared sources and
        sources without a callable ``close`` are left untouched.
        """

        if not self.exclusive:
            return False
        close = getattr(self.source, "close", None)
        if not callable(close):
            return False
        close()
        return True
