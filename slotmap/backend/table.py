# FILE: slotmap/backend/table.py
# ------------------------------------------------------------------------------
import logging
from typing import Any, Optional

from slotmap.buffer.allocator import GenerationalAllocator
from slotmap.buffer.layout import Key
from slotmap.config import DEFAULT_KEY_OPTIONS, KeyOptions
from slotmap.errors.fatal import AllocationError, SlotMapOverflowError
from slotmap.metrics.counters import TableMetrics

logger = logging.getLogger("slotmap.table")


class SlotMap:
    """Fixed-capacity associative container keyed by generational keys.

    ``insert`` hands out a :class:`Key`; the key resolves back to the value in
    O(1) until it is removed, after which lookups miss even if the slot has
    been reused for another value. Capacity is fixed at construction.

    Example::

        slots = SlotMap(100)
        key = slots.insert("hello, world!")
        assert slots.get(key) == "hello, world!"
        slots.remove(key)
        assert not slots.exists(key)

    Not thread safe; guard a shared table with one lock.
    """

    def __init__(
        self,
        capacity: int,
        options: KeyOptions = DEFAULT_KEY_OPTIONS,
        name: str = "default",
        export_metrics: bool = False,
    ):
        self._name = name
        self._allocator = GenerationalAllocator(capacity, options)
        try:
            self._values = [None] * capacity
        except MemoryError as exc:
            raise AllocationError("Failed to allocate value storage", context={"capacity": capacity}) from exc
        self._metrics = TableMetrics(name, export=export_metrics)
        self._metrics.set_live(0)

    @property
    def name(self) -> str:
        return self._name

    @property
    def capacity(self) -> int:
        return self._allocator.capacity

    @property
    def options(self) -> KeyOptions:
        return self._allocator.options

    @property
    def saturated_generations(self) -> int:
        """Slots retired because their generation counter ran out."""
        return self._allocator.saturated_generations

    @property
    def next_index(self) -> int:
        return self._allocator.next_index

    @property
    def free_count(self) -> int:
        return self._allocator.free_count

    def insert(self, value: Any) -> Key:
        """Store ``value`` and return a new persistent key for it.

        Raises :class:`SlotMapOverflowError` (leaving the table untouched) when
        no free or never-used slot is left.
        """
        try:
            index, generation = self._allocator.allocate()
        except SlotMapOverflowError:
            self._metrics.inc_overflow()
            logger.debug("Insert rejected, table full", extra={"table": self._name, "error_code": "overflow"})
            raise
        self._values[index] = value
        self._metrics.inc_insert()
        self._metrics.set_live(self.count())
        return Key(index=index, generation=generation)

    put = insert

    def exists(self, key: Optional[Key]) -> bool:
        """True while ``key`` still refers to its value.

        ``None`` and keys carrying the invalid generation are never live. A key
        this table never issued raises :class:`ForeignKeyError` in debug runs.
        """
        return self._allocator.is_live(key)

    contains_key = exists

    def get(self, key: Optional[Key], default: Any = None) -> Any:
        if not self._allocator.is_live(key):
            self._metrics.inc_read_miss()
            return default
        self._metrics.inc_read_ok()
        return self._values[key.index]

    def remove(self, key: Optional[Key]) -> None:
        """Release ``key``. Stale keys are ignored, so calling twice is harmless.

        The slot's generation advances, so the key (and any copy of it) stops
        resolving. A slot whose generation saturates is never handed out again.
        """
        if not self._owns(key):
            return
        index = key.index
        self._values[index] = None
        self._metrics.inc_remove()
        if self._allocator.retire(index):
            self._metrics.inc_saturation()
        self._metrics.set_live(self.count())

    def recycle(self, key: Optional[Key]) -> None:
        """Release ``key`` for reuse *without* advancing the slot's generation.

        This avoids burning generations, at a price: ``key`` keeps resolving
        until the slot is reused, and after reuse it is indistinguishable from
        the new occupant's key. Only use this once no copy of ``key`` will be
        looked up again; prefer :meth:`remove`.
        """
        if not self._owns(key):
            return
        self._allocator.recycle(key.index)
        self._metrics.inc_recycle()
        self._metrics.set_live(self.count())

    def _owns(self, key: Optional[Key]) -> bool:
        return self._allocator.is_live(key) and not self._allocator.is_vacant(key.index)

    def count(self) -> int:
        return self._allocator.count

    def reset(self) -> None:
        """Drop every value and forget every key, keeping the allocated storage."""
        self._allocator.reset()
        for index in range(len(self._values)):
            self._values[index] = None
        logger.debug("Table reset", extra={"table": self._name})
        self._metrics.set_live(0)

    recycle_all = reset

    def stats(self) -> dict:
        base_stats = self._metrics.snapshot()
        base_stats["table"] = self._name
        base_stats["capacity"] = self.capacity
        base_stats["count"] = self.count()
        base_stats["next_index"] = self.next_index
        base_stats["free_count"] = self.free_count
        base_stats["saturated_generations"] = self.saturated_generations
        return base_stats

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key) -> bool:
        return isinstance(key, Key) and self.exists(key)

    def __getitem__(self, key: Key) -> Any:
        if not self._allocator.is_live(key):
            self._metrics.inc_read_miss()
            raise KeyError(key)
        self._metrics.inc_read_ok()
        return self._values[key.index]

    def __setitem__(self, key: Key, value: Any) -> None:
        if not self._allocator.is_live(key):
            raise KeyError(key)
        self._values[key.index] = value

    def __repr__(self) -> str:
        return f"SlotMap(name={self._name!r}, count={self.count()}, capacity={self.capacity})"
