# FILE: slotmap/buffer/allocator.py
# ------------------------------------------------------------------------------
import logging
from typing import Optional, Tuple

import numpy as np

from slotmap.buffer.layout import Key
from slotmap.config import DEFAULT_KEY_OPTIONS, KeyOptions
from slotmap.errors.fatal import (
    AllocationError,
    ConfigurationError,
    ForeignKeyError,
    SlotMapOverflowError,
)

logger = logging.getLogger("slotmap.allocator")


class GenerationalAllocator:
    """Fixed-capacity index allocator with per-slot generation counters.

    Indices come from a LIFO free list first, then from the never-used range
    ``[next_index, capacity)``. A slot whose generation reaches the reserved
    ``invalid`` value is retired for good.
    """

    def __init__(self, capacity: int, options: KeyOptions = DEFAULT_KEY_OPTIONS):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ConfigurationError("Capacity must be a non-negative int", context={"capacity": capacity})
        if capacity > options.max_index:
            raise ConfigurationError(
                "Capacity does not fit the index type",
                context={"capacity": capacity, "index_bits": options.index_bits},
            )
        self.capacity = capacity
        self.options = options
        self._invalid = options.invalid_generation
        try:
            self._generations = np.empty(capacity, dtype=options.generation_dtype)
            self._free = np.empty(capacity, dtype=options.index_dtype)
            self._vacant = np.zeros(capacity, dtype=np.bool_)
        except MemoryError as exc:
            raise AllocationError("Failed to allocate slot arrays", context={"capacity": capacity}) from exc
        self.next_index = 0
        self.free_count = 0
        self.saturated_generations = 0
        # survives reset(); separates "allocated before a reset" from "never allocated"
        self._high_water = 0

    @property
    def count(self) -> int:
        return self.next_index - self.free_count - self.saturated_generations

    def allocate(self) -> Tuple[int, int]:
        if self.free_count > 0:
            self.free_count -= 1
            index = int(self._free[self.free_count])
        else:
            if self.next_index >= self.capacity:
                raise SlotMapOverflowError(
                    "Slot map is full",
                    context={"capacity": self.capacity, "saturated": self.saturated_generations},
                )
            index = self.next_index
            self.next_index += 1
            self._high_water = max(self._high_water, self.next_index)
            self._generations[index] = 0
        self._vacant[index] = False
        generation = int(self._generations[index])
        assert generation != self._invalid
        return index, generation

    def is_live(self, key: Optional[Key]) -> bool:
        if key is None or key.generation == self._invalid:
            return False
        if not 0 <= key.index < self.next_index:
            if __debug__ and not 0 <= key.index < self._high_water:
                raise ForeignKeyError(f"key {key} refers to an index that never had a value")
            return False
        current = int(self._generations[key.index])
        if __debug__ and key.generation > current:
            raise ForeignKeyError(f"key {key} is newer than slot generation 0x{current:x}")
        return key.generation == current

    def is_vacant(self, index: int) -> bool:
        # a recycled key stays live while its index already sits on the free list
        return bool(self._vacant[index])

    def retire(self, index: int) -> bool:
        """Advance the slot's generation; returns True if the slot saturated."""
        generation = (int(self._generations[index]) + 1) & self._invalid
        self._generations[index] = generation
        if generation == self._invalid:
            self.saturated_generations += 1
            logger.warning(
                "Slot generation saturated; index retired",
                extra={"index": index, "saturated": self.saturated_generations},
            )
            return True
        self._push_free(index)
        return False

    def recycle(self, index: int) -> None:
        self._push_free(index)

    def _push_free(self, index: int) -> None:
        self._free[self.free_count] = index
        self._vacant[index] = True
        self.free_count += 1

    def reset(self) -> None:
        self.next_index = 0
        self.free_count = 0
        self.saturated_generations = 0
