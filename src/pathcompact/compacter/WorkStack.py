from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from pathcompact.compacter.CompacterConfig import CompacterConfig

logger = logging.getLogger(__name__)


class StackAllocationError(MemoryError):
    pass


@dataclass(frozen=True)
class WorkItem:
    source_offset: int
    destination_offset: int
    length: int


class WorkStack:
    """LIFO of pending sub-ranges backed by an (capacity, 3) int64 array.

    Capacity grows in fixed chunks of ``config.stack_unit`` rows. A failed
    growth leaves the stack exactly as it was.
    """

    def __init__(self, config: Optional[CompacterConfig] = None):
        self.config = config or CompacterConfig()
        self._size = 0
        self.peak = 0
        self._rows = self._allocate(self._grown_capacity(0))

    def _grown_capacity(self, capacity: int) -> int:
        new_capacity = capacity + self.config.stack_unit
        limit = self.config.max_stack_items
        if limit is not None:
            if capacity >= limit:
                raise StackAllocationError(f"Work stack limit of {limit} items reached")
            new_capacity = min(new_capacity, limit)
        return new_capacity

    @staticmethod
    def _allocate(capacity: int) -> np.ndarray:
        try:
            return np.empty((capacity, 3), dtype=np.int64)
        except MemoryError as e:
            raise StackAllocationError(f"Could not allocate work stack of {capacity} items") from e

    @property
    def capacity(self) -> int:
        return self._rows.shape[0]

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def push(self, item: WorkItem) -> None:
        if self._size >= self.capacity:
            rows = self._allocate(self._grown_capacity(self.capacity))
            rows[:self._size] = self._rows[:self._size]
            self._rows = rows
            logger.debug("Work stack grown to %d items", self.capacity)

        self._rows[self._size] = (item.source_offset, item.destination_offset, item.length)
        self._size += 1
        self.peak = max(self.peak, self._size)

    def pop(self) -> WorkItem:
        if self._size == 0:
            raise IndexError("pop from empty work stack")
        self._size -= 1
        src, dst, n = self._rows[self._size]
        return WorkItem(int(src), int(dst), int(n))
