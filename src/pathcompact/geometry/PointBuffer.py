from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Tuple

import numpy as np

from pathcompact.geometry.PointFloat import PointFloat


@dataclass(eq=False)
class PointBuffer:
    """Contiguous (capacity, 2) float64 point storage with a logical length.

    Rows past ``length`` are allocated but hold no valid points. The same
    buffer may be handed to the compacter as both input and result.
    """
    data: np.ndarray
    length: int = 0

    def __post_init__(self) -> None:
        if self.data.ndim != 2 or self.data.shape[1] != 2:
            raise ValueError(f"Point buffer must have shape (capacity, 2), got {self.data.shape}")
        if not 0 <= self.length <= self.data.shape[0]:
            raise ValueError(f"Length {self.length} outside capacity {self.data.shape[0]}")

    @staticmethod
    def empty(capacity: int) -> "PointBuffer":
        return PointBuffer(np.zeros((max(0, capacity), 2), dtype=np.float64), 0)

    @staticmethod
    def from_points(points: Iterable[Any]) -> "PointBuffer":
        """Build a buffer from PointFloat values, (x, y) pairs or an (n, 2) array."""
        if isinstance(points, PointBuffer):
            return points.copy()
        if isinstance(points, np.ndarray):
            arr = np.array(points, dtype=np.float64).reshape(-1, 2)
        else:
            rows: List[Tuple[float, float]] = []
            for p in points:
                if isinstance(p, PointFloat):
                    rows.append(p.as_tuple())
                else:
                    try:
                        x, y = p
                        rows.append((float(x), float(y)))
                    except (TypeError, ValueError):
                        raise ValueError(f"Bad point {p!r}, expected an (x, y) pair") from None
            arr = np.array(rows, dtype=np.float64).reshape(-1, 2)
        return PointBuffer(arr, arr.shape[0])

    @property
    def capacity(self) -> int:
        return self.data.shape[0]

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, i: int) -> PointFloat:
        if i < 0:
            i += self.length
        if not 0 <= i < self.length:
            raise IndexError(f"Point index {i} out of range for length {self.length}")
        return PointFloat(float(self.data[i, 0]), float(self.data[i, 1]))

    def __iter__(self) -> Iterator[PointFloat]:
        for x, y in self.data[:self.length]:
            yield PointFloat(float(x), float(y))

    def as_array(self) -> np.ndarray:
        # View, not a copy
        return self.data[:self.length]

    def as_tuples(self) -> List[Tuple[float, float]]:
        return [(float(x), float(y)) for x, y in self.data[:self.length]]

    def copy(self) -> "PointBuffer":
        return PointBuffer(self.data.copy(), self.length)
