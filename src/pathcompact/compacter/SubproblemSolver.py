from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple

import numpy as np

from pathcompact.compacter.DeviationMetric import DeviationMetric
from pathcompact.geometry.PointFloat import PointFloat


class SubproblemResult(Enum):
    Divide = auto()
    Linearize = auto()
    Solved = auto()


@dataclass(frozen=True)
class SubproblemOutcome:
    result: SubproblemResult
    # Offsets (relative to the sub-range start) of the points that survive
    kept: Tuple[int, ...] = ()
    division_index: int = -1

    @property
    def resolved(self) -> bool:
        return self.result is not SubproblemResult.Divide


# Below this many points numpy call overhead outweighs the vectorised evaluation
_SCALAR_RANGE_LIMIT = 8


class SubproblemSolver:
    """Classifies one sub-range of a path.

    Solved: fewer than three points, all of them survive.
    Linearize: no interior point deviates by at least the tolerance (or none
    deviates at all), only the two endpoints survive.
    Divide: split at the interior point of largest deviation; the leftmost
    one wins when several share the maximum.
    """

    @staticmethod
    def solve(points: np.ndarray, start: int, length: int, metric: DeviationMetric,
              tolerance_sq: float) -> SubproblemOutcome:
        if length < 3:
            return SubproblemOutcome(SubproblemResult.Solved, tuple(range(length)))

        last = start + length - 1
        first_pt = PointFloat(float(points[start, 0]), float(points[start, 1]))
        last_pt = PointFloat(float(points[last, 0]), float(points[last, 1]))
        dx = last_pt.x - first_pt.x
        dy = last_pt.y - first_pt.y
        square_seg_len = dx * dx + dy * dy

        interior = points[start + 1:last]
        batch = getattr(metric, "batch", None)
        if batch is not None and length > _SCALAR_RANGE_LIMIT:
            deviations = batch(first_pt, last_pt, interior, square_seg_len)
            # argmax returns the first occurrence of the maximum
            i = int(np.argmax(deviations))
            max_deviation = float(deviations[i])
        else:
            i = 0
            max_deviation = -1.0
            for k, (x, y) in enumerate(interior.tolist()):
                d = metric(first_pt, last_pt, PointFloat(x, y), square_seg_len)
                if d > max_deviation:
                    i = k
                    max_deviation = d

        if max_deviation < tolerance_sq or max_deviation == 0.0:
            return SubproblemOutcome(SubproblemResult.Linearize, (0, length - 1))

        return SubproblemOutcome(SubproblemResult.Divide, division_index=i + 1)
