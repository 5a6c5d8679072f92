from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import numpy as np

from pathcompact.compacter.CompacterConfig import CompacterConfig
from pathcompact.compacter.DeviationMetric import DeviationMetric, perpendicular_offset
from pathcompact.compacter.Result import CompactPathError, Result
from pathcompact.compacter.SubproblemSolver import SubproblemOutcome, SubproblemResult, SubproblemSolver
from pathcompact.compacter.WorkStack import StackAllocationError, WorkItem, WorkStack
from pathcompact.geometry.PointBuffer import PointBuffer

logger = logging.getLogger(__name__)

Solver = Callable[[np.ndarray, int, int, DeviationMetric, float], SubproblemOutcome]


@dataclass
class PathCompacter:
    """Iterative Ramer-Douglas-Peucker path compaction.

    Recursion is replaced by an explicit WorkStack so that long, degenerate
    inputs cannot exhaust the interpreter call stack. The result buffer may be
    the input buffer itself: every write lands at or below the index of the
    next unread input point, and copies go low to high.
    """
    metric: DeviationMetric = perpendicular_offset
    config: CompacterConfig = field(default_factory=CompacterConfig)
    solver: Solver = SubproblemSolver.solve

    def compact(self, points: Any, tolerance: float,
                result: Optional[PointBuffer] = None) -> Result[PointBuffer]:
        checked = _check_arguments(points, tolerance, result)
        if not checked.ok:
            return checked
        src_buf = checked.value
        n = len(src_buf)
        dst_buf = result if result is not None else PointBuffer.empty(n)

        if n == 0:
            dst_buf.length = 0
            return Result.success(dst_buf)

        src = src_buf.data
        dst = dst_buf.data
        tolerance_sq = float(tolerance) ** 2

        # The first point can never be removed and always ends up at index 0
        dst[0] = src[0]
        cursor = 1

        try:
            stack = WorkStack(self.config)
            stack.push(WorkItem(0, 0, n))

            while stack:
                item = stack.pop()
                outcome = self.solver(src, item.source_offset, item.length, self.metric, tolerance_sq)

                if not outcome.resolved:
                    idx = outcome.division_index
                    if not 0 < idx < item.length - 1:
                        return Result.fail(CompactPathError.MalformedState,
                                           f"Split index {idx} outside sub-range of {item.length} points")
                    # Right first so the left half is popped first
                    stack.push(WorkItem(item.source_offset + idx, item.destination_offset + idx,
                                        item.length - idx))
                    stack.push(WorkItem(item.source_offset, item.destination_offset, idx + 1))
                    continue

                # First point of every sub-range is already in place
                kept = outcome.kept[1:]
                if not kept:
                    continue
                if cursor > item.destination_offset + 1:
                    return Result.fail(CompactPathError.MalformedState,
                                       f"Write cursor {cursor} overtook sub-range at {item.destination_offset}")
                count = len(kept)
                if outcome.result is SubproblemResult.Solved:
                    start = item.source_offset + kept[0]
                    dst[cursor:cursor + count] = src[start:start + count]
                else:
                    # Fancy indexing gathers into a temporary before the write
                    dst[cursor:cursor + count] = src[item.source_offset + np.asarray(kept)]
                cursor += count
        except StackAllocationError as e:
            return Result.fail(CompactPathError.AllocationFailure, str(e))

        dst_buf.length = cursor
        logger.debug("Compacted %d points to %d (peak stack %d)", n, cursor, stack.peak)
        return Result.success(dst_buf)

    def compact_recursive(self, points: Any, tolerance: float,
                          result: Optional[PointBuffer] = None) -> Result[PointBuffer]:
        """Same output as compact() using real recursion.

        Deep splits can hit the interpreter recursion limit, which is reported
        as an allocation failure.
        """
        checked = _check_arguments(points, tolerance, result)
        if not checked.ok:
            return checked
        src_buf = checked.value
        n = len(src_buf)
        dst_buf = result if result is not None else PointBuffer.empty(n)

        if n == 0:
            dst_buf.length = 0
            return Result.success(dst_buf)

        src = src_buf.data
        dst = dst_buf.data
        tolerance_sq = float(tolerance) ** 2
        dst[0] = src[0]
        cursor = 1

        def recurse(start: int, length: int) -> None:
            nonlocal cursor
            outcome = self.solver(src, start, length, self.metric, tolerance_sq)
            if not outcome.resolved:
                idx = outcome.division_index
                if not 0 < idx < length - 1:
                    raise _MalformedSplit(f"Split index {idx} outside sub-range of {length} points")
                recurse(start, idx + 1)
                recurse(start + idx, length - idx)
                return
            kept = outcome.kept[1:]
            if kept:
                dst[cursor:cursor + len(kept)] = src[start + np.asarray(kept)]
                cursor += len(kept)

        try:
            recurse(0, n)
        except RecursionError as e:
            return Result.fail(CompactPathError.AllocationFailure, f"Recursion limit exceeded: {e}")
        except _MalformedSplit as e:
            return Result.fail(CompactPathError.MalformedState, str(e))

        dst_buf.length = cursor
        return Result.success(dst_buf)


class _MalformedSplit(RuntimeError):
    pass


def _check_arguments(points: Any, tolerance: float, result: Optional[PointBuffer]) -> Result[PointBuffer]:
    if points is None:
        return Result.fail(CompactPathError.InvalidArgument, "No input points given")
    try:
        tol = float(tolerance)
    except (TypeError, ValueError):
        return Result.fail(CompactPathError.InvalidArgument, f"Tolerance is not a number: {tolerance!r}")
    if math.isnan(tol) or tol < 0.0:
        return Result.fail(CompactPathError.InvalidArgument, f"Tolerance must be >= 0, got {tolerance!r}")

    if isinstance(points, PointBuffer):
        buf = points
    else:
        try:
            buf = PointBuffer.from_points(points)
        except (TypeError, ValueError) as e:
            return Result.fail(CompactPathError.InvalidArgument, f"Unreadable input points: {e}")

    if result is not None and not isinstance(result, PointBuffer):
        return Result.fail(CompactPathError.InvalidArgument,
                           f"Result must be a PointBuffer, got {type(result).__name__}")
    if result is not None and result.capacity < len(buf):
        return Result.fail(CompactPathError.InvalidArgument,
                           f"Result buffer holds {result.capacity} points, input has {len(buf)}")
    return Result.success(buf)


def compact_path(points: Any, tolerance: float, metric: DeviationMetric = perpendicular_offset,
                 result: Optional[PointBuffer] = None,
                 config: Optional[CompacterConfig] = None) -> Result[PointBuffer]:
    """Simplify ``points`` so that no removed point deviates by ``tolerance`` or more.

    Pass the input buffer as ``result`` to compact in place; the input is then
    overwritten. On failure the result contents are unspecified.
    """
    compacter = PathCompacter(metric=metric, config=config or CompacterConfig())
    return compacter.compact(points, tolerance, result)


def compact_path_recursive(points: Any, tolerance: float, metric: DeviationMetric = perpendicular_offset,
                           result: Optional[PointBuffer] = None) -> Result[PointBuffer]:
    return PathCompacter(metric=metric).compact_recursive(points, tolerance, result)
