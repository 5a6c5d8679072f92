from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List

import numpy as np

from pathcompact.geometry.PointFloat import PointFloat

# (start, end, candidate, squared segment length) -> squared deviation
DeviationMetric = Callable[[PointFloat, PointFloat, PointFloat, float], float]


def _triangle_area(start: PointFloat, end: PointFloat, mid: PointFloat) -> float:
    # Twice the signed area of (start, mid, end)
    return (start.x * (mid.y - end.y) +
            mid.x * (end.y - start.y) +
            end.x * (start.y - mid.y))


def _triangle_areas(start: PointFloat, end: PointFloat, mids: np.ndarray) -> np.ndarray:
    mx = mids[:, 0]
    my = mids[:, 1]
    return (start.x * (my - end.y) +
            mx * (end.y - start.y) +
            end.x * (start.y - my))


def _square_distances(origin: PointFloat, pts: np.ndarray) -> np.ndarray:
    dx = pts[:, 0] - origin.x
    dy = pts[:, 1] - origin.y
    return dx * dx + dy * dy


class PerpendicularOffsetMetric:
    """Squared distance from a point to the infinite line through start and end."""

    name = "perpendicular"

    def __call__(self, start: PointFloat, end: PointFloat, mid: PointFloat,
                 square_segment_length: float) -> float:
        if square_segment_length == 0.0:
            return (mid - start).square_length()
        area = _triangle_area(start, end, mid)
        return area * area / square_segment_length

    def batch(self, start: PointFloat, end: PointFloat, mids: np.ndarray,
              square_segment_length: float) -> np.ndarray:
        if square_segment_length == 0.0:
            return _square_distances(start, mids)
        area = _triangle_areas(start, end, mids)
        return area * area / square_segment_length


class ShortestDistanceToSegmentMetric:
    """Squared distance from a point to the finite segment start..end.

    With A = end - start, B = mid - start and C = mid - end, the projection
    lies strictly inside the segment when A.B > 0 and A.C < 0. Otherwise the
    nearest point is start when A.B <= 0 and end in every remaining case.
    """

    name = "segment"

    def __call__(self, start: PointFloat, end: PointFloat, mid: PointFloat,
                 square_segment_length: float) -> float:
        b = mid - start
        if square_segment_length == 0.0:
            return b.square_length()
        a = end - start
        c = mid - end
        a_dot_b = a.dot(b)
        a_dot_c = a.dot(c)
        if a_dot_b > 0.0 and a_dot_c < 0.0:
            area = _triangle_area(start, end, mid)
            return area * area / square_segment_length
        if a_dot_b <= 0.0:
            return b.square_length()
        return c.square_length()

    def batch(self, start: PointFloat, end: PointFloat, mids: np.ndarray,
              square_segment_length: float) -> np.ndarray:
        to_start = _square_distances(start, mids)
        if square_segment_length == 0.0:
            return to_start
        ax = end.x - start.x
        ay = end.y - start.y
        a_dot_b = ax * (mids[:, 0] - start.x) + ay * (mids[:, 1] - start.y)
        a_dot_c = ax * (mids[:, 0] - end.x) + ay * (mids[:, 1] - end.y)
        area = _triangle_areas(start, end, mids)
        inside = (a_dot_b > 0.0) & (a_dot_c < 0.0)
        return np.where(inside, area * area / square_segment_length,
                        np.where(a_dot_b <= 0.0, to_start, _square_distances(end, mids)))


perpendicular_offset = PerpendicularOffsetMetric()
shortest_distance_to_segment = ShortestDistanceToSegmentMetric()


@dataclass(frozen=True)
class DeviationMetrics:
    @staticmethod
    def _registry() -> Dict[str, DeviationMetric]:
        return {
            perpendicular_offset.name: perpendicular_offset,
            shortest_distance_to_segment.name: shortest_distance_to_segment,
        }

    @staticmethod
    def names() -> List[str]:
        return list(DeviationMetrics._registry())

    @staticmethod
    def by_name(name: str) -> DeviationMetric:
        try:
            return DeviationMetrics._registry()[name]
        except KeyError:
            raise ValueError(f"Unknown deviation metric: {name!r}") from None
