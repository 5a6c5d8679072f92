import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional
from pathcompact.geometry.PointFloat import PointFloat


@dataclass(frozen=True)
class GeoUtil:
    """Tolerant conversions and small distance helpers for float points."""

    @staticmethod
    def safe_to_float(x: Any, default: float = 0.0) -> float:
        """ Safely try and convert any type to a float, will return default value if cannot be converted """
        if x is None:
            return default
        try:
            return float(x)
        except (TypeError, ValueError):
            return default

    @staticmethod
    def safe_to_point(pt: Any) -> Optional[PointFloat]:
        if pt is None:
            return None
        if isinstance(pt, PointFloat):
            return pt
        try:
            x, y = pt
        except (TypeError, ValueError):
            return None
        return PointFloat(GeoUtil.safe_to_float(x), GeoUtil.safe_to_float(y))

    @staticmethod
    def equal_with_tolerance(a: Optional[PointFloat], b: Optional[PointFloat], abs_tol: float) -> bool:
        if a is None or b is None:
            return False
        d = abs(a - b)
        m = max(abs(a), abs(b), 1.0)
        return d <= max(abs_tol, 1e-6 * m)

    @staticmethod
    def point_segment_distance(p: PointFloat, a: PointFloat, b: PointFloat) -> float:
        """Distance from point p to the finite segment ab."""
        ab = b - a
        ab2 = ab.square_length()
        if ab2 == 0.0:
            return abs(p - a)
        t = max(0.0, min(1.0, (p - a).dot(ab) / ab2))
        return abs(p - (a + ab * t))

    @staticmethod
    def path_length(points: Iterable[PointFloat]) -> float:
        total = 0.0
        prev: Optional[PointFloat] = None
        for p in points:
            if prev is not None:
                total += math.hypot(p.x - prev.x, p.y - prev.y)
            prev = p
        return total
