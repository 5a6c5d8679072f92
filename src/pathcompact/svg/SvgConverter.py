import math
from typing import Any, Iterable, List, Optional, cast
from svgelements import SVG, Path, SimpleLine, Rect, Circle, Ellipse, Polyline, Polygon, Matrix, Move, Close
from pathcompact.geometry.GeoUtil import GeoUtil
from pathcompact.geometry.PointBuffer import PointBuffer
from pathcompact.geometry.PointFloat import PointFloat


class SvgConverter:
    """SVG -> dense float polylines, ready to be compacted."""

    @staticmethod
    def _walk_with_matrix(node: Any, parent: Optional[Matrix] = None):
        """Yield (leaf, parent_matrix_without_leaf)."""
        parent_matrix = Matrix() if parent is None else parent

        is_leaf = isinstance(node, (Path, SimpleLine, Rect, Circle, Ellipse, Polyline, Polygon))
        if is_leaf:
            # important: do NOT fold the leaf's own transform here
            yield node, parent_matrix
            return

        if hasattr(node, "__iter__") and not isinstance(node, str):
            for ch in node:
                yield from SvgConverter._walk_with_matrix(ch, parent_matrix)

    @staticmethod
    def _apply_matrix_to_points(pts: List[PointFloat], M: Matrix) -> List[PointFloat]:
        # SVG matrix: [a c e; b d f; 0 0 1], column-vector on the right.
        a = getattr(M, "a", 1.0)
        b = getattr(M, "b", 0.0)
        c = getattr(M, "c", 0.0)
        d = getattr(M, "d", 1.0)
        e = getattr(M, "e", 0.0)
        f = getattr(M, "f", 0.0)
        return [PointFloat(a * p.x + c * p.y + e, b * p.x + d * p.y + f) for p in pts]

    @staticmethod
    def _path_to_polylines(path: Path, sample_tol: float) -> List[List[PointFloat]]:
        polylines: List[List[PointFloat]] = []
        current: List[PointFloat] = []
        abs_tol = max(1e-6, sample_tol)

        for seg in path:
            if isinstance(seg, Move):
                if len(current) >= 2:
                    polylines.append(current)
                current = []
                continue
            if isinstance(seg, Close):
                raw = [seg.start, seg.end]
            else:
                L = max(seg.length(error=1e-4), 0.0)
                n = max(2, int(math.ceil(L / max(sample_tol, 1e-9))))
                raw = [seg.point(i / (n - 1)) for i in range(n)]
            pts = [p for p in (GeoUtil.safe_to_point(q) for q in raw) if p]
            if len(pts) < 2:
                continue
            if current and GeoUtil.equal_with_tolerance(current[-1], pts[0], abs_tol):
                current.extend(pts[1:])
            else:
                if len(current) >= 2:
                    polylines.append(current)
                current = pts

        if len(current) >= 2:
            polylines.append(current)
        return polylines

    @staticmethod
    def _ellipse_poly(cx: float, cy: float, rx: float, ry: float, tol: float) -> List[PointFloat]:
        if rx <= 0 or ry <= 0:
            return []
        r = max(rx, ry)
        dtheta = 2 * math.asin(min(1.0, max(tol, 1e-9) / (2 * r)))
        n = max(12, int(math.ceil(2 * math.pi / max(dtheta, 1e-6))))
        return [PointFloat(cx + rx * math.cos(2 * math.pi * i / n),
                           cy + ry * math.sin(2 * math.pi * i / n)) for i in range(n + 1)]

    @staticmethod
    def _rect_poly(x: float, y: float, w: float, h: float) -> List[PointFloat]:
        if w <= 0 or h <= 0:
            return []
        return [PointFloat(x, y), PointFloat(x + w, y), PointFloat(x + w, y + h),
                PointFloat(x, y + h), PointFloat(x, y)]

    @staticmethod
    def _get_attr(o, *names):
        for n in names:
            v = getattr(o, n, None)
            if v is not None:
                return v
        return None

    @staticmethod
    def svg_to_polylines(svg_path: str, tol: float = 0.25, flip_y: bool = False) -> List[PointBuffer]:
        """Sample every drawable element of an SVG file into polylines.

        ``tol`` is the sampling step along curves; the output is deliberately
        dense and meant to be compacted afterwards.
        """
        doc = SVG.parse(svg_path)

        polylines: List[List[PointFloat]] = []

        for elem, M in SvgConverter._walk_with_matrix(doc):
            t = elem.transform if isinstance(getattr(elem, "transform", None), Matrix) else Matrix()
            M = M * t

            if isinstance(elem, Path):
                # Discretize in local coords, then transform sampled points.
                for poly in SvgConverter._path_to_polylines(elem, sample_tol=tol):
                    polylines.append(SvgConverter._apply_matrix_to_points(poly, M))

            elif isinstance(elem, SimpleLine):
                x1 = GeoUtil.safe_to_float(getattr(elem, "x1", None))
                y1 = GeoUtil.safe_to_float(getattr(elem, "y1", None))
                x2 = GeoUtil.safe_to_float(getattr(elem, "x2", None))
                y2 = GeoUtil.safe_to_float(getattr(elem, "y2", None))
                polylines.append(SvgConverter._apply_matrix_to_points(
                    [PointFloat(x1, y1), PointFloat(x2, y2)], M))

            elif isinstance(elem, Rect):
                x = GeoUtil.safe_to_float(getattr(elem, "x", None))
                y = GeoUtil.safe_to_float(getattr(elem, "y", None))
                w = GeoUtil.safe_to_float(getattr(elem, "width", None))
                h = GeoUtil.safe_to_float(getattr(elem, "height", None))
                pts = SvgConverter._rect_poly(x, y, w, h)
                if pts:
                    polylines.append(SvgConverter._apply_matrix_to_points(pts, M))

            elif isinstance(elem, (Circle, Ellipse)):
                cx = GeoUtil.safe_to_float(SvgConverter._get_attr(elem, "cx", "center_x"))
                cy = GeoUtil.safe_to_float(SvgConverter._get_attr(elem, "cy", "center_y"))
                rx = GeoUtil.safe_to_float(SvgConverter._get_attr(elem, "rx", "radius_x", "r"))
                ry = GeoUtil.safe_to_float(SvgConverter._get_attr(elem, "ry", "radius_y", "r"))
                pts = SvgConverter._ellipse_poly(cx, cy, rx, ry, tol)
                if pts:
                    polylines.append(SvgConverter._apply_matrix_to_points(pts, M))

            elif isinstance(elem, (Polygon, Polyline)):
                raw = cast(Iterable[Any], getattr(elem, "points", ()))
                pts = [p for p in (GeoUtil.safe_to_point(p) for p in raw) if p]
                if len(pts) >= 2:
                    if isinstance(elem, Polygon) and pts[0] != pts[-1]:
                        pts.append(pts[0])
                    polylines.append(SvgConverter._apply_matrix_to_points(pts, M))

        out: List[PointBuffer] = []
        for poly in polylines:
            if flip_y:
                poly = [PointFloat(p.x, -p.y) for p in poly]
            if len(poly) >= 2:
                out.append(PointBuffer.from_points(poly))
        return out
