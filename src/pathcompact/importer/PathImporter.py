import csv
import json
from pathlib import Path
from typing import Any, List

from pathcompact.geometry.PointBuffer import PointBuffer
from pathcompact.svg.SvgConverter import SvgConverter


class PathImporter:
    """Reads polylines from JSON, TXT, CSV or SVG files."""

    @staticmethod
    def load(path: str, svg_tol: float = 0.25) -> List[PointBuffer]:
        suffix = Path(path).suffix.lower()
        if suffix == ".json":
            return PathImporter.load_json(path)
        if suffix == ".txt":
            return PathImporter.load_txt(path)
        if suffix == ".csv":
            return PathImporter.load_csv(path)
        if suffix == ".svg":
            return SvgConverter.svg_to_polylines(path, tol=svg_tol)
        raise ValueError(f"Unsupported input format: {path}")

    @staticmethod
    def load_json(path: str) -> List[PointBuffer]:
        """Accepts { "polylines": [ [[x,y], ...], ... ] } or a bare [[x,y], ...]."""
        with open(path, "r", encoding="utf-8") as f:
            obj: Any = json.load(f)

        if isinstance(obj, dict):
            if "polylines" not in obj:
                raise ValueError(f"{path}: missing 'polylines' key")
            return [PointBuffer.from_points(pl) for pl in obj["polylines"]]
        if isinstance(obj, list):
            return [PointBuffer.from_points(obj)]
        raise ValueError(f"{path}: expected an object or a list of points")

    @staticmethod
    def load_txt(path: str) -> List[PointBuffer]:
        """One polyline per line: 'x1,y1 x2,y2 ...'. Blank lines and '#' comments are skipped."""
        polylines: List[PointBuffer] = []
        with open(path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                pts = []
                for token in line.split():
                    try:
                        x, y = token.split(",")
                        pts.append((float(x), float(y)))
                    except ValueError:
                        raise ValueError(f"{path}:{line_no}: bad point {token!r}") from None
                polylines.append(PointBuffer.from_points(pts))
        return polylines

    @staticmethod
    def load_csv(path: str) -> List[PointBuffer]:
        """A single polyline as 'x,y' rows, with or without a header row."""
        pts = []
        with open(path, "r", encoding="utf-8", newline="") as f:
            for row_no, row in enumerate(csv.reader(f), start=1):
                if not row:
                    continue
                try:
                    pts.append((float(row[0]), float(row[1])))
                except (ValueError, IndexError):
                    if row_no == 1:
                        # header
                        continue
                    raise ValueError(f"{path}:{row_no}: bad row {row!r}") from None
        return [PointBuffer.from_points(pts)]
