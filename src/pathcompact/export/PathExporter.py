import json
from typing import List

from pathcompact.geometry.PointBuffer import PointBuffer


def _write(data: str, path: str) -> None:
    if path == "-" or path == "stdout":
        print(data, end="")
    else:
        with open(path, "w", encoding="utf-8") as f:
            f.write(data)


class PathExporter:

    @staticmethod
    def export_json(polylines: List[PointBuffer], path: str) -> None:
        """Export as JSON: { "polylines": [ [[x,y], ...], ... ] }"""
        obj = {
            "polylines": [[[x, y] for x, y in pl.as_tuples()] for pl in polylines],
        }
        data = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
        _write(data + "\n", path)

    @staticmethod
    def export_txt(polylines: List[PointBuffer], path: str) -> None:
        """Export text: one polyline per line, 'x1,y1 x2,y2 ...'."""
        lines = []
        for pl in polylines:
            lines.append(" ".join(f"{x!r},{y!r}" for x, y in pl.as_tuples()))
        _write("\n".join(lines) + "\n", path)
