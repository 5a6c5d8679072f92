from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from pathcompact.compacter.CompacterConfig import CompacterConfig
from pathcompact.compacter.DeviationMetric import DeviationMetrics
from pathcompact.compacter.PathCompacter import PathCompacter
from pathcompact.export.PathExporter import PathExporter
from pathcompact.geometry.GeoUtil import GeoUtil
from pathcompact.geometry.PointBuffer import PointBuffer
from pathcompact.importer.PathImporter import PathImporter

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Ramer-Douglas-Peucker polyline compaction")
    ap.add_argument("--input", required=True, help="Input file (.json, .txt, .csv or .svg)")
    ap.add_argument("--tol", type=float, default=1.0, help="Maximum allowed deviation (default: 1.0)")
    ap.add_argument("--metric", choices=DeviationMetrics.names(), default="perpendicular",
                    help="Deviation metric (default: perpendicular)")
    ap.add_argument("--in-place", action="store_true", help="Reuse each input buffer as its result buffer")
    ap.add_argument("--stack-unit", type=int, default=2048, help="Work stack growth chunk (default: 2048)")
    ap.add_argument("--max-stack", type=int, default=None, help="Cap on pending sub-ranges (default: none)")
    ap.add_argument("--svg-tol", type=float, default=0.25, help="SVG curve sampling step (default: 0.25)")
    ap.add_argument("--export-json", metavar="PATH", help="Write compacted polylines to JSON (use '-' for stdout)")
    ap.add_argument("--export-txt", metavar="PATH", help="Write compacted polylines to TXT (use '-' for stdout)")
    ap.add_argument("--view", action="store_true", help="Plot original and compacted polylines")
    ap.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = CompacterConfig(stack_unit=args.stack_unit, max_stack_items=args.max_stack)
        polylines = PathImporter.load(args.input, svg_tol=args.svg_tol)
    except (OSError, ValueError) as ex:
        print(f"Error: {ex}", file=sys.stderr)
        return 1

    # Keep untouched copies for the plot since in-place compaction overwrites input
    originals = [pl.copy() for pl in polylines] if args.view else []
    total_in = sum(len(pl) for pl in polylines)

    compacter = PathCompacter(metric=DeviationMetrics.by_name(args.metric), config=config)
    compacted: List[PointBuffer] = []
    for i, pl in enumerate(polylines):
        n = len(pl)
        res = compacter.compact(pl, args.tol, result=pl if args.in_place else None)
        if not res.ok:
            print(f"Polyline {i}: {res.error.name}: {res.message}", file=sys.stderr)
            return 1
        logger.info("Polyline %d: %d -> %d points", i, n, len(res.value))
        compacted.append(res.value)

    total_out = sum(len(pl) for pl in compacted)
    print(f"Loaded polylines: {len(compacted)}")
    print(f"Total points: {total_in} -> {total_out}")
    print(f"Compacted length: {sum(GeoUtil.path_length(pl) for pl in compacted):.6f}")

    # Exports
    if args.export_json:
        PathExporter.export_json(compacted, args.export_json)
    if args.export_txt:
        PathExporter.export_txt(compacted, args.export_txt)

    if args.view:
        from pathcompact.view.PathPlot import plot_compaction
        plot_compaction(originals, compacted)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
