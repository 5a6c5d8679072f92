from __future__ import annotations

from typing import List

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from pathcompact.geometry.PointBuffer import PointBuffer


def plot_compaction(originals: List[PointBuffer], compacted: List[PointBuffer],
                    show: bool = True) -> Figure:
    """Overlay original polylines (thin) with their compacted form (markers)."""
    fig = plt.figure(figsize=(8, 6))
    ax = fig.add_subplot(111)

    for pl in originals:
        pts = pl.as_array()
        ax.plot(pts[:, 0], pts[:, 1], linewidth=0.8, color="0.6")

    for pl in compacted:
        pts = pl.as_array()
        ax.plot(pts[:, 0], pts[:, 1], linewidth=1.2, marker="o", markersize=3)

    total_in = sum(len(pl) for pl in originals)
    total_out = sum(len(pl) for pl in compacted)
    ax.set_title(f"{total_in} -> {total_out} points")
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_aspect("equal", adjustable="datalim")
    grid_on = [True]
    ax.grid(True)

    def on_key(event):
        if event.key == 'g':
            grid_on[0] = not grid_on[0]
            ax.grid(grid_on[0])
            fig.canvas.draw_idle()

    fig.canvas.mpl_connect('key_press_event', on_key)
    plt.tight_layout()
    if show:
        plt.show()
    return fig
