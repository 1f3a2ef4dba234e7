"""Overlay plots of rapidity histograms with matplotlib (Agg backend)."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from stringsweep.histogram import Histogram  # noqa: E402

logger = logging.getLogger("stringsweep.visualization")


def parse_style(style: str) -> Tuple[str, Optional[str]]:
    """Split a ``"<linestyle>,<colour>"`` spec; either part may be empty."""
    linestyle, _, color = style.partition(",")
    return (linestyle.strip() or "-"), (color.strip() or None)


class HistogramPlot:
    """Overlay of several histograms on one shared axis.

    Mirrors the frame / add / plot cycle: create with the frame titles, add one
    series per histogram, then `render` to an image file.
    """

    def __init__(self, title: str, x_label: str, y_label: str):
        self.title = title
        self.x_label = x_label
        self.y_label = y_label
        self._series: List[Tuple[Histogram, str, str]] = []

    def add_series(self, histogram: Histogram, style: str, label: str) -> None:
        if self._series and not histogram.same_geometry(self._series[0][0]):
            logger.warning("Series '%s' has a different binning than the first series", label)
        self._series.append((histogram, style, label))

    def __len__(self) -> int:
        return len(self._series)

    def render(self, filepath: str | Path) -> Path:
        """Draw all series as mid-bin steps and save the figure to ``filepath``.

        Uses constrained_layout to avoid tight_layout warnings.
        """
        fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
        try:
            for histogram, style, label in self._series:
                linestyle, color = parse_style(style)
                ax.plot(
                    list(histogram.bin_centers()),
                    list(histogram.contents()),
                    drawstyle="steps-mid",
                    linestyle=linestyle,
                    color=color,
                    linewidth=1.6,
                    label=label,
                )
            ax.set_xlabel(self.x_label, fontsize=12)
            ax.set_ylabel(self.y_label, fontsize=12)
            ax.set_title(self.title, fontsize=14, fontweight="bold")
            ax.grid(True, alpha=0.25, linestyle="--", linewidth=0.7)
            if self._series:
                first = self._series[0][0]
                ax.set_xlim(first.lo, first.hi)
                ax.legend(loc="upper right", frameon=False, fontsize=9)
            path = Path(filepath)
            _ensure_dir(str(path.parent))
            fig.savefig(path, dpi=180)
        finally:
            plt.close(fig)
        logger.info("Rapidity plot saved as: %s", path)
        return path


def render_series(
    series_list: Sequence,
    filepath: str | Path,
    title: str,
    x_label: str,
    y_label: str,
    line_style: str = "--",
) -> Path:
    """Render every `Series` of a collection, in order, onto one plot."""
    plot = HistogramPlot(title, x_label, y_label)
    for series in series_list:
        plot.add_series(
            series.histogram,
            f"{line_style},{series.setting.color}",
            series.setting.legend,
        )
    return plot.render(filepath)


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def next_unique_path(path: str | Path) -> str:
    """If the file exists, append _1, _2 ... until a free name is found.

    Returns the path as a string.
    """
    p = Path(path)
    if not p.exists():
        return str(p)
    stem = p.stem
    suffix = p.suffix
    parent = p.parent
    counter = 1
    while True:
        candidate = parent / f"{stem}_{counter}{suffix}"
        if not candidate.exists():
            return str(candidate)
        counter += 1
