"""Fixed-range, fixed-bin-count histogram of a continuous observable.

Counting is exact (integers). Alongside the counters the histogram keeps the
mean and the sum of squared deviations of the in-range entries, updated with
Welford's recurrence so that mean / RMS stay accurate over millions of fills,
and combined with Chan's pairwise formula on merge.
"""

from __future__ import annotations

import math
from typing import Iterator

from stringsweep.errors import ConfigError


class BinCenters:
    """Re-iterable view over bin midpoints; values are computed on demand."""

    def __init__(self, lo: float, width: float, bins: int):
        self._lo = lo
        self._width = width
        self._bins = bins

    def __len__(self) -> int:
        return self._bins

    def __getitem__(self, index: int) -> float:
        if index < 0:
            index += self._bins
        if not 0 <= index < self._bins:
            raise IndexError("bin index out of range")
        return self._lo + (index + 0.5) * self._width

    def __iter__(self) -> Iterator[float]:
        for i in range(self._bins):
            yield self._lo + (i + 0.5) * self._width


class Histogram:
    def __init__(self, lo: float, hi: float, bins: int, title: str = ""):
        if isinstance(bins, bool) or not isinstance(bins, int):
            raise ConfigError(f"bin count must be an integer, got {bins!r}")
        if bins <= 0:
            raise ConfigError(f"bin count must be positive, got {bins}")
        lo = float(lo)
        hi = float(hi)
        if not lo < hi:
            raise ConfigError(f"histogram range requires lo < hi, got [{lo}, {hi})")
        self.lo = lo
        self.hi = hi
        self.bins = bins
        self.title = title
        self.width = (hi - lo) / bins
        self._counts = [0] * bins
        self.underflow = 0
        self.overflow = 0
        self._inside = 0
        self._mean = 0.0
        self._m2 = 0.0
        self._sealed = False

    # --- filling ---
    def fill(self, value: float) -> None:
        if self._sealed:
            raise ConfigError(f"histogram '{self.title}' is sealed")
        if value < self.lo:
            self.underflow += 1
            return
        if not value < self.hi:
            # also catches NaN
            self.overflow += 1
            return
        index = min(max(int(math.floor((value - self.lo) / self.width)), 0), self.bins - 1)
        self._counts[index] += 1
        self._inside += 1
        delta = value - self._mean
        self._mean += delta / self._inside
        self._m2 += delta * (value - self._mean)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    # --- geometry ---
    def same_geometry(self, other: "Histogram") -> bool:
        return (self.lo, self.hi, self.bins) == (other.lo, other.hi, other.bins)

    def bin_centers(self) -> BinCenters:
        return BinCenters(self.lo, self.width, self.bins)

    def bin_edges(self) -> list[float]:
        return [self.lo + i * self.width for i in range(self.bins)] + [self.hi]

    # --- reading ---
    def contents(self) -> tuple[int, ...]:
        return tuple(self._counts)

    def __getitem__(self, index: int) -> int:
        return self._counts[index]

    @property
    def inside(self) -> int:
        return self._inside

    def total_count(self) -> int:
        return self.inside + self.underflow + self.overflow

    def mean(self) -> float:
        return self._mean if self.inside else float("nan")

    def rms(self) -> float:
        n = self.inside
        if not n:
            return float("nan")
        return math.sqrt(max(self._m2, 0.0) / n)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Histogram):
            return NotImplemented
        return (
            self.same_geometry(other)
            and self._counts == other._counts
            and self.underflow == other.underflow
            and self.overflow == other.overflow
        )

    def __repr__(self) -> str:
        return (
            f"Histogram(lo={self.lo}, hi={self.hi}, bins={self.bins}, "
            f"entries={self.total_count()})"
        )

    # --- combining ---
    def merge(self, other: "Histogram") -> "Histogram":
        """Return a new histogram holding the element-wise sum of both operands."""
        if not self.same_geometry(other):
            raise ConfigError(
                "cannot merge histograms with different geometry: "
                f"({self.lo}, {self.hi}, {self.bins}) vs "
                f"({other.lo}, {other.hi}, {other.bins})"
            )
        merged = Histogram(self.lo, self.hi, self.bins, title=self.title or other.title)
        merged._counts = [a + b for a, b in zip(self._counts, other._counts)]
        merged.underflow = self.underflow + other.underflow
        merged.overflow = self.overflow + other.overflow
        merged._inside = self._inside + other._inside
        n_a, n_b = self.inside, other.inside
        n = n_a + n_b
        if n:
            delta = other._mean - self._mean
            merged._mean = self._mean + delta * n_b / n
            merged._m2 = self._m2 + other._m2 + delta * delta * n_a * n_b / n
        return merged

    # --- serialisation ---
    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "lo": self.lo,
            "hi": self.hi,
            "bins": self.bins,
            "counts": list(self._counts),
            "underflow": self.underflow,
            "overflow": self.overflow,
            "mean": self._mean,
            "m2": self._m2,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Histogram":
        hist = cls(data["lo"], data["hi"], int(data["bins"]), title=data.get("title", ""))
        counts = [int(c) for c in data["counts"]]
        if len(counts) != hist.bins:
            raise ConfigError(f"expected {hist.bins} bin counts, got {len(counts)}")
        if any(c < 0 for c in counts):
            raise ConfigError("bin counts must be non-negative")
        hist._counts = counts
        hist._inside = sum(counts)
        hist.underflow = int(data.get("underflow", 0))
        hist.overflow = int(data.get("overflow", 0))
        hist._mean = float(data.get("mean", 0.0))
        hist._m2 = float(data.get("m2", 0.0))
        return hist

    def to_text(self, width: int = 50) -> str:
        """Render a fixed-width text table, one row per bin, with a summary block."""
        peak = max(self._counts) if any(self._counts) else 0
        lines = [f" {self.title}" if self.title else " Histogram", ""]
        for edge, count in zip(self.bin_edges(), self._counts):
            bar = "*" * (round(count / peak * width) if peak else 0)
            lines.append(f"{edge:10.4f} {count:10d} {bar}")
        lines.append("")
        lines.append(
            f" Underflow = {self.underflow}  Inside = {self.inside}  Overflow = {self.overflow}"
        )
        lines.append(f" Mean = {self.mean():.5g}  RMS = {self.rms():.5g}")
        return "\n".join(lines)
