"""Ordered collection of per-setting histograms, one plot series per sweep point."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from stringsweep.errors import ConfigError
from stringsweep.histogram import Histogram
from stringsweep.models import ParameterSetting


@dataclass(frozen=True)
class Series:
    setting: ParameterSetting
    histogram: Histogram


class SeriesCollector:
    """Ordered, label-unique collection of finalized histograms."""

    def __init__(self):
        self._series: list[Series] = []
        self._labels: set[str] = set()

    def add(self, setting: ParameterSetting, histogram: Histogram) -> Series:
        if setting.label in self._labels:
            raise ConfigError(f"duplicate series label '{setting.label}'")
        series = Series(setting, histogram)
        self._series.append(series)
        self._labels.add(setting.label)
        return series

    def as_series_list(self) -> tuple[Series, ...]:
        return tuple(self._series)

    def labels(self) -> list[str]:
        return [s.setting.label for s in self._series]

    def __len__(self) -> int:
        return len(self._series)

    def __iter__(self) -> Iterator[Series]:
        return iter(tuple(self._series))
