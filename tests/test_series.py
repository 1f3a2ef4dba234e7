from __future__ import annotations

import pytest

from stringsweep.errors import ConfigError
from stringsweep.histogram import Histogram
from stringsweep.models import ParameterSetting
from stringsweep.series import SeriesCollector


def _hist() -> Histogram:
    return Histogram(-10.0, 10.0, 20)


def test_series_keep_insertion_order() -> None:
    collector = SeriesCollector()
    settings = [
        ParameterSetting.from_value(100, "indianred"),
        ParameterSetting.from_value(5, "steelblue"),
        ParameterSetting.from_value(20, "seagreen"),
    ]
    for s in settings:
        collector.add(s, _hist())
    assert [series.setting for series in collector.as_series_list()] == settings
    assert collector.labels() == ["100.00", "5.00", "20.00"]
    assert len(collector) == 3


def test_duplicate_label_rejected_and_first_kept() -> None:
    collector = SeriesCollector()
    first = ParameterSetting.from_value(5.0, "steelblue")
    second = ParameterSetting.from_value(5.001, "seagreen")
    assert first.label == second.label == "5.00"
    h1 = _hist()
    collector.add(first, h1)
    with pytest.raises(ConfigError):
        collector.add(second, _hist())
    series = collector.as_series_list()
    assert len(series) == 1
    assert series[0].setting is first
    assert series[0].histogram is h1


def test_series_list_is_a_read_only_view() -> None:
    collector = SeriesCollector()
    collector.add(ParameterSetting.from_value(5, "steelblue"), _hist())
    view = collector.as_series_list()
    assert isinstance(view, tuple)
    collector.add(ParameterSetting.from_value(20, "seagreen"), _hist())
    assert len(view) == 1
    assert len(collector.as_series_list()) == 2


def test_parameter_setting_label_and_legend() -> None:
    s = ParameterSetting.from_value(20, "seagreen")
    assert s.label == "20.00"
    assert s.legend == "20.00 GeV string"
    with pytest.raises(ConfigError):
        ParameterSetting.from_value(0, "black")
    with pytest.raises(ConfigError):
        ParameterSetting.from_value(-5, "black")
