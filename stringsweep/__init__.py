"""Mass sweep of single q-qbar strings with primary-hadron rapidity histograms.

Exports the histogram accumulator, the sweep orchestrator and the error types.
"""

from stringsweep.errors import ConfigError, InitError, StringSweepError, TrialFailure  # noqa: F401
from stringsweep.histogram import Histogram  # noqa: F401
from stringsweep.models import ParameterSetting, SettingSummary, TrialOutcome  # noqa: F401
from stringsweep.series import Series, SeriesCollector  # noqa: F401
from stringsweep.sweep import SettingState, SweepOrchestrator  # noqa: F401

__all__ = [
    "ConfigError",
    "Histogram",
    "InitError",
    "ParameterSetting",
    "Series",
    "SeriesCollector",
    "SettingState",
    "SettingSummary",
    "StringSweepError",
    "SweepOrchestrator",
    "TrialFailure",
    "TrialOutcome",
]
