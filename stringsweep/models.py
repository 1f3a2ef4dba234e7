"""Core data structures of a string-mass sweep.

This module defines:
    ParameterSetting -- one swept string mass with its legend label and colour.
    TrialOutcome     -- result of a single event: observables or a failure.
    SettingSummary   -- per-setting bookkeeping reported after the sweep.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from stringsweep.errors import ConfigError


@dataclass(frozen=True)
class ParameterSetting:
    """Immutable sweep point.

    Attributes:
        value: Invariant string mass in GeV (positive).
        label: ``value`` with two decimals, unique within one sweep.
        color: Matplotlib colour name used for the series.
    """

    value: float
    label: str
    color: str

    @classmethod
    def from_value(cls, value: float, color: str) -> "ParameterSetting":
        value = float(value)
        if not value > 0:
            raise ConfigError(f"string mass must be positive, got {value}")
        return cls(value=value, label=f"{value:.2f}", color=color)

    @property
    def legend(self) -> str:
        return f"{self.label} GeV string"


@dataclass(frozen=True)
class TrialOutcome:
    values: tuple[float, ...] = ()
    failed: bool = False

    @classmethod
    def success(cls, values) -> "TrialOutcome":
        return cls(values=tuple(values), failed=False)

    @classmethod
    def failure(cls) -> "TrialOutcome":
        return cls(values=(), failed=True)


@dataclass
class SettingSummary:
    label: str
    value: float
    trials_requested: int
    trials_succeeded: int = 0
    trials_failed: int = 0
    observables_filled: int = 0
    underflow: int = 0
    overflow: int = 0
    mean: float = float("nan")
    rms: float = float("nan")
    elapsed_s: float = 0.0

    def to_dict(self):
        return asdict(self)
