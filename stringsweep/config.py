"""Sweep configuration: defaults, file loading and validation.

Configuration files are YAML (``.yml`` / ``.yaml``) or JSON, with the
sections ``sweep``, ``histogram``, ``plot`` and ``output`` plus a top-level
``log_level``. Missing keys fall back to the values below.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List

import yaml

from stringsweep.errors import ConfigError
from stringsweep.models import ParameterSetting

DEFAULT_MASSES = [5.0, 20.0, 100.0]
DEFAULT_COLORS = ["steelblue", "seagreen", "indianred"]
DEFAULT_TITLE = "Rapidity distributions of primary hadrons for differing string energies"

# 1 - down, 2 - up, 3 - strange, 4 - charm, 5 - bottom, 6 - top
QUARK_IDS = (1, 2, 3, 4, 5, 6)


@dataclass
class SweepConfig:
    masses: List[float] = field(default_factory=lambda: list(DEFAULT_MASSES))
    colors: List[str] = field(default_factory=lambda: list(DEFAULT_COLORS))
    n_event: int = 1000000
    quark_id: int = 1
    massless_quarks: bool = True
    workers: int = 1
    seed: int | None = None
    hist_lo: float = -10.0
    hist_hi: float = 10.0
    hist_bins: int = 100
    title: str = DEFAULT_TITLE
    x_label: str = "y"
    y_label: str = "n"
    line_style: str = "--"
    output_dir: str = "results"
    plot_name: str = "rapidityplot.png"
    log_level: str = "INFO"

    def validate(self) -> "SweepConfig":
        if not self.masses:
            raise ConfigError("sweep.masses must be a non-empty list")
        if len(self.colors) < len(self.masses):
            raise ConfigError(
                f"sweep.colors has {len(self.colors)} entries for {len(self.masses)} masses"
            )
        if self.n_event < 0:
            raise ConfigError(f"sweep.n_event must be >= 0, got {self.n_event}")
        if self.quark_id not in QUARK_IDS:
            raise ConfigError(f"sweep.quark_id must be one of {QUARK_IDS}, got {self.quark_id}")
        if self.workers < 1:
            raise ConfigError(f"sweep.workers must be >= 1, got {self.workers}")
        if self.hist_bins <= 0 or not self.hist_lo < self.hist_hi:
            raise ConfigError(
                "histogram needs lo < hi and bins > 0, got "
                f"lo={self.hist_lo} hi={self.hist_hi} bins={self.hist_bins}"
            )
        # raises ConfigError on non-positive masses
        self.settings()
        return self

    def settings(self) -> List[ParameterSetting]:
        return [
            ParameterSetting.from_value(mass, color)
            for mass, color in zip(self.masses, self.colors)
        ]


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"config section '{name}' must be a mapping")
    return value


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"{key} must be a whole number, got {value!r}")
    return int(value)


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def config_from_dict(cfg: Dict[str, Any]) -> SweepConfig:
    """Build and validate a `SweepConfig` from a parsed configuration mapping."""
    sweep_cfg = _section(cfg, "sweep")
    hist_cfg = _section(cfg, "histogram")
    plot_cfg = _section(cfg, "plot")
    out_cfg = _section(cfg, "output")
    defaults = SweepConfig()
    try:
        seed = sweep_cfg.get("seed", defaults.seed)
        config = SweepConfig(
            masses=[float(m) for m in sweep_cfg.get("masses", defaults.masses)],
            colors=[str(c) for c in sweep_cfg.get("colors", defaults.colors)],
            n_event=_as_int(sweep_cfg.get("n_event", defaults.n_event), "sweep.n_event"),
            quark_id=_as_int(sweep_cfg.get("quark_id", defaults.quark_id), "sweep.quark_id"),
            massless_quarks=_as_bool(
                sweep_cfg.get("massless_quarks", defaults.massless_quarks), "sweep.massless_quarks"
            ),
            workers=_as_int(sweep_cfg.get("workers", defaults.workers), "sweep.workers"),
            seed=_as_int(seed, "sweep.seed") if seed is not None else None,
            hist_lo=float(hist_cfg.get("lo", defaults.hist_lo)),
            hist_hi=float(hist_cfg.get("hi", defaults.hist_hi)),
            hist_bins=_as_int(hist_cfg.get("bins", defaults.hist_bins), "histogram.bins"),
            title=str(plot_cfg.get("title", defaults.title)),
            x_label=str(plot_cfg.get("x_label", defaults.x_label)),
            y_label=str(plot_cfg.get("y_label", defaults.y_label)),
            line_style=str(plot_cfg.get("line_style", defaults.line_style)),
            output_dir=str(out_cfg.get("dir", defaults.output_dir)),
            plot_name=str(out_cfg.get("plot_name", defaults.plot_name)),
            log_level=str(cfg.get("log_level", defaults.log_level)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid configuration value: {e}") from e
    return config.validate()


def load_config(config_file: str = "config.yaml") -> SweepConfig:
    """Load configuration from a YAML or JSON file."""
    if not os.path.isfile(config_file):
        raise ConfigError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    try:
        if config_file.endswith((".yml", ".yaml")):
            cfg = yaml.safe_load(text) or {}
        else:
            cfg = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot parse {config_file}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigError(f"{config_file} must contain a mapping at top level")
    return config_from_dict(cfg)
