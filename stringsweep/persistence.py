"""Run directory layout: per-setting histogram JSON files plus summary.csv."""

from __future__ import annotations

import csv
import json
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence

from stringsweep.histogram import Histogram
from stringsweep.models import SettingSummary

logger = logging.getLogger("stringsweep.persistence")

SUMMARY_COLUMNS = [
    "label",
    "value",
    "trials_requested",
    "trials_succeeded",
    "trials_failed",
    "observables_filled",
    "underflow",
    "overflow",
    "mean",
    "rms",
    "elapsed_s",
]


def make_run_dir(base_dir: str | Path) -> Path:
    """Create a fresh timestamped directory under ``base_dir``; old runs are kept."""
    base = Path(base_dir)
    run_dir = base / datetime.now().strftime("%Y%m%d_%H%M%S")
    counter = 1
    while run_dir.exists():
        run_dir = base / f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_{counter}"
        counter += 1
    run_dir.mkdir(parents=True)
    return run_dir


def _json_float(value: float) -> float | None:
    return None if math.isnan(value) else value


def save_histogram(series, run_dir: Path) -> Path:
    """Persist one series as ``hist_<label>.json`` (histogram plus setting metadata)."""
    setting = series.setting
    payload: Dict[str, Any] = {
        "setting": {"value": setting.value, "label": setting.label, "color": setting.color},
        "histogram": series.histogram.to_dict(),
    }
    path = run_dir / f"hist_{setting.label}.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.debug("Saved %s", path)
    return path


def load_histogram(path: str | Path) -> Histogram:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return Histogram.from_dict(data["histogram"] if "histogram" in data else data)


def write_summary_csv(summaries: Sequence[SettingSummary], run_dir: Path) -> Path:
    out_path = run_dir / "summary.csv"
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(SUMMARY_COLUMNS)
        for s in summaries:
            row = s.to_dict()
            writer.writerow(
                [
                    row[c] if not isinstance(row[c], float) else _json_float(row[c])
                    for c in SUMMARY_COLUMNS
                ]
            )
    logger.info("Summary written: %s", out_path)
    return out_path


def read_summary_csv(path: str | Path) -> List[Dict[str, str]]:
    with open(path, "r", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def save_run(series_list: Sequence, summaries: Sequence[SettingSummary], run_dir: Path) -> List[Path]:
    """Write all histogram files and the summary table of one sweep."""
    paths = [save_histogram(series, run_dir) for series in series_list]
    paths.append(write_summary_csv(summaries, run_dir))
    return paths
