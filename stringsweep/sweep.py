"""Sweep orchestration over string masses.

For every `ParameterSetting` the orchestrator walks the one-way state
machine ``INIT -> RUNNING -> FINALIZED``:

* INIT      -- build a fresh generator session, apply the fixed option set,
               initialise it and create an empty histogram. Any failure is an
               `InitError` and aborts the whole sweep.
* RUNNING   -- run exactly ``n_event`` trials. Failed trials are logged and
               skipped (no retry, no backfill); successful ones fill the
               histogram once per observable.
* FINALIZED -- seal the histogram, record a `SettingSummary` and hand the
               histogram to the `SeriesCollector`.

Settings are independent, so with ``workers > 1`` they run on a thread pool;
results are still added to the collector in sweep order. When one setting fails
to initialise, the settings still running stop at their next trial.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from enum import Enum
from typing import Callable, Dict, Iterable, List

from stringsweep.config import SweepConfig
from stringsweep.errors import ConfigError, InitError, SweepAborted, SweepStateError
from stringsweep.generator import DEFAULT_OPTIONS, GeneratorOption, GeneratorSession
from stringsweep.histogram import Histogram
from stringsweep.models import ParameterSetting, SettingSummary
from stringsweep.series import SeriesCollector
from stringsweep.trial import TrialRunner

logger = logging.getLogger("stringsweep.sweep")

SessionFactory = Callable[[ParameterSetting], GeneratorSession]


class SettingState(Enum):
    INIT = "init"
    RUNNING = "running"
    FINALIZED = "finalized"


_NEXT_STATE = {
    None: SettingState.INIT,
    SettingState.INIT: SettingState.RUNNING,
    SettingState.RUNNING: SettingState.FINALIZED,
}


class SweepOrchestrator:
    def __init__(
        self,
        config: SweepConfig,
        session_factory: SessionFactory,
        collector: SeriesCollector | None = None,
        options: Iterable[GeneratorOption] = DEFAULT_OPTIONS,
    ):
        self.config = config
        self.session_factory = session_factory
        self.collector = collector if collector is not None else SeriesCollector()
        self.options = frozenset(options)
        self.states: Dict[str, SettingState] = {}
        self.summaries: List[SettingSummary] = []
        self._abort = threading.Event()

    def _advance(self, setting: ParameterSetting, state: SettingState) -> None:
        current = self.states.get(setting.label)
        if _NEXT_STATE.get(current) is not state:
            raise SweepStateError(
                f"illegal transition for setting {setting.label}: {current} -> {state}"
            )
        self.states[setting.label] = state

    # --- public API ---
    def run(self) -> SeriesCollector:
        """Run every setting and return the collector with one series per setting."""
        settings = self.config.settings()
        labels = [s.label for s in settings]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise ConfigError(f"duplicate sweep labels: {', '.join(duplicates)}")

        logger.info(
            "Sweep start: %d settings x %d events (quark id %d, %s quarks)",
            len(settings),
            self.config.n_event,
            self.config.quark_id,
            "massless" if self.config.massless_quarks else "massive",
        )
        if self.config.workers > 1 and len(settings) > 1:
            results = self._run_parallel(settings)
        else:
            results = [self.run_setting(s) for s in settings]

        for setting, (histogram, summary) in zip(settings, results):
            self.collector.add(setting, histogram)
            self.summaries.append(summary)
        logger.info("Sweep finished: %d series collected", len(self.collector))
        return self.collector

    def run_setting(self, setting: ParameterSetting) -> tuple[Histogram, SettingSummary]:
        """Run the full INIT -> RUNNING -> FINALIZED cycle for a single setting."""
        cfg = self.config
        t0 = time.perf_counter()

        self._advance(setting, SettingState.INIT)
        session = self._init_session(setting)
        histogram = Histogram(
            cfg.hist_lo,
            cfg.hist_hi,
            cfg.hist_bins,
            title=f"Rapidity distribution dn/dy of primary hadrons ({setting.legend})",
        )
        runner = TrialRunner(cfg.quark_id, setting.value, cfg.massless_quarks)
        summary = SettingSummary(
            label=setting.label, value=setting.value, trials_requested=cfg.n_event
        )

        self._advance(setting, SettingState.RUNNING)
        report_every = max(1, cfg.n_event // 10)
        for i_event in range(cfg.n_event):
            if self._abort.is_set():
                raise SweepAborted(f"setting {setting.label} stopped after {i_event} events")
            outcome = runner.run(session)
            if outcome.failed:
                summary.trials_failed += 1
                logger.warning(
                    "Event generation failed (setting %s, trial %d/%d)",
                    setting.label,
                    i_event + 1,
                    cfg.n_event,
                )
            else:
                summary.trials_succeeded += 1
                for value in outcome.values:
                    histogram.fill(value)
                summary.observables_filled += len(outcome.values)
            if (i_event + 1) % report_every == 0:
                logger.info(
                    "Progress %s GeV: %d/%d events, %d failed",
                    setting.label,
                    i_event + 1,
                    cfg.n_event,
                    summary.trials_failed,
                )

        histogram.seal()
        session.print_statistics()
        summary.underflow = histogram.underflow
        summary.overflow = histogram.overflow
        summary.mean = histogram.mean()
        summary.rms = histogram.rms()
        summary.elapsed_s = time.perf_counter() - t0
        self._advance(setting, SettingState.FINALIZED)
        logger.info(
            "Setting %s GeV finalized: %d/%d events ok, %d hadrons, mean y=%.4g rms=%.4g (%.2fs)",
            setting.label,
            summary.trials_succeeded,
            summary.trials_requested,
            summary.observables_filled,
            summary.mean,
            summary.rms,
            summary.elapsed_s,
        )
        logger.debug("\n%s", histogram.to_text())
        return histogram, summary

    # --- helpers ---
    def _init_session(self, setting: ParameterSetting) -> GeneratorSession:
        try:
            session = self.session_factory(setting)
            session.configure(self.options)
            ok = session.init_session()
        except InitError:
            raise
        except Exception as e:
            raise InitError(f"generator setup failed for {setting.legend}: {e}") from e
        if not ok:
            raise InitError(f"generator initialisation failed for {setting.legend}")
        return session

    def _run_parallel(self, settings: List[ParameterSetting]):
        slots: list = [None] * len(settings)
        workers = min(self.config.workers, len(settings))
        logger.info("Running %d settings on %d worker threads", len(settings), workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {pool.submit(self.run_setting, s): idx for idx, s in enumerate(settings)}
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            errors = [f.exception() for f in done if f.exception() is not None]
            if errors:
                # running settings stop at their next trial, queued ones never start
                self._abort.set()
                for future in pending:
                    future.cancel()
                raise next((e for e in errors if not isinstance(e, SweepAborted)), errors[0])
            for future, idx in futures.items():
                slots[idx] = future.result()
        return slots
