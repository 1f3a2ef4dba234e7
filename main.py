#!/usr/bin/env python3
"""Run a string-mass sweep and plot primary-hadron rapidity distributions."""

import argparse
import logging
import os
import sys

from stringsweep.config import SweepConfig, load_config
from stringsweep.errors import StringSweepError
from stringsweep.generator import pythia_session_factory
from stringsweep.persistence import make_run_dir, save_run
from stringsweep.sweep import SweepOrchestrator
from stringsweep.visualization import next_unique_path, render_series

logger = logging.getLogger("stringsweep")


def run_sweep(config: SweepConfig, session_factory=None) -> str:
    """Run the sweep, persist aggregated results and return the plot path.

    Nothing is written to disk unless every setting finalized.
    """
    if session_factory is None:
        session_factory = pythia_session_factory(seed=config.seed)
    orchestrator = SweepOrchestrator(config, session_factory)
    collector = orchestrator.run()
    series_list = collector.as_series_list()

    run_dir = make_run_dir(config.output_dir)
    save_run(series_list, orchestrator.summaries, run_dir)
    plot_path = next_unique_path(os.path.join(run_dir, config.plot_name))
    render_series(
        series_list,
        plot_path,
        title=config.title,
        x_label=config.x_label,
        y_label=config.y_label,
        line_style=config.line_style,
    )
    return plot_path


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Rapidity distributions of primary hadrons for a sweep of string masses"
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the YAML/JSON configuration file (default: config.yaml)",
    )
    parser.add_argument("--n-event", type=int, default=None, help="Override sweep.n_event")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        if args.n_event is not None:
            config.n_event = args.n_event
            config.validate()
    except StringSweepError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("%s", e)
        return 1

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        plot_path = run_sweep(config)
    except StringSweepError as e:
        logger.error("Sweep aborted, no plot written: %s", e)
        return 1
    logger.info("Done: %s", plot_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
