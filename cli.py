"""Command-line interface for Passive-Aggressive training runs."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np

from config import Config, load_config
from instances import Instance, make_classification, make_sequences
from plots.metrics import generate_plots
from runner.loop import evaluate, run_loop
from telemetry.writer import write_history

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Passive-Aggressive online trainer")
    parser.add_argument(
        "--config",
        required=True,
        help="Path to YAML configuration file.",
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output directory for history and plots.",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip writing matplotlib figures.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    cfg = load_config(args.config)
    if cfg.run.logging:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    strategy = cfg.strategy
    instances = _make_instances(cfg, strategy)
    weights, history = run_loop(cfg, strategy, instances)
    logger.info(
        "finished after %d epochs, training loss %.4f",
        len(history),
        evaluate(strategy, weights, instances, cfg.loss),
    )

    out_dir = Path(args.out)
    write_history(out_dir / "history.jsonl", (record.to_dict() for record in history))
    if not args.no_plots:
        generate_plots(history, out_dir / "plots")


def _make_instances(cfg: Config, strategy) -> list[Instance]:
    rng = np.random.default_rng(cfg.run.seed + 1)
    if cfg.problem.type == "sequence":
        instances, _ = make_sequences(
            strategy,
            cfg.problem.n_instances,
            length=cfg.problem.length,
            active=cfg.problem.active,
            weighted=cfg.problem.weighted,
            rng=rng,
        )
    else:
        instances, _ = make_classification(
            strategy,
            cfg.problem.n_instances,
            active=cfg.problem.active,
            weighted=cfg.problem.weighted,
            rng=rng,
        )
    return instances


if __name__ == "__main__":
    main()
