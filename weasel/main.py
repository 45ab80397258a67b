#!/usr/bin/env python3
"""
main.py

weasel - evolution simulator.

Evolves a small population of self-adaptive organisms toward a target
string and prints every generation.

Usage:
    weasel --seed 42 --population 5
    weasel --target CAT --pool " ABCDEFGHIJKLMNOPQRSTUVWXYZ" --plot curve.png
    weasel --config run.json --csv history.csv
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from weasel import __version__
from weasel.config import (
    CONFIG,
    ConfigurationError,
    RunConfig,
    load_config_file,
    resolve_seed,
    validate_config,
)
from weasel.es_core import RandomSource
from weasel.population import Population
from weasel.report import Reporter, ScoreHistory, plot_score_curve, write_history_csv
from weasel.weasel_env import GenePool

PROG = "weasel"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=f"{PROG} - evolution simulator",
    )
    parser.add_argument("-p", "--population", type=int, default=None, dest="population_size",
                        help=f"population limit (default: {CONFIG['population_size']})")
    parser.add_argument("-t", "--target", type=str, default=None,
                        help=f"target string (default: {CONFIG['target']})")
    parser.add_argument("-s", "--seed", type=int, default=None, dest="random_seed",
                        help="provide seed for reproducible runs")
    parser.add_argument("-g", "--pool", type=str, default=None, dest="alphabet",
                        help=f"specify the available gene pool (default: '{CONFIG['alphabet']}')")
    parser.add_argument("-m", "--mutation", type=float, default=None, dest="initial_sigma",
                        help=f"initial mutation rate (default: {CONFIG['initial_sigma']:g})")
    parser.add_argument("-r", "--reproduction", type=int, default=None,
                        dest="initial_reproduction_count",
                        help=f"initial reproduction rate (default: {CONFIG['initial_reproduction_count']})")
    parser.add_argument("-i", "--initial", type=str, default=None, dest="seed_value",
                        help="initial value of the seed organism, padded with random genes")
    parser.add_argument("--max-generations", type=int, default=None,
                        help="stop after this many generations (default: run to convergence)")
    parser.add_argument("--config", type=str, default=None,
                        help="JSON file of option overrides")
    parser.add_argument("--csv", type=str, default=None,
                        help="write per-generation scores to this CSV file")
    parser.add_argument("--plot", type=str, default=None,
                        help="save a score-over-generations plot to this PNG file")
    parser.add_argument("-v", "--verbose", action="store_true", default=None,
                        help="display additional information")
    parser.add_argument("-V", "--version", action="version",
                        version=f"{PROG} - v{__version__}")
    return parser


def load_run_config(args: argparse.Namespace) -> RunConfig:
    """CONFIG defaults < JSON file < command line."""
    overrides = {}
    if args.config:
        overrides.update(load_config_file(args.config))

    cli = vars(args).copy()
    for key in ("config", "csv", "plot"):
        cli.pop(key)
    for key, value in cli.items():
        if value is not None:
            overrides[key] = value

    return validate_config(RunConfig.from_dict(overrides))


def run(cfg: RunConfig, reporter: Optional[Reporter] = None,
        history: Optional[ScoreHistory] = None) -> Population:
    """Seed, evolve and report one run. Returns the final population."""
    reporter = reporter if reporter is not None else Reporter(verbose=cfg.verbose)
    seed = resolve_seed(cfg)
    rng = RandomSource(seed)
    pool = GenePool.from_config(cfg)

    def on_generation(report):
        reporter.generation(report)
        if history is not None:
            history.record(report)

    population = Population(
        cfg,
        pool,
        rng,
        on_generation=on_generation,
        on_child=reporter.child,
    )

    reporter.header(pool, cfg.population_size, seed)
    first = population.snapshot()
    reporter.seed_generation(first)
    if history is not None:
        history.record(first)

    population.run(max_generations=cfg.max_generations)
    reporter.finished(population.generation, population.best_organism(), population.converged)
    return population


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_run_config(args)
    except ConfigurationError as e:
        print(f"{e}\n", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    history = ScoreHistory()
    population = run(cfg, history=history)

    if args.csv:
        write_history_csv(history, Path(args.csv))
        print(f"Wrote score history to {args.csv}")
    if args.plot:
        plot_score_curve(history, Path(args.plot), max_score=population.max_score)
        print(f"Wrote score curve to {args.plot}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
