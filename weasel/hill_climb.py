#!/usr/bin/env python3
"""
hill_climb.py

Dawkins' original weasel program, kept as a non-adaptive baseline.

One candidate string. Every generation makes `generation_size` copies,
each symbol replaced by a random pool symbol with probability
mutation_rate/100, and keeps the last copy scoring at least as well as
the best copy seen so far this generation. Scoring is exact-match count,
so there is no gradient for near misses.

Usage:
    weasel1 --seed 42 --generation-size 100 --mutation-rate 5
"""

import argparse
import sys
from typing import List, Optional, Tuple

from weasel import __version__
from weasel.config import CONFIG, ConfigurationError, RunConfig, resolve_seed, validate_config
from weasel.es_core import RandomSource
from weasel.fitness import exact_match_score
from weasel.weasel_env import GenePool

PROG = "weasel1"


def mutate_copy(candidate: str, pool: GenePool, mutation_rate: int, rng: RandomSource) -> str:
    out = []
    for ch in candidate:
        if rng.randrange(100) < mutation_rate:
            ch = pool.random_symbol(rng)
        out.append(ch)
    return "".join(out)


def hill_climb(
    pool: GenePool,
    rng: RandomSource,
    generation_size: int = CONFIG["generation_size"],
    mutation_rate: int = CONFIG["mutation_rate"],
    max_generations: Optional[int] = None,
    verbose: bool = False,
    out=None,
) -> Tuple[str, int, List[int]]:
    """
    Run the baseline until the candidate matches the target (or
    max_generations is reached). Returns (candidate, generation, scores),
    `scores` holding the candidate score of every generation.
    """
    out = out if out is not None else sys.stdout
    tlen = pool.target_length

    candidate = "".join(pool.random_symbol(rng) for _ in range(tlen))
    candidate_score = exact_match_score(candidate, pool.target)
    generation = 1
    scores = [candidate_score]
    print(f"{generation}: '{candidate}' ({candidate_score})", file=out)

    while candidate_score != tlen:
        if max_generations is not None and generation >= max_generations:
            break
        generation += 1
        base = candidate
        candidate_score = 0
        for i in range(1, generation_size + 1):
            child = mutate_copy(base, pool, mutation_rate, rng)
            child_score = exact_match_score(child, pool.target)
            if verbose:
                print(f"    child {i}: '{child}' ({child_score})", file=out)
            if child_score >= candidate_score:
                candidate = child
                candidate_score = child_score
        scores.append(candidate_score)
        print(f"{generation}: '{candidate}' ({candidate_score})", file=out)

    return candidate, generation, scores


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="basic implementation of Dawkins' weasel program",
    )
    parser.add_argument("-t", "--target", type=str, default=None,
                        help=f"target string (default: {CONFIG['target']})")
    parser.add_argument("-g", "--pool", type=str, default=None, dest="alphabet",
                        help=f"available gene pool (default: '{CONFIG['alphabet']}')")
    parser.add_argument("-n", "--generation-size", type=int, default=None,
                        help=f"children per generation (default: {CONFIG['generation_size']})")
    parser.add_argument("-m", "--mutation-rate", type=int, default=None,
                        help=f"per-symbol mutation chance out of 100 (default: {CONFIG['mutation_rate']})")
    parser.add_argument("-s", "--seed", type=int, default=None, dest="random_seed",
                        help="seed for reproducible runs (default: current time)")
    parser.add_argument("--max-generations", type=int, default=None,
                        help="stop after this many generations")
    parser.add_argument("-v", "--verbose", action="store_true", default=None,
                        help="display every child")
    parser.add_argument("-V", "--version", action="version",
                        version=f"{PROG} - v{__version__}")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = validate_config(RunConfig.from_dict(vars(args)))
    except ConfigurationError as e:
        print(f"{e}\n", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    seed = resolve_seed(cfg)
    rng = RandomSource(seed)
    pool = GenePool.from_config(cfg)

    print(f"target: '{pool.target}'")
    print(f"pool: '{pool.alphabet}'")
    print(f"population size: {cfg.generation_size}")
    print(f"mutation rate: {cfg.mutation_rate}/100")
    print(f"random seed: {seed}")
    print("------------------------------------------------")

    hill_climb(
        pool,
        rng,
        generation_size=cfg.generation_size,
        mutation_rate=cfg.mutation_rate,
        max_generations=cfg.max_generations,
        verbose=cfg.verbose,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
