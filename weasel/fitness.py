#!/usr/bin/env python3
from weasel.weasel_env import GenePool

# =========================
# Fitness evaluation
# =========================


def score(candidate: str, pool: GenePool) -> int:
    """
    Closeness of `candidate` to the target, by alphabet position.

    Each aligned position contributes P - |index(c) - index(t)|, so an
    exact match scores P and a neighbouring symbol scores P - 1. Positions
    beyond the shorter of the two strings contribute nothing.
    """
    p = pool.size
    total = 0
    for c, t in zip(candidate, pool.target):
        total += p - abs(pool.index(c) - pool.index(t))
    return total


def exact_match_score(candidate: str, target: str) -> int:
    """Number of positions where candidate and target agree (weasel1 scoring)."""
    return sum(1 for c, t in zip(candidate, target) if c == t)
