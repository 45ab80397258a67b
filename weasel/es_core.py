#!/usr/bin/env python3
"""
es_core.py

Self-adaptive evolution-strategy operators for the weasel simulator.

An Organism carries its own strategy parameters:
  - sigma: mutation strength, the std dev of every Gaussian draw made
    when the organism is mutated (value, reproduction count and sigma
    itself all move by N(0, |sigma|)).
  - reproduction_count: how many children it produces per generation.

Both parameters are inherited by children and mutated along with the
value, so lineages that happen to carry good exploration settings are
rewarded with fitter offspring.

Random draws per mutate() call, in order: one Gaussian per value
position, one for reproduction_count, one for sigma. Keeping this order
fixed is what makes a run reproducible from its seed.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional

from weasel.config import SIGMA_FLOOR
from weasel.fitness import score
from weasel.weasel_env import GenePool

# =========================
# Random source
# =========================


class RandomSource(random.Random):
    """
    Seeded random generator threaded explicitly through the operators.
    Adds the Marsaglia polar Gaussian on top of random.Random.
    """

    def gaussian(self, sigma: float) -> float:
        """
        One N(0, sigma^2) draw by the Marsaglia polar method.
        A negative sigma just flips the sign of the draw.
        """
        while True:
            u = self.random() * 2 - 1
            v = self.random() * 2 - 1
            s = u * u + v * v
            if 0 < s <= 1.0:
                break
        return sigma * v * math.sqrt(-2.0 * math.log(s) / s)


# =========================
# Organism
# =========================


@dataclass
class Organism:
    value: str
    sigma: float
    reproduction_count: int
    score: int = 0
    parent_id: Optional[int] = None  # slot index of the parent, reporting only

    def __str__(self):
        return f"'{self.value}' ({self.reproduction_count}/{self.sigma:f}) ({self.score})"


# =========================
# Operators
# =========================


def mutate(organism: Organism, pool: GenePool, rng: RandomSource) -> Organism:
    """
    Mutate `organism` in place and return it.

    Offsets are truncated toward zero before use; the symbol index wraps
    around the alphabet, so an offset of k and k + P give the same symbol.
    """
    sigma = organism.sigma
    organism.value = "".join(
        pool.shift(ch, int(rng.gaussian(sigma))) for ch in organism.value
    )

    organism.reproduction_count += int(rng.gaussian(sigma))
    if organism.reproduction_count < 1:
        organism.reproduction_count = 1

    organism.sigma += rng.gaussian(sigma)
    if abs(organism.sigma) < SIGMA_FLOOR:
        organism.sigma = math.copysign(SIGMA_FLOOR, organism.sigma)

    organism.score = score(organism.value, pool)
    return organism


def new_organism(cfg, pool: GenePool, rng: RandomSource) -> Organism:
    """
    Seed organism: cfg.seed_value truncated to the target length, the rest
    filled with uniformly random symbols. Strategy parameters come from cfg.
    """
    t = pool.target_length
    value = cfg.seed_value[:t]
    value += "".join(pool.random_symbol(rng) for _ in range(t - len(value)))
    return Organism(
        value=value,
        sigma=float(cfg.initial_sigma),
        reproduction_count=cfg.initial_reproduction_count,
        score=score(value, pool),
    )


def reproduce(parent: Organism, parent_id: int, pool: GenePool, rng: RandomSource) -> Organism:
    """Copy the parent's value and strategy parameters into a child, then mutate it."""
    child = Organism(
        value=parent.value,
        sigma=parent.sigma,
        reproduction_count=parent.reproduction_count,
        parent_id=parent_id,
    )
    return mutate(child, pool, rng)
