#!/usr/bin/env python3
"""
population.py

Bounded population of organism slots and the generation loop.

Each generation every occupied slot produces `reproduction_count`
mutated children. Children go into a fresh buffer of `population_size`
slots:
  - first-fit into the lowest-index empty slot while any is empty,
  - otherwise displace the first occupant (ascending slot index) whose
    score the child strictly exceeds,
  - otherwise the child is discarded.
The buffer then becomes the population. The best score ever produced
is tracked independently of which children survive, and the loop stops
once it reaches the maximum score (an exact match of the target).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from weasel.es_core import Organism, RandomSource, new_organism, reproduce
from weasel.weasel_env import GenePool


class PopulationState(Enum):
    SEEDED = "seeded"
    EVOLVING = "evolving"
    CONVERGED = "converged"


class ChildFate(Enum):
    FILLED = "filled"        # took an empty slot
    DISPLACED = "displaced"  # replaced a weaker occupant
    DISCARDED = "discarded"  # did not survive selection


@dataclass(frozen=True)
class SlotSnapshot:
    slot: int
    parent_id: Optional[int]
    value: str
    reproduction_count: int
    sigma: float
    score: int


@dataclass(frozen=True)
class GenerationReport:
    """Read-only view of one generation, handed to reporters."""
    generation: int
    average_score: int
    average_percent: int
    best_score: int
    max_score: int
    slots: Tuple[SlotSnapshot, ...]


Slots = List[Optional[Organism]]


def insert_child(buffer: Slots, child: Organism) -> Tuple[ChildFate, Optional[int]]:
    """
    Try to place `child` into `buffer` (modified in place).
    Returns the fate of the child and the slot it now occupies, if any.
    """
    for k, occupant in enumerate(buffer):
        if occupant is None:
            buffer[k] = child
            return ChildFate.FILLED, k

    # positional tie-break: first beatable occupant, not the weakest one
    for k, occupant in enumerate(buffer):
        if child.score > occupant.score:
            buffer[k] = child
            return ChildFate.DISPLACED, k

    return ChildFate.DISCARDED, None


def average_score(slots: Slots) -> int:
    """Integer mean score over occupied slots (0 for an empty population)."""
    scores = [o.score for o in slots if o is not None]
    if not scores:
        return 0
    return sum(scores) // len(scores)


class Population:
    def __init__(
        self,
        cfg,
        pool: GenePool,
        rng: RandomSource,
        on_generation: Optional[Callable[[GenerationReport], None]] = None,
        on_child: Optional[Callable[[Organism, ChildFate, Optional[int]], None]] = None,
    ):
        self.pool = pool
        self.rng = rng
        self.size = cfg.population_size
        self.on_generation = on_generation
        self.on_child = on_child

        self.slots: Slots = [None] * self.size
        self.slots[0] = new_organism(cfg, pool, rng)
        self.generation = 1
        self.best_score = self.slots[0].score
        self.state = PopulationState.SEEDED
        if self.best_score >= self.max_score:
            self.state = PopulationState.CONVERGED

    @property
    def max_score(self) -> int:
        return self.pool.max_score

    @property
    def converged(self) -> bool:
        return self.state is PopulationState.CONVERGED

    def occupied(self) -> List[Tuple[int, Organism]]:
        return [(i, o) for i, o in enumerate(self.slots) if o is not None]

    def best_organism(self) -> Organism:
        # first slot wins ties
        best = None
        for _, o in self.occupied():
            if best is None or o.score > best.score:
                best = o
        return best

    def snapshot(self) -> GenerationReport:
        avg = average_score(self.slots)
        slots = tuple(
            SlotSnapshot(
                slot=i,
                parent_id=o.parent_id,
                value=o.value,
                reproduction_count=o.reproduction_count,
                sigma=o.sigma,
                score=o.score,
            )
            for i, o in self.occupied()
        )
        return GenerationReport(
            generation=self.generation,
            average_score=avg,
            average_percent=avg * 100 // self.max_score,
            best_score=self.best_score,
            max_score=self.max_score,
            slots=slots,
        )

    def step(self) -> GenerationReport:
        """Run one generation: reproduce, tournament-insert, replace."""
        if self.converged:
            raise RuntimeError("population has already converged")
        self.state = PopulationState.EVOLVING

        buffer: Slots = [None] * self.size
        for i, parent in enumerate(self.slots):
            if parent is None:
                continue
            for _ in range(parent.reproduction_count):
                child = reproduce(parent, i, self.pool, self.rng)
                fate, slot = insert_child(buffer, child)
                if child.score > self.best_score:
                    self.best_score = child.score
                if self.on_child is not None:
                    self.on_child(child, fate, slot)

        self.slots = buffer
        self.generation += 1
        if self.best_score >= self.max_score:
            self.state = PopulationState.CONVERGED

        report = self.snapshot()
        if self.on_generation is not None:
            self.on_generation(report)
        return report

    def run(self, max_generations: Optional[int] = None) -> PopulationState:
        """
        Step until convergence, or until the generation counter reaches
        `max_generations` when one is given.
        """
        while not self.converged:
            if max_generations is not None and self.generation >= max_generations:
                break
            self.step()
        return self.state
