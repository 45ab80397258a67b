#!/usr/bin/env python3
"""
report.py

Progress output for weasel runs. Everything here only observes the
population through GenerationReport snapshots and child callbacks.

Line formats:
    ---[ Generation <g>: Avg Score: <avg> (<pct>%) ]------------------
    <slot>: (<parent>) '<value>' (<reproduction>/<sigma>) (<score>)
Slot and parent numbers are printed 1-based.
"""

import csv
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt

from weasel.es_core import Organism
from weasel.population import ChildFate, GenerationReport
from weasel.weasel_env import GenePool

plt.switch_backend("Agg")


class Reporter:
    def __init__(self, verbose: bool = False, stream=None):
        self.verbose = verbose
        self.stream = stream if stream is not None else sys.stdout

    def _out(self, line: str = "") -> None:
        print(line, file=self.stream)

    def header(self, pool: GenePool, population_size: int, seed: int) -> None:
        self._out(f"pool: '{pool.alphabet}'")
        self._out(f"target: '{pool.target}' ({pool.max_score})")
        self._out(f"population size: {population_size}")
        self._out(f"random seed: {seed}")
        self._out("<id>: (<parent>) '<value>' (<reproduction>/<mutation>) (<score>)")

    def seed_generation(self, report: GenerationReport) -> None:
        """Generation 1 holds only the seed organism, which has no parent."""
        self._out(f"---[ Generation {report.generation} ]-----------------------------")
        for s in report.slots:
            self._out(f"{s.slot + 1}: '{s.value}' ({s.reproduction_count}/{s.sigma:f}) ({s.score})")

    def generation(self, report: GenerationReport) -> None:
        self._out(
            f"---[ Generation {report.generation}: Avg Score: {report.average_score} "
            f"({report.average_percent}%) ]------------------"
        )
        for s in report.slots:
            self._out(
                f"{s.slot + 1}: ({s.parent_id + 1}) '{s.value}' "
                f"({s.reproduction_count}/{s.sigma:f}) ({s.score})"
            )

    def child(self, child: Organism, fate: ChildFate, slot: Optional[int]) -> None:
        if not self.verbose:
            return
        where = f" -> {slot + 1}" if slot is not None else ""
        self._out(f"    child of {child.parent_id + 1}: {child} {fate.value}{where}")

    def finished(self, generation: int, best: Organism, converged: bool) -> None:
        if converged:
            self._out(f"converged after {generation} generations: '{best.value}' ({best.score})")
        else:
            self._out(f"stopped after {generation} generations, best so far: '{best.value}' ({best.score})")


# =========================
# Score history + export
# =========================


class ScoreHistory:
    """(generation, average score, best score) per generation."""

    def __init__(self):
        self.rows: List[Tuple[int, int, int]] = []

    def record(self, report: GenerationReport) -> None:
        self.rows.append((report.generation, report.average_score, report.best_score))

    @property
    def generations(self) -> List[int]:
        return [r[0] for r in self.rows]

    @property
    def averages(self) -> List[int]:
        return [r[1] for r in self.rows]

    @property
    def bests(self) -> List[int]:
        return [r[2] for r in self.rows]

    def __len__(self):
        return len(self.rows)


def write_history_csv(history: ScoreHistory, out_path: Path) -> None:
    with Path(out_path).open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["generation", "average_score", "best_score"])
        writer.writerows(history.rows)


def plot_score_curve(history: ScoreHistory, out_path: Path, max_score: Optional[int] = None) -> None:
    """Best + average score vs generation, saved as an image."""
    if not len(history):
        raise RuntimeError("No generations recorded, nothing to plot")

    plt.figure()
    plt.plot(history.generations, history.bests, linestyle="-", color="tab:blue", label="Best score")
    plt.plot(history.generations, history.averages, linestyle="--", color="tab:orange", label="Avg score")
    if max_score is not None:
        plt.axhline(max_score, color="tab:green", linestyle=":", linewidth=1, label="Target score")
    plt.xlabel("Generation")
    plt.ylabel("Score (higher is better)")
    plt.title("Weasel: score over generations")
    plt.legend()
    plt.grid(True, which="both", linestyle="--", linewidth=0.5)
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()
