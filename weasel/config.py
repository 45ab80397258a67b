#!/usr/bin/env python3
"""
config.py

Defaults and validation for the weasel evolution simulator.

CONFIG holds every tunable with its default value. A RunConfig is built
from CONFIG plus overrides (JSON file, command line) and must pass
validate_config() before the engine sees it.
"""

import json
import math
import time
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional

CONFIG = {
    # Gene pool + goal
    "alphabet": " ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "target": "METHINKS IT IS LIKE A WEASEL",

    # Population
    "population_size": 5,

    # Randomness / reproducibility (None = current time)
    "random_seed": None,

    # Self-adaptive strategy parameters of the seed organism
    "initial_sigma": 5.0,
    "initial_reproduction_count": 1,
    "seed_value": "",

    # Run control (None = run until convergence)
    "max_generations": None,

    # Logging
    "verbose": False,

    # Hill-climbing baseline (weasel1)
    "generation_size": 100,
    "mutation_rate": 5,  # out of 100
}

# |sigma| is never allowed below this, or adaptation freezes.
SIGMA_FLOOR = 0.01

MAX_SEED = 2 ** 32 - 1


class ConfigurationError(ValueError):
    """Invalid option value; fatal, reported before the engine runs."""


@dataclass
class RunConfig:
    alphabet: str = CONFIG["alphabet"]
    target: str = CONFIG["target"]
    population_size: int = CONFIG["population_size"]
    random_seed: Optional[int] = CONFIG["random_seed"]
    initial_sigma: float = CONFIG["initial_sigma"]
    initial_reproduction_count: int = CONFIG["initial_reproduction_count"]
    seed_value: str = CONFIG["seed_value"]
    max_generations: Optional[int] = CONFIG["max_generations"]
    verbose: bool = CONFIG["verbose"]
    generation_size: int = CONFIG["generation_size"]
    mutation_rate: int = CONFIG["mutation_rate"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunConfig":
        """
        Build a RunConfig from CONFIG defaults overridden by `data`.
        Keys whose value is None in `data` are treated as "not given",
        except for the keys whose default is None anyway.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown option(s): {', '.join(unknown)}")

        merged = {k: CONFIG[k] for k in known}
        for k, v in data.items():
            if v is None and CONFIG[k] is not None:
                continue
            merged[k] = v
        return cls(**merged)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config_file(filename: str) -> Dict[str, Any]:
    """Read a JSON object of option overrides."""
    try:
        with open(filename, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read config file '{filename}': {e}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid config file '{filename}': {e}")
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file '{filename}' must hold a JSON object")
    return data


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(cfg: RunConfig) -> RunConfig:
    """
    Check every option and raise ConfigurationError naming the offending
    value. Returns cfg unchanged so callers can chain.
    """
    if not _is_int(cfg.population_size) or cfg.population_size < 1:
        raise ConfigurationError(f"invalid population size '{cfg.population_size}'")

    if not _is_int(cfg.initial_reproduction_count) or cfg.initial_reproduction_count < 1:
        raise ConfigurationError(
            f"invalid reproduction rate '{cfg.initial_reproduction_count}'"
        )

    if isinstance(cfg.initial_sigma, bool) or not isinstance(cfg.initial_sigma, (int, float)) \
            or not math.isfinite(cfg.initial_sigma) or cfg.initial_sigma <= 0:
        raise ConfigurationError(f"invalid mutation rate '{cfg.initial_sigma}'")

    if cfg.random_seed is not None:
        if not _is_int(cfg.random_seed) or not 0 <= cfg.random_seed <= MAX_SEED:
            raise ConfigurationError(f"invalid random seed '{cfg.random_seed}'")

    if not isinstance(cfg.alphabet, str) or not cfg.alphabet:
        raise ConfigurationError(f"invalid pool '{cfg.alphabet}'")
    if len(set(cfg.alphabet)) != len(cfg.alphabet):
        raise ConfigurationError(
            f"invalid pool '{cfg.alphabet}'\npool symbols must be distinct"
        )

    if not isinstance(cfg.target, str) or not cfg.target:
        raise ConfigurationError(f"invalid target '{cfg.target}'")
    for ch in cfg.target:
        if ch not in cfg.alphabet:
            raise ConfigurationError(
                f"invalid target '{cfg.target}'\ntarget must consist of '{cfg.alphabet}'"
            )

    if not isinstance(cfg.seed_value, str):
        raise ConfigurationError(f"invalid initial value '{cfg.seed_value}'")
    for ch in cfg.seed_value:
        if ch not in cfg.alphabet:
            raise ConfigurationError(
                f"invalid initial value '{cfg.seed_value}'\n"
                f"initial value must consist of '{cfg.alphabet}'"
            )

    if cfg.max_generations is not None:
        if not _is_int(cfg.max_generations) or cfg.max_generations < 1:
            raise ConfigurationError(f"invalid generation limit '{cfg.max_generations}'")

    if not _is_int(cfg.generation_size) or cfg.generation_size < 1:
        raise ConfigurationError(f"invalid generation size '{cfg.generation_size}'")
    if not _is_int(cfg.mutation_rate) or not 0 <= cfg.mutation_rate <= 100:
        raise ConfigurationError(f"invalid mutation probability '{cfg.mutation_rate}'")

    return cfg


def resolve_seed(cfg: RunConfig) -> int:
    """Seed to use for this run: the configured one, else wall-clock time."""
    if cfg.random_seed is not None:
        return cfg.random_seed
    return int(time.time()) & MAX_SEED
