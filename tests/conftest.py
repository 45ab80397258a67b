import os
import sys

import pytest

# Make the weasel package importable without installing it
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from weasel.config import RunConfig
from weasel.es_core import RandomSource
from weasel.weasel_env import GenePool

UPPER = " ABCDEFGHIJKLMNOPQRSTUVWXYZ"


@pytest.fixture
def rng():
    return RandomSource(12345)


@pytest.fixture
def default_pool():
    cfg = RunConfig()
    return GenePool(cfg.alphabet, cfg.target)


@pytest.fixture
def cat_pool():
    return GenePool(UPPER, "CAT")


@pytest.fixture
def cat_config():
    return RunConfig(alphabet=UPPER, target="CAT", population_size=5, random_seed=7)
