import pytest

from weasel.config import RunConfig
from weasel.es_core import Organism, RandomSource
from weasel.population import (
    ChildFate,
    Population,
    PopulationState,
    average_score,
    insert_child,
)
from weasel.weasel_env import GenePool

from conftest import UPPER


def org(score, value="AAA"):
    return Organism(value=value, sigma=1.0, reproduction_count=1, score=score)


def make_population(cfg, seed=None, **kwargs):
    pool = GenePool.from_config(cfg)
    rng = RandomSource(cfg.random_seed if seed is None else seed)
    return Population(cfg, pool, rng, **kwargs)


# =========================
# Slot insertion
# =========================


def test_child_fills_empty_slot_before_competing():
    buffer = [None, org(10)]
    child = org(15)
    assert insert_child(buffer, child) == (ChildFate.FILLED, 0)
    assert buffer[0] is child
    assert buffer[1].score == 10


def test_first_fit_uses_lowest_empty_index():
    buffer = [org(10), None, None]
    assert insert_child(buffer, org(1)) == (ChildFate.FILLED, 1)
    assert insert_child(buffer, org(1)) == (ChildFate.FILLED, 2)


def test_full_buffer_displaces_first_beatable_occupant():
    buffer = [org(15), org(10)]
    child = org(20)
    assert insert_child(buffer, child) == (ChildFate.DISPLACED, 0)
    assert buffer == [child, buffer[1]]
    assert buffer[1].score == 10


def test_displacement_is_positional_not_weakest():
    buffer = [org(15), org(10), org(5)]
    child = org(12)
    # beats slot 1 first; slot 2 is weaker but comes later
    assert insert_child(buffer, child) == (ChildFate.DISPLACED, 1)
    assert [o.score for o in buffer] == [15, 12, 5]


def test_tie_does_not_displace():
    buffer = [org(10), org(10)]
    assert insert_child(buffer, org(10)) == (ChildFate.DISCARDED, None)
    assert [o.score for o in buffer] == [10, 10]


def test_weak_child_is_discarded():
    buffer = [org(10), org(20)]
    child = org(3)
    assert insert_child(buffer, child) == (ChildFate.DISCARDED, None)
    assert child not in buffer


def test_average_score_over_occupied_slots():
    assert average_score([org(10), None, org(21)]) == 15
    assert average_score([None, None]) == 0


# =========================
# Generation loop
# =========================


def test_seeded_state(cat_config):
    pop = make_population(cat_config)
    assert pop.state is PopulationState.SEEDED
    assert pop.generation == 1
    assert len(pop.occupied()) == 1
    assert pop.best_score == pop.slots[0].score

    report = pop.snapshot()
    assert report.generation == 1
    assert report.average_score == pop.slots[0].score
    assert report.max_score == 81
    assert report.slots[0].parent_id is None


def test_step_builds_next_generation(cat_config):
    pop = make_population(cat_config)
    report = pop.step()
    assert pop.generation == 2
    assert report.generation == 2
    assert pop.state in (PopulationState.EVOLVING, PopulationState.CONVERGED)
    # the seed has one child, which lands in slot 0
    assert len(pop.slots) == 5
    assert pop.slots[0] is not None
    assert pop.slots[0].parent_id == 0


def test_population_bound_and_monotonic_best(cat_config):
    pop = make_population(cat_config)
    best = pop.best_score
    for _ in range(300):
        if pop.converged:
            break
        pop.step()
        assert len(pop.slots) == cat_config.population_size
        assert len(pop.occupied()) <= cat_config.population_size
        assert pop.best_score >= best
        best = pop.best_score


def test_best_score_counts_discarded_children():
    cfg = RunConfig(alphabet=UPPER, target="CAT", population_size=1, random_seed=3,
                    initial_reproduction_count=3)
    seen = []
    pop = make_population(cfg, on_child=lambda child, fate, slot: seen.append((child.score, fate)))
    initial = pop.best_score
    pop.step()
    assert len(seen) == 3
    assert pop.best_score == max([initial] + [s for s, _ in seen])
    assert len(pop.occupied()) == 1


def test_on_generation_receives_each_report(cat_config):
    reports = []
    pop = make_population(cat_config, on_generation=reports.append)
    pop.run(max_generations=6)
    assert [r.generation for r in reports] == list(range(2, pop.generation + 1))


def test_reporting_does_not_change_the_run(cat_config):
    quiet = make_population(cat_config)
    noisy = make_population(cat_config, on_generation=lambda r: None,
                            on_child=lambda c, f, s: None)
    quiet.run(max_generations=40)
    noisy.run(max_generations=40)
    assert quiet.snapshot() == noisy.snapshot()


def test_same_seed_same_run(cat_config):
    a = make_population(cat_config)
    b = make_population(cat_config)
    a.run(max_generations=60)
    b.run(max_generations=60)
    assert a.snapshot() == b.snapshot()
    assert a.rng.getstate() == b.rng.getstate()


def test_max_generations_stops_without_error():
    cfg = RunConfig(random_seed=1)
    pop = make_population(cfg)
    state = pop.run(max_generations=3)
    assert pop.generation == 3
    assert state is not PopulationState.CONVERGED


def test_cat_converges(cat_config):
    pop = make_population(cat_config)
    state = pop.run(max_generations=10000)
    assert state is PopulationState.CONVERGED
    assert pop.generation < 10000
    assert pop.best_score == 81
    assert pop.best_organism().value == "CAT"


def test_single_symbol_pool_converges_immediately():
    cfg = RunConfig(alphabet="A", target="AAA", random_seed=1)
    pop = make_population(cfg)
    assert pop.state is PopulationState.CONVERGED
    assert pop.run() is PopulationState.CONVERGED
    assert pop.generation == 1
    assert pop.best_organism().value == "AAA"
    with pytest.raises(RuntimeError):
        pop.step()
