"""
Tests for search.py - the generation loop and stopping policy
"""

import pytest

from schedule import Schedule
from search import (
    GenerationReport,
    GeneticSearch,
    SearchSettings,
    StoppingPolicy,
    StopReason,
    run_search,
)


def _settings(**stopping):
    return SearchSettings(
        population_size=20,
        seed=11,
        max_workers=2,
        stopping=StoppingPolicy(**stopping),
        log_every=0,
    )


class TestStoppingPolicy:

    def test_defaults_are_unbounded(self):
        policy = StoppingPolicy()
        assert policy.target_fitness == 1
        assert policy.is_bounded is False

    def test_target_checked_first(self):
        policy = StoppingPolicy(max_generations=0, time_limit_seconds=0)
        assert policy.check(0, 0, 0.0) is StopReason.TARGET_REACHED

    def test_generation_cap(self):
        policy = StoppingPolicy(max_generations=5)
        assert policy.check(100, 4, 0.0) is None
        assert policy.check(100, 5, 0.0) is StopReason.GENERATION_CAP

    def test_time_cap(self):
        policy = StoppingPolicy(time_limit_seconds=2.0)
        assert policy.check(100, 1000, 1.9) is None
        assert policy.check(100, 1000, 2.0) is StopReason.TIME_CAP

    @pytest.mark.parametrize("kwargs", [
        {"target_fitness": 0},
        {"max_generations": -1},
        {"time_limit_seconds": -0.5},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            StoppingPolicy(**kwargs)


class TestGeneticSearch:

    def test_generation_cap_stops_search(self):
        result = GeneticSearch(_settings(max_generations=3)).run()
        assert result.stop_reason is StopReason.GENERATION_CAP
        assert result.converged is False
        assert result.generations == 3
        assert [r.generation for r in result.history] == [0, 1, 2, 3]

    def test_time_cap_stops_search(self):
        result = GeneticSearch(_settings(time_limit_seconds=0)).run()
        assert result.stop_reason is StopReason.TIME_CAP
        assert result.generations == 0

    def test_converges_when_seeded_with_optimal_roster(self, zero_penalty_rows):
        zero = Schedule.from_grid(zero_penalty_rows)
        result = GeneticSearch(_settings(), initial_population=[zero]).run()
        assert result.converged is True
        assert result.generations == 0
        assert result.best == zero
        assert result.best_fitness == 0

    def test_best_is_lowest_of_final_generation(self):
        result = GeneticSearch(_settings(max_generations=5)).run()
        assert result.best.fitness == result.history[-1].best_fitness

    def test_best_fitness_history_non_increasing(self):
        result = GeneticSearch(_settings(max_generations=15)).run()
        best = [r.best_fitness for r in result.history]
        assert all(b <= a for a, b in zip(best, best[1:]))

    def test_report_fields(self):
        result = GeneticSearch(_settings(max_generations=2)).run()
        for report in result.history:
            assert report.best_fitness <= report.mean_fitness <= report.worst_fitness
            assert report.elapsed_seconds >= 0

    def test_on_generation_callback(self):
        seen = []
        GeneticSearch(_settings(max_generations=4), on_generation=seen.append).run()
        assert len(seen) == 5
        assert all(isinstance(r, GenerationReport) for r in seen)

    def test_same_seed_same_result(self):
        a = run_search(_settings(max_generations=5))
        b = run_search(_settings(max_generations=5))
        assert a.best == b.best
        assert [r.best_fitness for r in a.history] == [r.best_fitness for r in b.history]

    def test_phase_timings_reported(self):
        result = GeneticSearch(_settings(max_generations=2)).run()
        assert result.phase_timings["breed"]["count"] == 2
        assert result.phase_timings["initialize"]["count"] == 1

    def test_phase_timings_reset_between_runs(self):
        search = GeneticSearch(_settings(max_generations=2))
        search.run()
        result = search.run()
        assert result.phase_timings["breed"]["count"] == 2
        assert result.phase_timings["initialize"]["count"] == 1

    def test_report_mean_matches_population(self):
        seen = []
        holiday = Schedule.from_grid(["HHHHHHH"] * 10)
        GeneticSearch(_settings(max_generations=0),
                      initial_population=[holiday] * 20,
                      on_generation=seen.append).run()
        assert seen[0].mean_fitness == 24600

    def test_search_improves_on_random_start(self):
        result = GeneticSearch(SearchSettings(
            population_size=60,
            seed=3,
            stopping=StoppingPolicy(max_generations=60),
            log_every=0,
        )).run()
        assert result.history[-1].best_fitness < result.history[0].best_fitness
