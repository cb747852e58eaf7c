"""
Tests for schedule.py - the candidate roster value type
"""

import dataclasses

import pytest

from duty_domain import Duty
from fitness import calculate_fitness
from schedule import Schedule


class TestScheduleConstruction:

    def test_from_grid_computes_fitness(self, zero_penalty_rows, all_holiday_rows):
        assert Schedule.from_grid(zero_penalty_rows).fitness == 0
        assert Schedule.from_grid(all_holiday_rows).fitness == 24600

    def test_from_grid_accepts_duty_rows(self, zero_penalty_rows):
        rows = [[Duty(c) for c in row] for row in zero_penalty_rows]
        assert Schedule.from_grid(rows) == Schedule.from_grid(zero_penalty_rows)

    def test_invalid_grid_rejected(self):
        with pytest.raises(ValueError):
            Schedule.from_grid(["MENH"] * 10)

    def test_is_immutable(self, zero_penalty_rows):
        s = Schedule.from_grid(zero_penalty_rows)
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.fitness = 5
        with pytest.raises(TypeError):
            s.grid[0][0] = Duty.HOLIDAY

    def test_fitness_matches_grid(self, all_holiday_rows):
        s = Schedule.from_grid(all_holiday_rows)
        assert s.fitness == calculate_fitness(s.grid)

    def test_constructor_computes_fitness(self, all_holiday_rows):
        grid = Schedule.from_grid(all_holiday_rows).grid
        assert Schedule(grid=grid).fitness == 24600

    def test_constructor_rejects_supplied_fitness(self, all_holiday_rows):
        grid = Schedule.from_grid(all_holiday_rows).grid
        with pytest.raises(TypeError):
            Schedule(grid=grid, fitness=0)


class TestScheduleBehaviour:

    def test_ordering_by_fitness(self, zero_penalty_rows, all_holiday_rows):
        good = Schedule.from_grid(zero_penalty_rows)
        bad = Schedule.from_grid(all_holiday_rows)
        assert good < bad
        assert sorted([bad, good]) == [good, bad]

    def test_equality_by_grid(self, zero_penalty_rows):
        assert Schedule.from_grid(zero_penalty_rows) == Schedule.from_grid(zero_penalty_rows)
        assert hash(Schedule.from_grid(zero_penalty_rows)) == hash(Schedule.from_grid(zero_penalty_rows))

    def test_is_optimal(self, zero_penalty_rows, all_holiday_rows):
        assert Schedule.from_grid(zero_penalty_rows).is_optimal is True
        assert Schedule.from_grid(all_holiday_rows).is_optimal is False

    def test_rows_round_trip(self, zero_penalty_rows):
        assert Schedule.from_grid(zero_penalty_rows).rows() == zero_penalty_rows

    def test_duty_lookup(self, zero_penalty_rows):
        s = Schedule.from_grid(zero_penalty_rows)
        assert s.duty(0, 0) is Duty.NIGHT
        assert s.duty(4, 0) is Duty.HOLIDAY

    def test_breakdown_total(self, all_holiday_rows):
        s = Schedule.from_grid(all_holiday_rows)
        assert s.breakdown().total == s.fitness

    def test_to_dict(self, zero_penalty_rows):
        d = Schedule.from_grid(zero_penalty_rows).to_dict()
        assert d == {"rows": zero_penalty_rows, "fitness": 0}

    def test_format_roster(self, zero_penalty_rows):
        text = Schedule.from_grid(zero_penalty_rows).format_roster()
        lines = text.splitlines()
        assert "Mon" in lines[0] and "Sun" in lines[0]
        assert "(A)" in text and "(B)" in text and "(C)" in text
        assert lines[-1] == "Fitness: 0"

    def test_format_roster_legend(self, zero_penalty_rows):
        text = Schedule.from_grid(zero_penalty_rows).format_roster()
        assert "M = Morning" in text
        assert "N = Night" in text
        assert "H = Holiday" in text
