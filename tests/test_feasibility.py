"""Tests for feasibility.py - the CP-SAT zero-penalty check.

The witness roster is scored by the genetic algorithm's own fitness function,
so these tests also cross-check the hard-constraint model against it.
"""

from ortools.sat.python import cp_model

from duty_domain import Duty
from feasibility import FeasibilityReport, add_roster_constraints, check_feasibility, define_duty_vars
from fitness import fitness_breakdown


def test_zero_penalty_roster_exists():
    report = check_feasibility(timeout_seconds=20, seed=0)
    assert report.is_feasible is True
    assert report.status in {"OPTIMAL", "FEASIBLE"}
    assert report.witness is not None
    assert report.witness.fitness == 0
    assert fitness_breakdown(report.witness.grid).total == 0


def test_known_zero_roster_satisfies_model(zero_penalty_rows):
    """Fixing every cell to the hand-built roster keeps the model feasible."""
    model = cp_model.CpModel()
    x = define_duty_vars(model)
    add_roster_constraints(model, x)
    for n, row in enumerate(zero_penalty_rows):
        for d, code in enumerate(row):
            model.Add(x[n][d][Duty(code)] == 1)

    status = cp_model.CpSolver().Solve(model)
    assert status in (cp_model.OPTIMAL, cp_model.FEASIBLE)


def test_rule_violation_makes_model_infeasible(zero_penalty_rows):
    """Forcing a night followed by a morning cannot satisfy every rule."""
    model = cp_model.CpModel()
    x = define_duty_vars(model)
    add_roster_constraints(model, x)
    model.Add(x[5][0][Duty.NIGHT] == 1)
    model.Add(x[5][1][Duty.MORNING] == 1)

    status = cp_model.CpSolver().Solve(model)
    assert status == cp_model.INFEASIBLE


class TestFeasibilityReport:

    def test_str_feasible(self):
        report = FeasibilityReport(is_feasible=True, status="OPTIMAL", wall_time=0.5)
        assert "exists" in str(report)

    def test_str_infeasible(self):
        report = FeasibilityReport(is_feasible=False, status="INFEASIBLE", wall_time=0.1)
        assert "INFEASIBLE" in str(report)
        assert report.is_proven_infeasible is True

    def test_timeout_is_not_proof(self):
        report = FeasibilityReport(is_feasible=False, status="UNKNOWN", wall_time=10.0)
        assert report.is_proven_infeasible is False
