"""Exact feasibility check for a zero-penalty roster.

The genetic search has no guaranteed end: it stops only when a roster scores
below the target fitness. This module states the six rules as hard CP-SAT
constraints so callers can learn up front whether a fitness-0 roster exists,
and obtain one as a witness.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ortools.sat.python import cp_model

from constants import (
    FEASIBILITY_TIMEOUT_SECONDS,
    MAX_NIGHTS_PER_WEEK,
    MIN_NIGHTS_PER_WEEK,
    NUM_DAYS,
    NUM_NURSES,
)
from duty_domain import ALL_DUTIES, CLASS_A_NURSES, FORBIDDEN_AFTER_NIGHT, WORKING_DUTIES, Duty
from logger import get_logger
from schedule import Schedule

logger = get_logger('feasibility')


@dataclass
class FeasibilityReport:
    is_feasible: bool
    status: str
    wall_time: float
    witness: Optional[Schedule] = None

    @property
    def is_proven_infeasible(self) -> bool:
        return self.status == "INFEASIBLE"

    def __str__(self) -> str:
        if self.is_feasible:
            return f"Zero-penalty roster exists (found in {self.wall_time:.2f}s)"
        return f"No zero-penalty roster found: {self.status} after {self.wall_time:.2f}s"


def define_duty_vars(model):
    """x[n][d][duty] is true when nurse n works `duty` on day d."""
    return [
        [{duty: model.NewBoolVar(f"x_n{n}_d{d}_{duty.value}") for duty in ALL_DUTIES}
         for d in range(NUM_DAYS)]
        for n in range(NUM_NURSES)
    ]


def add_roster_constraints(model, x) -> None:
    # One duty per nurse per day
    for n in range(NUM_NURSES):
        for d in range(NUM_DAYS):
            model.AddExactlyOne(list(x[n][d].values()))

    for n in range(NUM_NURSES):
        # Rule 1: exactly one holiday
        model.Add(sum(x[n][d][Duty.HOLIDAY] for d in range(NUM_DAYS)) == 1)

        # Rule 2: no morning/evening right after a night, wrapping around the week
        for d in range(NUM_DAYS):
            nxt = (d + 1) % NUM_DAYS
            for duty in FORBIDDEN_AFTER_NIGHT:
                model.AddBoolOr([x[n][d][Duty.NIGHT].Not(), x[n][nxt][duty].Not()])

        # Rule 3: one or two nights
        nights = sum(x[n][d][Duty.NIGHT] for d in range(NUM_DAYS))
        model.Add(nights >= MIN_NIGHTS_PER_WEEK)
        model.Add(nights <= MAX_NIGHTS_PER_WEEK)

    for d in range(NUM_DAYS):
        # Rule 4: class A cover on morning and evening
        for duty in (Duty.MORNING, Duty.EVENING):
            model.AddBoolOr([x[n][d][duty] for n in CLASS_A_NURSES])

        # Rule 5: exactly one class A nurse on nights
        model.AddExactlyOne([x[n][d][Duty.NIGHT] for n in CLASS_A_NURSES])

        # Rule 6: every working shift staffed
        for duty in WORKING_DUTIES:
            model.AddBoolOr([x[n][d][duty] for n in range(NUM_NURSES)])


def _extract_schedule(solver, x) -> Schedule:
    grid = []
    for n in range(NUM_NURSES):
        row = []
        for d in range(NUM_DAYS):
            row.append(next(duty for duty, var in x[n][d].items() if solver.Value(var)))
        grid.append(row)
    return Schedule.from_grid(grid)


def check_feasibility(timeout_seconds: float = FEASIBILITY_TIMEOUT_SECONDS,
                      seed: Optional[int] = None) -> FeasibilityReport:
    """Decide whether some roster satisfies all six rules.

    Args:
        timeout_seconds: CP-SAT time budget
        seed: Optional CP-SAT random seed

    Returns:
        FeasibilityReport; `witness` holds a fitness-0 schedule when feasible.
    """
    model = cp_model.CpModel()
    x = define_duty_vars(model)
    add_roster_constraints(model, x)

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout_seconds
    solver.parameters.log_search_progress = False
    if seed is not None:
        solver.parameters.random_seed = seed % (2 ** 31)

    status = solver.Solve(model)
    status_name = solver.StatusName(status)

    if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        witness = _extract_schedule(solver, x)
        report = FeasibilityReport(True, status_name, solver.WallTime(), witness)
        logger.info(str(report))
        return report

    report = FeasibilityReport(False, status_name, solver.WallTime())
    logger.warning(str(report))
    return report
