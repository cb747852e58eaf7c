"""Penalty (fitness) evaluation for a weekly roster.

A roster grid is indexed grid[nurse][day]. The score is a weighted sum of six
rule categories; lower is better and 0 means every rule is satisfied.

Rules 1-3 only look at one nurse's row and rules 4-6 only look at one day's
column, so the score is split into `nurse_penalty` and `day_penalty`. Changing
a single cell can therefore only move the score of its own row and column.

All functions here are pure and safe to call concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from constants import (
    MAX_NIGHTS_PER_WEEK,
    MIN_NIGHTS_PER_WEEK,
    NUM_DAYS,
    NUM_NURSES,
    PENALTY_CLASS_A_DAY_COVER,
    PENALTY_CLASS_A_NIGHT,
    PENALTY_FORBIDDEN_PATTERN,
    PENALTY_HOLIDAY,
    PENALTY_NIGHT_COUNT,
    PENALTY_STAFFING,
)
from duty_domain import FORBIDDEN_AFTER_NIGHT, WORKING_DUTIES, Duty, is_class_a, parse_duty

Grid = Sequence[Sequence[Duty]]


# =============================================================================
# Per-nurse rules (1-3)
# =============================================================================

def holiday_cost(row: Sequence[Duty]) -> int:
    """Rule 1: exactly one holiday per week."""
    holidays = sum(1 for duty in row if duty == Duty.HOLIDAY)
    return abs(holidays - 1) * PENALTY_HOLIDAY


def forbidden_pattern_cost(row: Sequence[Duty]) -> int:
    """Rule 2: no morning or evening shift right after a night (wraps Sunday -> Monday)."""
    days = len(row)
    violations = 0
    for j, duty in enumerate(row):
        if duty == Duty.NIGHT and row[(j + 1) % days] in FORBIDDEN_AFTER_NIGHT:
            violations += 1
    return violations * PENALTY_FORBIDDEN_PATTERN


def night_count_cost(row: Sequence[Duty]) -> int:
    """Rule 3: one or two night shifts per week.

    No nights costs one unit; each night beyond the second costs one unit.
    """
    nights = sum(1 for duty in row if duty == Duty.NIGHT)
    if MIN_NIGHTS_PER_WEEK <= nights <= MAX_NIGHTS_PER_WEEK:
        return 0
    if nights:
        return (nights - MAX_NIGHTS_PER_WEEK) * PENALTY_NIGHT_COUNT
    return PENALTY_NIGHT_COUNT


def nurse_penalty(row: Sequence[Duty]) -> int:
    """Total of the per-nurse rules for one row of the grid."""
    return holiday_cost(row) + forbidden_pattern_cost(row) + night_count_cost(row)


# =============================================================================
# Per-day rules (4-6)
# =============================================================================

def _column(grid: Grid, day: int) -> list[Duty]:
    return [row[day] for row in grid]


def class_a_day_cover_cost(column: Sequence[Duty]) -> int:
    """Rule 4: at least one class A nurse on the morning and on the evening shift."""
    cost = 0
    for duty in (Duty.MORNING, Duty.EVENING):
        if not any(d == duty and is_class_a(i) for i, d in enumerate(column)):
            cost += PENALTY_CLASS_A_DAY_COVER
    return cost


def class_a_night_cost(column: Sequence[Duty]) -> int:
    """Rule 5: exactly one class A nurse on the night shift."""
    class_a_nights = sum(1 for i, d in enumerate(column) if d == Duty.NIGHT and is_class_a(i))
    return abs(class_a_nights - 1) * PENALTY_CLASS_A_NIGHT


def staffing_cost(column: Sequence[Duty]) -> int:
    """Rule 6: at least one nurse on every working shift."""
    return sum(PENALTY_STAFFING for duty in WORKING_DUTIES if duty not in column)


def day_penalty(grid: Grid, day: int) -> int:
    """Total of the per-day rules for one column of the grid."""
    column = _column(grid, day)
    return class_a_day_cover_cost(column) + class_a_night_cost(column) + staffing_cost(column)


# =============================================================================
# Whole-grid scoring
# =============================================================================

def calculate_fitness(grid: Grid) -> int:
    """Penalty score of a roster grid."""
    days = len(grid[0]) if grid else 0
    return (
        sum(nurse_penalty(row) for row in grid)
        + sum(day_penalty(grid, day) for day in range(days))
    )


@dataclass(frozen=True)
class FitnessBreakdown:
    """Penalty contribution of each rule category."""
    holidays: int = 0
    night_followed_by_day: int = 0
    night_count: int = 0
    class_a_day_cover: int = 0
    class_a_night: int = 0
    staffing: int = 0

    @property
    def total(self) -> int:
        return (
            self.holidays + self.night_followed_by_day + self.night_count
            + self.class_a_day_cover + self.class_a_night + self.staffing
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "holidays": self.holidays,
            "night_followed_by_day": self.night_followed_by_day,
            "night_count": self.night_count,
            "class_a_day_cover": self.class_a_day_cover,
            "class_a_night": self.class_a_night,
            "staffing": self.staffing,
            "total": self.total,
        }

    def format_report(self) -> str:
        """Format the breakdown as a human-readable string."""
        lines = ["=" * 40, "FITNESS BREAKDOWN", "=" * 40]
        for name, value in self.to_dict().items():
            if name == "total":
                lines.append("-" * 40)
            lines.append(f"  {name:24s} {value:8d}")
        lines.append("=" * 40)
        return "\n".join(lines)


def fitness_breakdown(grid: Grid) -> FitnessBreakdown:
    """Score a grid rule by rule. `.total` equals calculate_fitness(grid)."""
    days = len(grid[0]) if grid else 0
    columns = [_column(grid, day) for day in range(days)]
    return FitnessBreakdown(
        holidays=sum(holiday_cost(row) for row in grid),
        night_followed_by_day=sum(forbidden_pattern_cost(row) for row in grid),
        night_count=sum(night_count_cost(row) for row in grid),
        class_a_day_cover=sum(class_a_day_cover_cost(col) for col in columns),
        class_a_night=sum(class_a_night_cost(col) for col in columns),
        staffing=sum(staffing_cost(col) for col in columns),
    )


def validate_grid(grid) -> tuple[tuple[Duty, ...], ...]:
    """Check shape and duty codes, returning the grid as nested tuples of Duty.

    Rows may be strings of duty letters ("MENHMEN") or sequences of Duty.

    Raises:
        ValueError: If the grid is not NUM_NURSES x NUM_DAYS or holds an unknown code
    """
    if len(grid) != NUM_NURSES:
        raise ValueError(f"Roster must have {NUM_NURSES} nurses, got {len(grid)}")
    rows = []
    for i, row in enumerate(grid):
        if len(row) != NUM_DAYS:
            raise ValueError(f"Nurse {i} must have {NUM_DAYS} days, got {len(row)}")
        rows.append(tuple(parse_duty(cell) for cell in row))
    return tuple(rows)
