"""Candidate roster value type."""

from __future__ import annotations

from dataclasses import dataclass, field

from constants import NUM_DAYS
from duty_domain import ALL_DUTIES, Duty, nurse_class
from fitness import FitnessBreakdown, calculate_fitness, fitness_breakdown, validate_grid

DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"][:NUM_DAYS]


@dataclass(frozen=True)
class Schedule:
    """A nurse x day grid of duties and its penalty score.

    `fitness` is not a constructor argument: it is computed from `grid` once,
    when the instance is built. Instances are immutable, so `fitness` always
    matches `grid`.
    """
    grid: tuple[tuple[Duty, ...], ...]
    fitness: int = field(init=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "fitness", calculate_fitness(self.grid))

    @classmethod
    def from_grid(cls, grid) -> "Schedule":
        """Validate a grid (rows of Duty or duty-letter strings) and score it."""
        return cls(grid=validate_grid(grid))

    @classmethod
    def from_rows(cls, rows: tuple[tuple[Duty, ...], ...]) -> "Schedule":
        """Score rows that are already NUM_NURSES x NUM_DAYS tuples of Duty."""
        return cls(grid=rows)

    def __lt__(self, other: "Schedule") -> bool:
        return self.fitness < other.fitness

    @property
    def is_optimal(self) -> bool:
        return self.fitness == 0

    def duty(self, nurse: int, day: int) -> Duty:
        return self.grid[nurse][day]

    def rows(self) -> list[str]:
        """Each nurse's week as a string of duty letters."""
        return ["".join(d.value for d in row) for row in self.grid]

    def breakdown(self) -> FitnessBreakdown:
        return fitness_breakdown(self.grid)

    def to_dict(self) -> dict:
        return {"rows": self.rows(), "fitness": self.fitness}

    def format_roster(self) -> str:
        """Render the roster as a nurse x day table."""
        header = "Nurse      " + "".join(f"{d:>5s}" for d in DAY_LABELS)
        lines = [header, "-" * len(header)]
        for i, row in enumerate(self.grid):
            label = f"#{i:<2d} ({nurse_class(i)})"
            lines.append(f"{label:11s}" + "".join(f"{d.value:>5s}" for d in row))
        lines.append("-" * len(header))
        lines.append(", ".join(f"{d.value} = {d.display_name}" for d in ALL_DUTIES))
        lines.append(f"Fitness: {self.fitness}")
        return "\n".join(lines)
