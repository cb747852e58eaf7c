"""Random roster generation and crossover ("mating").

Every operator takes an explicit `random.Random`. Callers running operators
on several threads give each task its own generator.
"""

from __future__ import annotations

import random

from constants import (
    CROSSOVER_ROLL,
    NUM_DAYS,
    NUM_NURSES,
    PARENT1_THRESHOLD,
    PARENT2_THRESHOLD,
)
from duty_domain import Duty, random_duty
from schedule import Schedule

# Origin tags reported by crossover_origins
ORIGIN_PARENT1 = "p1"
ORIGIN_PARENT2 = "p2"
ORIGIN_FRESH = "fresh"


def random_grid(rng: random.Random) -> tuple[tuple[Duty, ...], ...]:
    return tuple(
        tuple(random_duty(rng) for _ in range(NUM_DAYS))
        for _ in range(NUM_NURSES)
    )


def random_schedule(rng: random.Random) -> Schedule:
    """Build a scored schedule with every cell drawn uniformly at random."""
    return Schedule.from_rows(random_grid(rng))


def _cross_cell(a: Duty, b: Duty, rng: random.Random) -> tuple[Duty, str]:
    r = rng.randrange(CROSSOVER_ROLL)
    if r < PARENT1_THRESHOLD:
        return a, ORIGIN_PARENT1
    if r < PARENT2_THRESHOLD:
        return b, ORIGIN_PARENT2
    return random_duty(rng), ORIGIN_FRESH


def crossover_origins(parent1: Schedule, parent2: Schedule, rng: random.Random):
    """Cross two parents and also report where each child cell came from.

    Returns:
        (child_grid, origins) where origins[n][d] is one of ORIGIN_PARENT1,
        ORIGIN_PARENT2 or ORIGIN_FRESH.
    """
    child_rows = []
    origin_rows = []
    for row1, row2 in zip(parent1.grid, parent2.grid):
        cells = [_cross_cell(a, b, rng) for a, b in zip(row1, row2)]
        child_rows.append(tuple(duty for duty, _ in cells))
        origin_rows.append(tuple(origin for _, origin in cells))
    return tuple(child_rows), tuple(origin_rows)


def mate(parent1: Schedule, parent2: Schedule, rng: random.Random) -> Schedule:
    """Produce one child schedule from two parents.

    Each cell copies parent 1 (45%), parent 2 (45%) or is redrawn at random
    (10%). The redraw is the only mutation the search applies.
    """
    child_grid, _ = crossover_origins(parent1, parent2, rng)
    return Schedule.from_rows(child_grid)
