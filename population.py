"""Population container and the per-generation selection/breeding step.

Parallel phases write into pre-sized slot lists; every task owns exactly one
slot index, so no lock is needed. Each task also gets its own
`random.Random`, seeded by the coordinating thread before submission, which
keeps runs reproducible for a given seed whatever order the workers finish in.
"""

from __future__ import annotations

import random
from concurrent.futures import Executor, wait
from typing import Callable, Iterable, Iterator, Optional, Sequence

from constants import ELITE_PERCENT, PARENT_POOL_DIVISOR
from genetic_operators import mate, random_schedule
from logger import PerformanceTracker, get_logger
from schedule import Schedule

logger = get_logger('population')


def elite_count(size: int) -> int:
    """Number of best individuals carried over unchanged (10%, rounded down)."""
    return size * ELITE_PERCENT // 100


def parent_pool_size(size: int) -> int:
    """Parents are drawn uniformly from indices [0, parent_pool_size) of the sorted population."""
    return max(1, size // PARENT_POOL_DIVISOR)


class Population:
    """Ordered, fixed-size sequence of schedules."""

    def __init__(self, members: Iterable[Schedule]):
        self._members: tuple[Schedule, ...] = tuple(members)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Schedule]:
        return iter(self._members)

    def __getitem__(self, index: int) -> Schedule:
        return self._members[index]

    @property
    def size(self) -> int:
        return len(self._members)

    @property
    def members(self) -> tuple[Schedule, ...]:
        return self._members

    @property
    def best(self) -> Schedule:
        return min(self._members, key=lambda s: s.fitness)

    def fitness_values(self) -> list[int]:
        return [s.fitness for s in self._members]

    def mean_fitness(self) -> float:
        return sum(self.fitness_values()) / len(self._members)

    def sorted(self) -> "Population":
        """Return a copy ordered by ascending fitness (stable)."""
        return Population(sorted(self._members, key=lambda s: s.fitness))

    def elite(self, count: int) -> list[Schedule]:
        """The `count` lowest-fitness members."""
        return list(self.sorted().members[:count])


class PopulationManager:
    """Builds generation 0 and every following generation.

    Args:
        size: Fixed population size
        rng: Coordinator's generator; only used to seed per-task generators
        executor: Worker pool for the parallel phases. None runs tasks inline.
        tracker: Optional PerformanceTracker collecting phase timings
    """

    def __init__(
        self,
        size: int,
        rng: random.Random,
        executor: Optional[Executor] = None,
        tracker: Optional[PerformanceTracker] = None,
    ):
        if size < 2:
            raise ValueError(f"Population size must be at least 2, got {size}")
        self.size = size
        self._rng = rng
        self._executor = executor
        self._tracker = tracker or PerformanceTracker()

    # =========================================================================
    # Parallel phase helper
    # =========================================================================

    def _task_rngs(self, count: int) -> list[random.Random]:
        return [random.Random(self._rng.getrandbits(64)) for _ in range(count)]

    def _fill_slots(
        self,
        slots: list,
        start: int,
        build: Callable[[random.Random], Schedule],
    ) -> None:
        """Fill slots[start:] by calling `build` once per slot.

        Returns only after every task has finished; a failing task re-raises here.
        """
        indices = range(start, len(slots))
        task_rngs = self._task_rngs(len(indices))

        def task(index: int, task_rng: random.Random) -> None:
            slots[index] = build(task_rng)

        if self._executor is None:
            for index, task_rng in zip(indices, task_rngs):
                task(index, task_rng)
            return

        futures = [
            self._executor.submit(task, index, task_rng)
            for index, task_rng in zip(indices, task_rngs)
        ]
        wait(futures)
        for future in futures:
            future.result()

    # =========================================================================
    # Generation steps
    # =========================================================================

    def initialize(self, seed_members: Sequence[Schedule] = ()) -> Population:
        """Build generation 0: `seed_members` first, then random schedules up to `size`."""
        if len(seed_members) > self.size:
            raise ValueError(
                f"{len(seed_members)} seed schedules exceed population size {self.size}"
            )
        slots: list[Optional[Schedule]] = [None] * self.size
        slots[:len(seed_members)] = list(seed_members)

        with self._tracker.track("initialize"):
            self._fill_slots(slots, len(seed_members), random_schedule)

        population = Population(slots)
        logger.debug(f"Initial population of {population.size}, best fitness {population.best.fitness}")
        return population

    def next_generation(self, population: Population) -> Population:
        """Select, breed and replace.

        The population is sorted, the elite prefix is copied verbatim, and the
        remaining slots are filled by mating two parents picked from the better
        half. Returns the new population, which has the same size.
        """
        if population.size != self.size:
            raise ValueError(f"Expected population of {self.size}, got {population.size}")

        with self._tracker.track("select"):
            ranked = population.sorted().members
            n_elite = elite_count(self.size)
            slots: list[Optional[Schedule]] = [None] * self.size
            slots[:n_elite] = population.elite(n_elite)

        pool = parent_pool_size(self.size)

        def breed(task_rng: random.Random) -> Schedule:
            parent1 = ranked[task_rng.randrange(pool)]
            parent2 = ranked[task_rng.randrange(pool)]
            return mate(parent1, parent2, task_rng)

        with self._tracker.track("breed"):
            self._fill_slots(slots, n_elite, breed)

        with self._tracker.track("replace"):
            next_population = Population(slots)
        return next_population
