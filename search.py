"""Generation loop for the roster genetic algorithm.

The loop sorts the current population, checks the stopping policy, and
otherwise asks the PopulationManager for the next generation. Only this
coordinating thread reads the best fitness and decides to stop.

With no generation or time cap the loop runs until a roster scores below the
target fitness, which may never happen. Use `feasibility.check_feasibility`
or a cap when that matters.
"""

from __future__ import annotations

import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

from constants import LOG_EVERY_GENERATIONS, POPULATION_SIZE, TARGET_FITNESS
from logger import PerformanceTracker, get_logger
from population import Population, PopulationManager
from schedule import Schedule

logger = get_logger('search')


class StopReason(str, Enum):
    TARGET_REACHED = "target_reached"
    GENERATION_CAP = "generation_cap"
    TIME_CAP = "time_cap"


@dataclass
class StoppingPolicy:
    """When the search ends.

    The search stops as soon as the best fitness is below `target_fitness`,
    or when an optional cap is hit. Caps of None mean unbounded.
    """
    target_fitness: int = TARGET_FITNESS
    max_generations: Optional[int] = None
    time_limit_seconds: Optional[float] = None

    def __post_init__(self):
        # Fitness is never negative, so a target below 1 could never be reached
        if self.target_fitness < 1:
            raise ValueError(f"target_fitness must be >= 1, got {self.target_fitness}")
        if self.max_generations is not None and self.max_generations < 0:
            raise ValueError(f"max_generations must be >= 0, got {self.max_generations}")
        if self.time_limit_seconds is not None and self.time_limit_seconds < 0:
            raise ValueError(f"time_limit_seconds must be >= 0, got {self.time_limit_seconds}")

    @property
    def is_bounded(self) -> bool:
        return self.max_generations is not None or self.time_limit_seconds is not None

    def check(self, best_fitness: int, generation: int, elapsed: float) -> Optional[StopReason]:
        """Return why the search should stop now, or None to keep going."""
        if best_fitness < self.target_fitness:
            return StopReason.TARGET_REACHED
        if self.max_generations is not None and generation >= self.max_generations:
            return StopReason.GENERATION_CAP
        if self.time_limit_seconds is not None and elapsed >= self.time_limit_seconds:
            return StopReason.TIME_CAP
        return None


@dataclass(frozen=True)
class GenerationReport:
    """Progress snapshot taken after each generation is sorted."""
    generation: int
    best_fitness: int
    mean_fitness: float
    worst_fitness: int
    elapsed_seconds: float


@dataclass
class SearchSettings:
    population_size: int = POPULATION_SIZE
    seed: Optional[int] = None
    max_workers: Optional[int] = None
    stopping: StoppingPolicy = field(default_factory=StoppingPolicy)
    log_every: int = LOG_EVERY_GENERATIONS


@dataclass
class SearchResult:
    best: Schedule
    generations: int
    stop_reason: StopReason
    elapsed_seconds: float
    history: list[GenerationReport] = field(default_factory=list)
    phase_timings: dict = field(default_factory=dict)

    @property
    def converged(self) -> bool:
        return self.stop_reason is StopReason.TARGET_REACHED

    @property
    def best_fitness(self) -> int:
        return self.best.fitness


class GeneticSearch:
    """Runs the genetic algorithm to a stopping condition.

    Args:
        settings: Population size, seed, worker threads, stopping policy
        on_generation: Optional callback receiving a GenerationReport per generation
        initial_population: Optional schedules placed in generation 0, padded
            with random schedules up to the population size
    """

    def __init__(
        self,
        settings: Optional[SearchSettings] = None,
        on_generation: Optional[Callable[[GenerationReport], None]] = None,
        initial_population: Sequence[Schedule] = (),
    ):
        self.settings = settings or SearchSettings()
        self._on_generation = on_generation
        self._initial = list(initial_population)
        # Phase timings of the most recent run()
        self.tracker: Optional[PerformanceTracker] = None

    def _report(self, population: Population, generation: int, elapsed: float) -> GenerationReport:
        report = GenerationReport(
            generation=generation,
            best_fitness=population[0].fitness,
            mean_fitness=population.mean_fitness(),
            worst_fitness=population[-1].fitness,
            elapsed_seconds=elapsed,
        )
        if self.settings.log_every and generation % self.settings.log_every == 0:
            logger.info(f"Generation {generation}: best fitness {report.best_fitness}, "
                        f"mean {report.mean_fitness:.1f}")
        else:
            logger.debug(f"Generation {generation}: best fitness {report.best_fitness}")
        if self._on_generation is not None:
            self._on_generation(report)
        return report

    def run(self) -> SearchResult:
        """Search until the stopping policy fires and return the best schedule."""
        settings = self.settings
        policy = settings.stopping
        if not policy.is_bounded:
            logger.warning("No generation or time cap set; search runs until the target fitness is reached")

        # One coordinator generator per run; it only hands out seeds to worker tasks
        rng = random.Random(settings.seed)
        self.tracker = PerformanceTracker()
        history: list[GenerationReport] = []
        start = time.perf_counter()

        logger.info(f"Starting search: population {settings.population_size}, seed {settings.seed}")
        with ThreadPoolExecutor(max_workers=settings.max_workers,
                                thread_name_prefix="rota-worker") as executor:
            manager = PopulationManager(settings.population_size, rng, executor, self.tracker)
            population = manager.initialize(self._initial)
            generation = 0

            while True:
                population = population.sorted()
                elapsed = time.perf_counter() - start
                history.append(self._report(population, generation, elapsed))

                reason = policy.check(population[0].fitness, generation, elapsed)
                if reason is not None:
                    break

                population = manager.next_generation(population)
                generation += 1

        best = population[0]
        elapsed = time.perf_counter() - start
        if reason is StopReason.TARGET_REACHED:
            logger.info(f"Converged after {generation} generations in {elapsed:.2f}s, fitness {best.fitness}")
        else:
            logger.warning(f"Stopped ({reason.value}) after {generation} generations in {elapsed:.2f}s; "
                           f"best fitness {best.fitness} did not reach {policy.target_fitness}")

        return SearchResult(
            best=best,
            generations=generation,
            stop_reason=reason,
            elapsed_seconds=elapsed,
            history=history,
            phase_timings=self.tracker.report(),
        )


def run_search(settings: Optional[SearchSettings] = None, **kwargs) -> SearchResult:
    """Convenience wrapper around GeneticSearch(settings, ...).run()."""
    return GeneticSearch(settings, **kwargs).run()
