"""Optimizer Service - configuration and run orchestration for the roster search.

This module is the entry point for callers (the CLI or any other front end).
It owns the run settings loaded from config.yaml, validates them, optionally
proves a zero-penalty roster exists before an uncapped search, and returns a
single OptimizationResult.

The rule set, penalty weights and roster shape are fixed in constants.py and
are not part of the configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Optional

import yaml

from constants import LOG_EVERY_GENERATIONS, POPULATION_SIZE, TARGET_FITNESS
from feasibility import FeasibilityReport, check_feasibility
from fitness import FitnessBreakdown
from logger import get_logger, log_timing, timed
from schedule import Schedule
from search import GenerationReport, GeneticSearch, SearchSettings, StoppingPolicy, StopReason

logger = get_logger('optimizer_service')


def _is_int(value) -> bool:
    # bool is an int subclass; YAML `true` must not pass as a count
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return _is_int(value) or isinstance(value, float)


@dataclass
class OptimizationResult:
    """Result of an optimizer run."""
    schedule: Schedule
    generations: int
    stop_reason: StopReason
    elapsed_seconds: float
    breakdown: FitnessBreakdown
    history: list[GenerationReport] = field(default_factory=list)
    feasibility: Optional[FeasibilityReport] = None

    @property
    def fitness(self) -> int:
        return self.schedule.fitness

    @property
    def converged(self) -> bool:
        return self.stop_reason is StopReason.TARGET_REACHED

    def to_dict(self) -> dict:
        return {
            "rows": self.schedule.rows(),
            "fitness": self.fitness,
            "generations": self.generations,
            "stop_reason": self.stop_reason.value,
            "converged": self.converged,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "breakdown": self.breakdown.to_dict(),
        }


class OptimizerService:
    """
    Service layer for roster optimization.

    This class provides:
    - Run settings (seed, population size, worker threads)
    - Stopping policy (target fitness, generation cap, time cap)
    - Configuration persistence
    - Optimization runs
    """

    DEFAULT_CONFIG_FILE = "config.yaml"
    DEFAULT_SETTINGS = {
        'seed': None,
        'population_size': POPULATION_SIZE,
        'max_workers': None,
        'log_every': LOG_EVERY_GENERATIONS,
    }
    DEFAULT_STOPPING = {
        'target_fitness': TARGET_FITNESS,
        'max_generations': None,
        'time_limit_seconds': None,
        'check_feasibility': True,
    }

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the optimizer service.

        Args:
            config_path: Path to configuration file. If None, uses default.
        """
        self._config_path = config_path or self._get_default_config_path()
        self._settings: dict = self.DEFAULT_SETTINGS.copy()
        self._stopping: dict = self.DEFAULT_STOPPING.copy()
        self._feasibility: Optional[FeasibilityReport] = None
        self._load_config()

    @staticmethod
    def _get_default_config_path() -> str:
        return os.path.join(os.path.dirname(os.path.abspath(__file__)), OptimizerService.DEFAULT_CONFIG_FILE)

    # =========================================================================
    # Configuration Management
    # =========================================================================

    def _load_config(self) -> None:
        """Load configuration from file, keeping defaults for anything missing."""
        if not os.path.exists(self._config_path):
            logger.info(f"Config file not found at {self._config_path}, using defaults")
            return

        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file: {e}")
            return

        for key, value in (config.get('settings') or {}).items():
            self.set_setting(key, value)
        for key, value in (config.get('stopping') or {}).items():
            self.set_stopping(key, value)
        logger.info(f"Configuration loaded from {self._config_path}")

    def save_config(self) -> bool:
        """Save current configuration to file.

        Returns:
            True if save was successful, False otherwise.
        """
        config = {
            'settings': dict(self._settings),
            'stopping': dict(self._stopping),
        }
        try:
            with open(self._config_path, 'w', encoding='utf-8') as f:
                yaml.dump(config, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Could not save config file: {e}")
            return False
        logger.info(f"Configuration saved to {self._config_path}")
        return True

    @property
    def config_path(self) -> str:
        return self._config_path

    # =========================================================================
    # Settings Management
    # =========================================================================

    @property
    def settings(self) -> dict:
        return self._settings.copy()

    @property
    def stopping(self) -> dict:
        return self._stopping.copy()

    def set_setting(self, key: str, value) -> None:
        """Set a run setting.

        Raises:
            ValueError: If the key is unknown or the value is out of range
        """
        if key not in self.DEFAULT_SETTINGS:
            raise ValueError(f"Unknown setting '{key}'")
        if key == 'population_size' and (not _is_int(value) or value < 2):
            raise ValueError(f"population_size must be an integer >= 2, got {value!r}")
        if key == 'max_workers' and value is not None and (not _is_int(value) or value < 1):
            raise ValueError(f"max_workers must be a positive integer or null, got {value!r}")
        if key == 'log_every' and (not _is_int(value) or value < 0):
            raise ValueError(f"log_every must be a non-negative integer, got {value!r}")
        if key == 'seed' and value is not None and not _is_int(value):
            raise ValueError(f"seed must be an integer or null, got {value!r}")
        self._settings[key] = value

    def set_stopping(self, key: str, value) -> None:
        """Set a stopping-policy value.

        Raises:
            ValueError: If the key is unknown or the value is out of range
        """
        if key not in self.DEFAULT_STOPPING:
            raise ValueError(f"Unknown stopping option '{key}'")
        if key == 'check_feasibility':
            value = bool(value)
        elif key == 'target_fitness':
            if not _is_int(value) or value < 1:
                raise ValueError(f"target_fitness must be a positive integer, got {value!r}")
        elif value is not None:
            if not _is_number(value) or value < 0:
                raise ValueError(f"{key} must be a non-negative number or null, got {value!r}")
        self._stopping[key] = value

    def build_search_settings(self) -> SearchSettings:
        policy = StoppingPolicy(
            target_fitness=self._stopping['target_fitness'],
            max_generations=self._stopping['max_generations'],
            time_limit_seconds=self._stopping['time_limit_seconds'],
        )
        return SearchSettings(
            population_size=self._settings['population_size'],
            seed=self._settings['seed'],
            max_workers=self._settings['max_workers'],
            stopping=policy,
            log_every=self._settings['log_every'],
        )

    # =========================================================================
    # Optimization
    # =========================================================================

    def check_feasibility(self) -> FeasibilityReport:
        """Run (once) and cache the exact zero-penalty feasibility check."""
        if self._feasibility is None:
            with log_timing("feasibility check", logger):
                self._feasibility = check_feasibility(seed=self._settings['seed'])
        return self._feasibility

    @timed(name="optimizer run")
    def optimize(
        self,
        on_generation: Optional[Callable[[GenerationReport], None]] = None,
        initial_population: tuple[Schedule, ...] = (),
    ) -> OptimizationResult:
        """Run the genetic search with the current configuration.

        Raises:
            ValueError: If the search is uncapped and no zero-penalty roster exists
        """
        settings = self.build_search_settings()

        feasibility = None
        if self._stopping['check_feasibility'] and not settings.stopping.is_bounded:
            feasibility = self.check_feasibility()
            if feasibility.is_proven_infeasible and settings.stopping.target_fitness <= 1:
                raise ValueError(
                    "No roster satisfies every rule; set max_generations or "
                    "time_limit_seconds so the search can stop"
                )

        result = GeneticSearch(settings, on_generation, initial_population).run()
        return OptimizationResult(
            schedule=result.best,
            generations=result.generations,
            stop_reason=result.stop_reason,
            elapsed_seconds=result.elapsed_seconds,
            breakdown=result.best.breakdown(),
            history=result.history,
            feasibility=feasibility,
        )
