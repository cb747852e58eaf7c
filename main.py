#!/usr/bin/env python3
"""
Main entry point for the nurse roster optimizer.
"""

import argparse

from logger import get_logger, set_level
from optimizer_service import OptimizerService

logger = get_logger('main')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Search for a weekly nurse roster with a genetic algorithm.")
    parser.add_argument("--config", help="Path to config.yaml (default: next to this file)")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible run")
    parser.add_argument("--max-generations", type=int, help="Stop after this many generations")
    parser.add_argument("--time-limit", type=float, help="Stop after this many seconds")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the optimizer and print the best roster found."""
    args = parse_args(argv)
    set_level(args.log_level)

    service = OptimizerService(config_path=args.config)
    if args.seed is not None:
        service.set_setting('seed', args.seed)
    if args.max_generations is not None:
        service.set_stopping('max_generations', args.max_generations)
    if args.time_limit is not None:
        service.set_stopping('time_limit_seconds', args.time_limit)

    logger.info("Starting roster optimization")
    try:
        result = service.optimize()
    except Exception as e:
        logger.error(f"Optimization failed: {e}", exc_info=True)
        raise

    print("------------------Optimized Schedule--------------------")
    print(result.schedule.format_roster())
    if not result.converged:
        print(result.breakdown.format_report())
    print(f"Generations: {result.generations} ({result.stop_reason.value})")
    print(f"Time Taken : {result.elapsed_seconds:.2f}s")
    return 0 if result.converged else 1


if __name__ == "__main__":
    raise SystemExit(main())
