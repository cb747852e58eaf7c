"""
Pytest fixtures and configuration for roster optimizer tests.
"""

import pytest
import random
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Nurses 0-4 are class A. Each row has one holiday, one or two nights, and every
# night is followed by another night or the holiday (Sunday wraps to Monday).
ZERO_PENALTY_ROWS = [
    "NNHMEME",
    "MMNNHEM",
    "EEMENHE",
    "MMEMMNH",
    "HEMEMMN",
    "NHMMEEM",
    "NHMMEEM",
    "NHMMEEM",
    "NHMMEEM",
    "NHMMEEM",
]


@pytest.fixture
def zero_penalty_rows():
    """A roster satisfying every rule, as duty-letter strings."""
    return list(ZERO_PENALTY_ROWS)


@pytest.fixture
def all_holiday_rows():
    """A roster where every nurse is on holiday every day."""
    return ["HHHHHHH"] * 10


@pytest.fixture
def rng():
    """Seeded generator for reproducible tests."""
    return random.Random(1234)
