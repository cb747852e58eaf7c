"""Duty codes and the fixed nurse-class partition.

Nurses are identified by their 0-based index into the roster. Their class is
a pure function of that index: the first NURSE_CLASS_COUNTS['A'] indices are
class A, followed by class B, then class C.
"""

from __future__ import annotations

import random
from enum import Enum

from constants import DUTY_CODES, DUTY_DISPLAY_NAMES, NUM_NURSES, NURSE_CLASS_COUNTS, WORKING_DUTY_CODES


class Duty(str, Enum):
    """One nurse's assignment for one day."""
    MORNING = 'M'
    EVENING = 'E'
    NIGHT = 'N'
    HOLIDAY = 'H'

    @property
    def display_name(self) -> str:
        return DUTY_DISPLAY_NAMES[self.value]

    @property
    def is_working(self) -> bool:
        return self is not Duty.HOLIDAY

    def __str__(self) -> str:
        return self.value


ALL_DUTIES = tuple(Duty(code) for code in DUTY_CODES)
WORKING_DUTIES = tuple(Duty(code) for code in WORKING_DUTY_CODES)

# Duties that may not directly follow a night shift
FORBIDDEN_AFTER_NIGHT = (Duty.MORNING, Duty.EVENING)


def _class_ranges() -> dict[str, range]:
    ranges = {}
    start = 0
    for cls, count in NURSE_CLASS_COUNTS.items():
        ranges[cls] = range(start, start + count)
        start += count
    return ranges


NURSE_CLASS_RANGES = _class_ranges()
CLASS_A_NURSES = tuple(NURSE_CLASS_RANGES['A'])


def nurse_class(index: int) -> str:
    """Return the class ('A', 'B' or 'C') of the nurse at `index`."""
    if not 0 <= index < NUM_NURSES:
        raise ValueError(f"Nurse index {index} outside pool of {NUM_NURSES}")
    for cls, idx_range in NURSE_CLASS_RANGES.items():
        if index in idx_range:
            return cls
    raise ValueError(f"Nurse index {index} has no class assigned")


def is_class_a(index: int) -> bool:
    return index in NURSE_CLASS_RANGES['A']


def parse_duty(value) -> Duty:
    """Convert a duty letter (or Duty) to Duty, raising ValueError otherwise."""
    if isinstance(value, Duty):
        return value
    try:
        return Duty(value)
    except ValueError:
        raise ValueError(f"Unknown duty code: {value!r}") from None


def random_duty(rng: random.Random) -> Duty:
    """Draw one of the four duty codes uniformly at random."""
    return ALL_DUTIES[rng.randrange(len(ALL_DUTIES))]
