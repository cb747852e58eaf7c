# Roster shape
NUM_DAYS = 7
NUM_NURSES = 10

# Duty codes
# M : Morning shift (8:00 am to 2:00 pm)
# E : Evening shift (2:00 pm to 8:00 pm)
# N : Night shift (8:00 pm to 8:00 am)
# H : Holiday
DUTY_CODES = ['M', 'E', 'N', 'H']
WORKING_DUTY_CODES = ['M', 'E', 'N']

# UI display names for duties
DUTY_DISPLAY_NAMES = {'M': 'Morning', 'E': 'Evening', 'N': 'Night', 'H': 'Holiday'}

# Nurse classes, assigned by index range over the nurse pool.
# Class A is the most skilled tier and the only one referenced by the fitness rules.
NURSE_CLASS_COUNTS = {
    'A': 5,
    'B': 3,
    'C': 2,
}
NUM_CLASS_A_NURSES = NURSE_CLASS_COUNTS['A']

# Penalty weights, indexed by constraint category:
# [0]: Exactly one holiday per nurse per week (per missing/extra holiday).
# [1]: Night shift followed by a morning or evening shift (per occurrence, wraps around the week).
# [2]: One or two night shifts per nurse per week.
# [3]: At least one class A nurse on every morning and evening shift.
# [4]: Exactly one class A nurse on the night shift.
# [5]: At least one nurse on every shift of every day.
PENALTY_WEIGHTS = [250, 200, 50, 150, 100, 300]

PENALTY_HOLIDAY = PENALTY_WEIGHTS[0]
PENALTY_FORBIDDEN_PATTERN = PENALTY_WEIGHTS[1]
PENALTY_NIGHT_COUNT = PENALTY_WEIGHTS[2]
PENALTY_CLASS_A_DAY_COVER = PENALTY_WEIGHTS[3]
PENALTY_CLASS_A_NIGHT = PENALTY_WEIGHTS[4]
PENALTY_STAFFING = PENALTY_WEIGHTS[5]

# Night shift count per nurse that carries no penalty
MIN_NIGHTS_PER_WEEK = 1
MAX_NIGHTS_PER_WEEK = 2

# Genetic algorithm parameters
POPULATION_SIZE = 100
ELITE_PERCENT = 10  # Lowest-fitness share copied verbatim into the next generation
PARENT_POOL_DIVISOR = 2  # Parents are drawn from the better 1/PARENT_POOL_DIVISOR of the population

# Crossover roll in [0, CROSSOVER_ROLL): below PARENT1_THRESHOLD copies parent 1,
# below PARENT2_THRESHOLD copies parent 2, anything else draws a fresh duty.
CROSSOVER_ROLL = 100
PARENT1_THRESHOLD = 45
PARENT2_THRESHOLD = 90

# Search termination: stop once the best fitness drops below this value
TARGET_FITNESS = 1

# Feasibility check time budget for the CP-SAT model
FEASIBILITY_TIMEOUT_SECONDS = 10.0

# Progress logging interval (generations)
LOG_EVERY_GENERATIONS = 50
