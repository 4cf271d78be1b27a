# gift_matching/config.py

# Eligibility matrix cell values (row sums count eligible recipients)
ELIGIBLE = 1
INELIGIBLE = 0

# Solvers
SOLVER_GREEDY = "greedy"
SOLVER_EXACT = "exact"
SOLVERS = (SOLVER_GREEDY, SOLVER_EXACT)
DEFAULT_SOLVER = SOLVER_GREEDY

# Greedy matching is randomized, so a failed attempt may be retried
MAX_MATCH_ATTEMPTS = 25

# Toy data knobs
NUM_PARTICIPANTS_DEFAULT = 8
EXCLUSION_PROBABILITY_DEFAULT = 0.2
NUM_COUPLES_DEFAULT = 2

# Random seed for reproducible toy exchanges
DEFAULT_SEED = 42

# Log level for the package logger
LOG_LEVEL = "INFO"

# Path to participants/exclusions CSV for run_toy.py (if any)
EXCLUSIONS_CSV_PATH = "gift_matching/data_generation/exclusions.csv"
