# Weights are stored as integer "units" so totals stay exact
WEIGHT_SCALE = 1_000_000_000

DEFAULT_LUCK_FACTOR = 1.2
DEFAULT_LUCK = 1.0
DEFAULT_RETRIES = 1

# Clamps applied to every draw
MIN_LUCK = 0.01
MIN_TARGET = 0.001

# HTTP surface limits
SIMULATION_LIMIT = 100_000
RETRY_LIMIT = 1_000

REPORT_PREFIX = "[Lootbag]"
