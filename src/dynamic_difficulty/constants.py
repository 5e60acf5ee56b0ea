"""Identifiers and fixed numbers shared across the pipeline."""

# Modifier type identifiers (also the modifier names in results)
WIN_STREAK = "win_streak"
LOSS_STREAK = "loss_streak"
TIME_DECAY = "time_decay"
RAGE_QUIT = "rage_quit"
COMPLETION_RATE = "completion_rate"
LEVEL_PROGRESS = "level_progress"
SESSION_PATTERN = "session_pattern"

MODIFIER_TYPES_IN_ORDER: tuple[str, ...] = (
    WIN_STREAK,
    LOSS_STREAK,
    TIME_DECAY,
    RAGE_QUIT,
    COMPLETION_RATE,
    LEVEL_PROGRESS,
    SESSION_PATTERN,
)

# Difficulty range defaults
MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0
DEFAULT_DIFFICULTY = 3.0
DEFAULT_MAX_CHANGE = 2.0
DEFAULT_DIMINISHING_FACTOR = 0.6
DEFAULT_AGGREGATION_WEIGHT = 1.0

# Difficulty level bands (upper bounds, inclusive)
EASY_UPPER_BOUND = 3.0
MEDIUM_UPPER_BOUND = 7.0

# Time
HOURS_IN_DAY = 24.0
DAYS_IN_WEEK = 7.0
SECONDS_IN_HOUR = 3600.0
# Stored absences saturate here, well inside timedelta range
MAX_HOURS_AWAY = HOURS_IN_DAY * 365 * 1000

# Changes at or below this magnitude count as "no change"
CHANGE_EPSILON = 0.01

NO_CHANGE_REASON = "No change"
