"""Application constants."""

# List limits (match what the tracker screens show)
MAX_WORKOUTS_LISTED = 100
MAX_SESSIONS_LISTED = 50

# Template limits (workout builder)
MAX_EXERCISES_PER_WORKOUT = 20
MAX_SETS_PER_EXERCISE = 10

DEFAULT_REST_SECONDS = 60
