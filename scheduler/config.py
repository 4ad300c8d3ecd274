INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
FIRST_INTERVAL_DAYS = 1   # after the first success
SECOND_INTERVAL_DAYS = 6  # after the second consecutive success
SUCCESS_THRESHOLD = 2     # ratings below this are lapses

# Ratings run 0-3; SM-2 quality runs 0-5. Shift onto 2-5.
QUALITY_OFFSET = 2
MAX_QUALITY = 5
